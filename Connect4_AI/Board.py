"""Board state container for gravity and free-placement connection games."""

from .errors import IllegalMoveRequested

EMPTY = 0
PLAYER_ONE = 1
PLAYER_TWO = 2
PLAYERS = (PLAYER_ONE, PLAYER_TWO)


def opponent(player):
    return PLAYER_TWO if player == PLAYER_ONE else PLAYER_ONE


class Board:
    def __init__(self, rows=6, cols=7):
        # Row 0 is the top of the board; gravity drops fill from rows - 1 upwards.
        if rows < 1 or cols < 1:
            raise ValueError("board needs at least one row and one column")
        self.rows = rows
        self.cols = cols
        self.cells = [[EMPTY] * cols for _ in range(rows)]
        self.move_count = 0
        self.history = []

    @classmethod
    def from_rows(cls, rows):
        """Build a board from nested lists (top row first). History is unknown, so it stays empty."""
        if not rows or not rows[0]:
            raise ValueError("board rows must be non-empty")
        board = cls(len(rows), len(rows[0]))
        for r, row in enumerate(rows):
            if len(row) != board.cols:
                raise ValueError("board rows must all have the same length")
            for c, value in enumerate(row):
                if value not in (EMPTY, PLAYER_ONE, PLAYER_TWO):
                    raise ValueError(f"unknown cell value {value!r} at ({r}, {c})")
                board.cells[r][c] = value
                if value != EMPTY:
                    board.move_count += 1
        return board

    def in_bounds(self, row, col):
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_empty(self, row, col):
        return self.in_bounds(row, col) and self.cells[row][col] == EMPTY

    def is_full(self):
        return self.move_count >= self.rows * self.cols

    def drop_row(self, col):
        """Row a token dropped into `col` would land on, or None if the column is full."""
        if not 0 <= col < self.cols:
            return None
        for row in range(self.rows - 1, -1, -1):
            if self.cells[row][col] == EMPTY:
                return row
        return None

    def place(self, row, col, player):
        """Place a token; raise if out of bounds, occupied, or not a player."""
        if player not in PLAYERS:
            raise ValueError("player must be 1 or 2")
        if not self.in_bounds(row, col):
            raise IllegalMoveRequested(f"cell ({row}, {col}) out of bounds")
        if self.cells[row][col] != EMPTY:
            raise IllegalMoveRequested(f"cell ({row}, {col}) already occupied")
        self._push_stone(row, col, player)

    def remove_last(self):
        if not self.history:
            raise IllegalMoveRequested("no move to undo")
        row, col = self.history[-1]
        self._pop_stone(row, col)
        return row, col

    def _push_stone(self, row, col, player):
        self.cells[row][col] = player
        self.move_count += 1
        self.history.append((row, col))

    def _pop_stone(self, row, col):
        self.cells[row][col] = EMPTY
        self.move_count -= 1
        self.history.pop()

    def clone(self):
        new_board = Board(self.rows, self.cols)
        new_board.cells = [row[:] for row in self.cells]
        new_board.move_count = self.move_count
        new_board.history = self.history[:]
        return new_board

    def snapshot(self):
        """Immutable copy of the cells (top row first)."""
        return tuple(tuple(row) for row in self.cells)

    def count(self, player):
        return sum(row.count(player) for row in self.cells)

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells and self.history == other.history

    def __repr__(self):
        symbols = {EMPTY: ".", PLAYER_ONE: "X", PLAYER_TWO: "O"}
        lines = ["".join(symbols[v] for v in row) for row in self.cells]
        return "Board(\n  " + "\n  ".join(lines) + "\n)"
