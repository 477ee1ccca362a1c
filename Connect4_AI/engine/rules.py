"""Connection rules: move targets, win detection through a placed token, simulation."""

from contextlib import contextmanager

from ..Board import Board, EMPTY, PLAYERS
from ..errors import IllegalMoveRequested

# Horizontal, vertical, and the two diagonals.
DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))


def _count_dir(board: Board, row: int, col: int, dr: int, dc: int, player: int, limit: int) -> int:
    """Count contiguous tokens of player from (row, col) (exclusive) in (dr, dc), up to limit."""
    count = 0
    r, c = row + dr, col + dc
    while count < limit and board.in_bounds(r, c) and board.cells[r][c] == player:
        count += 1
        r += dr
        c += dc
    return count


def line_length(board: Board, row: int, col: int, dr: int, dc: int, player: int, limit: int) -> int:
    forward = _count_dir(board, row, col, dr, dc, player, limit)
    backward = _count_dir(board, row, col, -dr, -dc, player, limit)
    return 1 + forward + backward


def detect_win(board: Board, last_row: int, last_col: int, player: int, win_length: int) -> bool:
    """True if the token at (last_row, last_col) completes a run of at least win_length.

    Assumes the cell already holds `player`'s token.
    """
    reach = win_length - 1
    for dr, dc in DIRECTIONS:
        if line_length(board, last_row, last_col, dr, dc, player, reach) >= win_length:
            return True
    return False


def find_winner(board: Board, win_length: int):
    """Scan every occupied cell for a completed run; return the player or None."""
    for r in range(board.rows):
        for c in range(board.cols):
            player = board.cells[r][c]
            if player != EMPTY and detect_win(board, r, c, player, win_length):
                return player
    return None


def target_cell(board: Board, move, gravity: bool = True):
    """Resolve a move to the (row, col) it would occupy; raise IllegalMoveRequested if unreachable."""
    if gravity:
        if isinstance(move, bool) or not isinstance(move, int):
            raise IllegalMoveRequested(f"gravity moves are column indices, got {move!r}")
        row = board.drop_row(move)
        if row is None:
            raise IllegalMoveRequested(f"column {move} is full or out of bounds")
        return row, move

    try:
        row, col = move
    except (TypeError, ValueError) as exc:
        raise IllegalMoveRequested(f"free-placement moves are (row, col) pairs, got {move!r}") from exc
    if not board.in_bounds(row, col):
        raise IllegalMoveRequested(f"cell ({row}, {col}) out of bounds")
    if board.cells[row][col] != EMPTY:
        raise IllegalMoveRequested(f"cell ({row}, {col}) already occupied")
    return row, col


def legal_moves(board: Board, gravity: bool = True) -> list:
    """Columns with an empty top cell (gravity) or every empty cell (free placement).

    An empty list means the board is full; callers treat that as a draw.
    """
    if gravity:
        return [c for c in range(board.cols) if board.cells[0][c] == EMPTY]
    return [(r, c) for r in range(board.rows) for c in range(board.cols) if board.cells[r][c] == EMPTY]


def move_for_cell(row: int, col: int, gravity: bool = True):
    """Inverse of target_cell for a reachable cell."""
    return col if gravity else (row, col)


@contextmanager
def simulate(board: Board, move, player: int, gravity: bool = True):
    """Place `player`'s token for `move`, yield the cell, and always take it back."""
    if player not in PLAYERS:
        raise ValueError("player must be 1 or 2")
    row, col = target_cell(board, move, gravity)
    board._push_stone(row, col, player)
    try:
        yield row, col
    finally:
        board._pop_stone(row, col)


def is_win_after_move(board: Board, move, player: int, win_length: int, gravity: bool = True) -> bool:
    """Would playing `move` give `player` a completed line? Board is left untouched."""
    with simulate(board, move, player, gravity) as (row, col):
        return detect_win(board, row, col, player, win_length)
