"""Reference game runtime: board + side to move + history + cached terminal status."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .Board import Board, EMPTY, PLAYER_ONE, opponent
from .engine import rules
from .errors import IllegalMoveRequested, InvalidConfiguration


@dataclass(frozen=True)
class TerminalStatus:
    kind: str = "none"  # "none" | "win" | "draw"
    winner: Optional[int] = None

    @property
    def is_over(self) -> bool:
        return self.kind != "none"


ONGOING = TerminalStatus()
DRAW = TerminalStatus("draw")


@dataclass(frozen=True)
class GameStateView:
    """Read-only snapshot handed to the decision engine."""

    cells: Tuple[Tuple[int, ...], ...]
    current_player: int = PLAYER_ONE
    win_length: int = 4
    gravity: bool = True
    history_length: int = 0

    @classmethod
    def from_rows(cls, rows, current_player=None, win_length=4, gravity=True, history_length=None) -> "GameStateView":
        """Snapshot plain nested lists. Missing player/history are derived from token counts."""
        try:
            cells = tuple(tuple(int(v) for v in row) for row in rows)
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration("board rows must be sequences of integers") from exc
        tokens = sum(1 for row in cells for v in row if v != EMPTY)
        if current_player is None:
            ones = sum(row.count(1) for row in cells)
            twos = sum(row.count(2) for row in cells)
            current_player = PLAYER_ONE if ones <= twos else opponent(PLAYER_ONE)
        if history_length is None:
            history_length = tokens
        return cls(cells, current_player, win_length, gravity, history_length)

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0]) if self.cells else 0


@dataclass
class GameState:
    board: Board = field(default_factory=Board)
    current_player: int = PLAYER_ONE
    win_length: int = 4
    gravity: bool = True
    history: List[tuple] = field(default_factory=list)
    terminal: TerminalStatus = ONGOING
    _terminal_stack: List[TerminalStatus] = field(default_factory=list, repr=False)

    @classmethod
    def new(cls, rows=6, cols=7, win_length=4, gravity=True, first_player=PLAYER_ONE) -> "GameState":
        return cls(Board(rows, cols), first_player, win_length, gravity)

    def legal_moves(self):
        if self.terminal.is_over:
            return []
        return rules.legal_moves(self.board, self.gravity)

    def is_terminal(self) -> TerminalStatus:
        return self.terminal

    def apply(self, move) -> "GameState":
        """Play `move` for the side to move; raise IllegalMoveRequested if it cannot be played."""
        if self.terminal.is_over:
            raise IllegalMoveRequested("game is already over")
        row, col = rules.target_cell(self.board, move, self.gravity)
        player = self.current_player
        self.board.place(row, col, player)
        self.history.append(move)
        self._terminal_stack.append(self.terminal)

        if rules.detect_win(self.board, row, col, player, self.win_length):
            self.terminal = TerminalStatus("win", player)
        elif self.board.is_full():
            self.terminal = DRAW
        self.current_player = opponent(player)
        return self

    def undo(self) -> "GameState":
        if not self.history:
            raise IllegalMoveRequested("no move to undo")
        self.board.remove_last()
        self.history.pop()
        self.terminal = self._terminal_stack.pop()
        self.current_player = opponent(self.current_player)
        return self

    def clone(self) -> "GameState":
        return GameState(
            self.board.clone(),
            self.current_player,
            self.win_length,
            self.gravity,
            self.history[:],
            self.terminal,
            self._terminal_stack[:],
        )

    def view(self) -> GameStateView:
        return GameStateView(
            self.board.snapshot(),
            self.current_player,
            self.win_length,
            self.gravity,
            len(self.history),
        )
