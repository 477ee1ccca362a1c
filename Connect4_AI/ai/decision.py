"""Four-stage move selection: win now, must block, filter traps, then delegate to a strategy."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from . import move_selector, threats, transposition
from .search_minimax import SearchStats
from .strategies import SelectionContext, Strategy, make_strategy
from ..Board import Board, EMPTY, PLAYER_ONE, PLAYER_TWO, PLAYERS
from ..engine import rules
from ..errors import IllegalMoveRequested, InvalidConfiguration, NoLegalMoves
from ..utils.settings import EngineConfig
from ..utils.timer import SearchBudget

LOGGER = logging.getLogger(__name__)


class Stage(str, Enum):
    OPENING = "opening"
    WIN_NOW = "win_now"
    MUST_BLOCK = "must_block"
    FORK_BLOCK = "fork_block"
    SAFE_FALLBACK = "safe_fallback"
    STRATEGY = "strategy"


@dataclass(frozen=True)
class Decision:
    move: object
    stage: Stage
    score: Optional[int] = None
    stats: Optional[SearchStats] = None


def board_from_view(view) -> Board:
    """Validate a snapshot and copy it into a private working board."""
    cells = view.cells
    if not cells or not cells[0]:
        raise InvalidConfiguration("board must have at least one row and one column")
    try:
        board = Board.from_rows([list(row) for row in cells])
    except ValueError as exc:
        raise InvalidConfiguration(str(exc)) from exc

    if view.current_player not in PLAYERS:
        raise InvalidConfiguration(f"current player must be 1 or 2, got {view.current_player!r}")
    win_length = view.win_length
    if isinstance(win_length, bool) or not isinstance(win_length, int) or win_length < 2:
        raise InvalidConfiguration(f"win_length must be an integer >= 2, got {win_length!r}")
    if win_length > max(board.rows, board.cols):
        raise InvalidConfiguration(
            f"win_length {win_length} does not fit on a {board.rows}x{board.cols} board"
        )
    if view.history_length < 0:
        raise InvalidConfiguration("history length cannot be negative")

    if view.gravity:
        for r in range(board.rows - 1):
            for c in range(board.cols):
                if board.cells[r][c] != EMPTY and board.cells[r + 1][c] == EMPTY:
                    raise InvalidConfiguration(f"floating token at ({r}, {c}) in gravity mode")

    ones, twos = board.count(PLAYER_ONE), board.count(PLAYER_TWO)
    if abs(ones - twos) > 1:
        raise InvalidConfiguration(f"token counts {ones}/{twos} cannot come from alternating play")
    if ones != twos:
        behind = PLAYER_ONE if ones < twos else PLAYER_TWO
        if view.current_player != behind:
            raise InvalidConfiguration(f"player {behind} has fewer tokens and must be the one to move")
    return board


class DecisionPipeline:
    """Runs the stages in order; the first one that yields a move wins."""

    def __init__(self, config=None, *, strategy: Strategy | None = None, rng=None, weights=None, cache=None, zobrist_table=None, cancel=None):
        self.config = (config or EngineConfig()).validate()
        self.strategy = strategy or make_strategy(self.config.strategy, self.config.max_depth)
        self.rng = rng or random.Random(self.config.seed)
        self.weights = weights
        self.cache = cache
        self.zobrist_table = zobrist_table
        self.cancel = cancel

    def select_move(self, view):
        return self.decide(view).move

    def decide(self, view) -> Decision:
        if hasattr(view, "view") and callable(view.view):
            view = view.view()
        if self.config.win_length is not None and self.config.win_length != view.win_length:
            raise InvalidConfiguration(
                f"configured win_length {self.config.win_length} disagrees with the position's {view.win_length}"
            )

        board = board_from_view(view)
        me = view.current_player
        n = view.win_length
        gravity = view.gravity

        moves = rules.legal_moves(board, gravity)
        if not moves:
            raise NoLegalMoves("board is full")
        if rules.find_winner(board, n) is not None:
            raise NoLegalMoves("game is already decided")

        if view.history_length == 0 and board.move_count == 0:
            center = board.cols // 2 if gravity else (board.rows // 2, board.cols // 2)
            return self._done(Decision(center, Stage.OPENING))

        wins = threats.immediate_wins(board, me, n, gravity, moves)
        if wins:
            return self._done(Decision(self.rng.choice(wins), Stage.WIN_NOW))

        blocks = threats.forced_blocks(board, me, n, gravity, moves)
        if blocks:
            return self._done(Decision(self.rng.choice(blocks), Stage.MUST_BLOCK))

        safe = threats.safe_moves(board, me, n, gravity, moves)
        fork_targets = threats.find_fork_threats(
            board,
            me,
            gravity,
            win_length=n,
            history_length=view.history_length,
            min_moves=self.config.fork_min_moves,
        )
        for target in fork_targets:
            if target in safe:
                return self._done(Decision(target, Stage.FORK_BLOCK))

        if not safe:
            fallback = move_selector.center_closest(moves, board.rows, board.cols, gravity)
            return self._done(Decision(fallback, Stage.SAFE_FALLBACK))
        if len(safe) == 1:
            return self._done(Decision(safe[0], Stage.STRATEGY))

        if self.cache is not None and self.zobrist_table is None:
            self.zobrist_table = transposition.zobrist_init(board.rows, board.cols)

        ctx = SelectionContext(
            board=board,
            player=me,
            win_length=n,
            gravity=gravity,
            safe_moves=safe,
            rng=self.rng,
            budget=SearchBudget(self.config.time_budget, self.config.node_budget, self.cancel),
            max_depth=self.config.max_depth,
            weights=self.weights,
            use_transposition=self.config.use_transposition,
            cache=self.cache,
            zobrist_table=self.zobrist_table,
        )
        selection = self.strategy.select(ctx)
        if selection.move not in safe:
            raise IllegalMoveRequested(
                f"strategy {self.strategy.name!r} returned {selection.move!r}, outside the safe set {safe}"
            )
        return self._done(Decision(selection.move, Stage.STRATEGY, selection.score, selection.stats))

    def _done(self, decision):
        LOGGER.debug("stage %s chose %s", decision.stage.value, decision.move)
        return decision


def select_move(view, config=None, **kwargs):
    """Single entry point: one move for the side to move in `view`.

    Raises NoLegalMoves when the game cannot continue and InvalidConfiguration
    for malformed settings or positions.
    """
    return DecisionPipeline(config, **kwargs).select_move(view)
