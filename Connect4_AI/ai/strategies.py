"""Final-choice strategies: each picks one move from the safe set handed over by the pipeline."""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from . import heuristic, move_selector, search_minimax, threats
from ..engine import rules
from ..errors import InvalidConfiguration, SearchTimedOut
from ..utils.timer import SearchBudget

LOGGER = logging.getLogger(__name__)


@dataclass
class SelectionContext:
    board: object
    player: int
    win_length: int
    gravity: bool
    safe_moves: list
    rng: random.Random = field(default_factory=random.Random)
    budget: SearchBudget = field(default_factory=SearchBudget.unlimited)
    max_depth: int = 5
    weights: Optional[dict] = None
    use_transposition: bool = True
    cache: Optional[dict] = None
    zobrist_table: Optional[list] = None


@dataclass
class Selection:
    move: object
    score: Optional[int] = None
    stats: Optional[search_minimax.SearchStats] = None


class Strategy(ABC):
    """Abstract strategy contract."""

    name = "base"

    @abstractmethod
    def select(self, ctx: SelectionContext) -> Selection:
        """Choose one of ctx.safe_moves."""
        raise NotImplementedError

    def _center_first(self, ctx, moves=None):
        moves = ctx.safe_moves if moves is None else moves
        return move_selector.center_closest(moves, ctx.board.rows, ctx.board.cols, ctx.gravity)


class RandomSafeStrategy(Strategy):
    name = "random"

    def select(self, ctx):
        return Selection(ctx.rng.choice(ctx.safe_moves))


class EvaluatorBestStrategy(Strategy):
    """One-ply greedy: play each safe move and keep the best static evaluation."""

    name = "evaluator"

    def select(self, ctx):
        ordered = move_selector.order_moves(ctx.safe_moves, ctx.board.rows, ctx.board.cols, ctx.gravity)
        best_move, best_score = None, None
        for move in ordered:
            with rules.simulate(ctx.board, move, ctx.player, ctx.gravity):
                score = heuristic.evaluate(ctx.board, ctx.player, ctx.win_length, ctx.weights)
            if best_score is None or score > best_score:
                best_move, best_score = move, score
        return Selection(best_move, best_score)


class MinimaxBestStrategy(Strategy):
    name = "minimax"

    def __init__(self, depth=None):
        self.depth = depth

    def select(self, ctx):
        depth = self.depth or ctx.max_depth
        searcher = search_minimax.MinimaxSearcher(
            ctx.board,
            ctx.player,
            ctx.win_length,
            ctx.gravity,
            max_depth=depth,
            budget=ctx.budget,
            weights=ctx.weights,
            use_transposition=ctx.use_transposition,
            cache=ctx.cache,
            zobrist_table=ctx.zobrist_table,
        )
        try:
            move, score = searcher.choose_move(ctx.safe_moves)
        except SearchTimedOut:
            LOGGER.info("search produced no move within budget; falling back to center-most safe move")
            return Selection(self._center_first(ctx), None, searcher.stats)
        return Selection(move, score, searcher.stats)


class ThreatBuilderStrategy(Strategy):
    """Rule-based: set up a double threat if possible, otherwise take the center."""

    name = "threats"

    def select(self, ctx):
        ordered = move_selector.order_moves(ctx.safe_moves, ctx.board.rows, ctx.board.cols, ctx.gravity)
        for move in ordered:
            if threats.count_threats_after(ctx.board, move, ctx.player, ctx.win_length, ctx.gravity) >= 2:
                return Selection(move)
        return Selection(ordered[0])


class WeightedPotentialStrategy(Strategy):
    """Weighted random pick; weight = open windows through the landing cell."""

    name = "weighted"

    def select(self, ctx):
        weights = []
        for move in ctx.safe_moves:
            row, col = rules.target_cell(ctx.board, move, ctx.gravity)
            weights.append(
                heuristic.open_windows_through(ctx.board, row, col, ctx.player, ctx.win_length, ctx.gravity)
            )
        if sum(weights) == 0:
            return Selection(ctx.rng.choice(ctx.safe_moves))
        return Selection(ctx.rng.choices(ctx.safe_moves, weights=weights, k=1)[0])


STRATEGIES = {
    RandomSafeStrategy.name: RandomSafeStrategy,
    EvaluatorBestStrategy.name: EvaluatorBestStrategy,
    MinimaxBestStrategy.name: MinimaxBestStrategy,
    ThreatBuilderStrategy.name: ThreatBuilderStrategy,
    WeightedPotentialStrategy.name: WeightedPotentialStrategy,
}


def make_strategy(kind, depth=None):
    try:
        cls = STRATEGIES[kind]
    except KeyError:
        raise InvalidConfiguration(f"unknown strategy {kind!r}; expected one of {sorted(STRATEGIES)}") from None
    if cls is MinimaxBestStrategy:
        return cls(depth)
    return cls()
