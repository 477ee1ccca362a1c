"""Minimax with alpha-beta pruning, center-out ordering, and iterative deepening under a budget."""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional

from . import heuristic
from . import move_selector
from . import transposition
from ..Board import opponent
from ..engine import rules
from ..errors import NoLegalMoves, SearchTimedOut
from ..utils.timer import SearchBudget

LOGGER = logging.getLogger(__name__)

INF = 10 ** 9
WIN_SCORE = 1_000_000  # terminal sentinel, independent of remaining depth


@dataclass
class SearchStats:
    depth_reached: int = 0
    nodes: int = 0
    elapsed: float = 0.0
    timed_out: bool = False
    best_score: Optional[int] = None


class MinimaxSearcher:
    """Encapsulates the state and logic for a minimax search.

    The searcher owns no copy of the position: it plays candidate moves on
    `board` and takes them back, so `board` must not be touched by anyone
    else while a search runs.
    """

    def __init__(
        self,
        board,
        player,
        win_length=4,
        gravity=True,
        max_depth=5,
        *,
        budget=None,
        weights=None,
        use_transposition=True,
        cache=None,
        zobrist_table=None,
    ):
        self.board = board
        self.player = player
        self.opp = opponent(player)
        self.win_length = win_length
        self.gravity = gravity
        self.max_depth = max_depth
        self.budget = budget or SearchBudget.unlimited()
        self.weights = weights or heuristic.DEFAULT_WEIGHTS

        self.cache = None
        self.zobrist_table = None
        if use_transposition:
            self.cache = {} if cache is None else cache
            self.zobrist_table = (
                transposition.zobrist_init(board.rows, board.cols) if zobrist_table is None else zobrist_table
            )
        self._hash = transposition.hash_board(board, self.zobrist_table) if self.zobrist_table else 0

        # Internal state
        self.node_counter = 0
        self.pv_move = None
        self.stats = SearchStats()
        self._partial_best = None

    def choose_move(self, candidates=None):
        """
        Return (best move, score) among `candidates` (default: all legal moves),
        deepening one ply at a time until max_depth or the budget runs out.
        """
        root_moves = list(candidates) if candidates is not None else rules.legal_moves(self.board, self.gravity)
        if not root_moves:
            raise NoLegalMoves("no legal moves to search")

        start = time.monotonic()
        best_move, best_score = None, None
        for current_depth in range(1, self.max_depth + 1):
            try:
                move, score = self._search_root(root_moves, current_depth)
            except SearchTimedOut as exc:
                self.stats.timed_out = True
                LOGGER.info(
                    "search cut at depth %d after %d nodes (%s s left): %s",
                    current_depth,
                    self.node_counter,
                    self.budget.remaining(),
                    exc,
                )
                if best_move is None and self._partial_best is not None:
                    best_move, best_score = self._partial_best
                break

            best_move, best_score = move, score
            self.pv_move = move  # Principal variation move for next iteration
            self.stats.depth_reached = current_depth
            LOGGER.debug(
                "depth %d: move=%s score=%d nodes=%d elapsed=%.3fs",
                current_depth,
                move,
                score,
                self.node_counter,
                time.monotonic() - start,
            )
            if abs(score) >= WIN_SCORE:
                break

        self.stats.nodes = self.node_counter
        self.stats.elapsed = time.monotonic() - start
        self.stats.best_score = best_score
        if best_move is None:
            raise SearchTimedOut("budget exhausted before any root move was evaluated")
        return best_move, best_score

    def _search_root(self, root_moves, depth):
        self._partial_best = None
        ordered = move_selector.order_moves(
            root_moves, self.board.rows, self.board.cols, self.gravity, first=self.pv_move
        )
        alpha = -INF
        best_move, best_score = None, -INF
        for move in ordered:
            with self._play(move, self.player) as cell:
                score = self.minimax(depth - 1, False, alpha, INF, last_cell=cell)
            if score > best_score:
                best_score = score
                best_move = move
                self._partial_best = (best_move, best_score)
            alpha = max(alpha, best_score)
        return best_move, best_score

    @contextmanager
    def _play(self, move, player):
        with rules.simulate(self.board, move, player, self.gravity) as (row, col):
            key = 0
            if self.zobrist_table is not None:
                key = transposition.cell_key(self.zobrist_table, self.board.cols, row, col, player)
            self._hash ^= key
            try:
                yield row, col
            finally:
                self._hash ^= key

    def minimax(self, depth, is_maximizing, alpha, beta, last_cell=None):
        """Score of the current position from `player`'s point of view.

        `last_cell` is the cell filled by the move that led here; a line
        through it ends the game. Without it the whole board is scanned.
        """
        self._tick()

        last_mover = self.opp if is_maximizing else self.player
        if last_cell is not None:
            if rules.detect_win(self.board, last_cell[0], last_cell[1], last_mover, self.win_length):
                return WIN_SCORE if last_mover == self.player else -WIN_SCORE
        else:
            winner = rules.find_winner(self.board, self.win_length)
            if winner is not None:
                return WIN_SCORE if winner == self.player else -WIN_SCORE

        if depth == 0:
            return heuristic.evaluate(self.board, self.player, self.win_length, self.weights)

        node_player = self.player if is_maximizing else self.opp
        # Stored scores are from self.player's side.
        key = (self._hash, node_player, self.player)
        tt_move = None
        alpha_orig, beta_orig = alpha, beta
        if self.cache is not None:
            cached = transposition.lookup(self.cache, key)
            if cached:
                cached_depth, cached_score, cached_flag, tt_move = cached
                if cached_depth >= depth:
                    if cached_flag == transposition.EXACT:
                        return cached_score
                    if cached_flag == transposition.LOWER:
                        alpha = max(alpha, cached_score)
                    elif cached_flag == transposition.UPPER:
                        beta = min(beta, cached_score)
                    if alpha >= beta:
                        return cached_score

        ordered = move_selector.generate_candidates(self.board, self.gravity, first=tt_move)
        if not ordered:
            return 0
        best_score = -INF if is_maximizing else INF
        best_move = None
        for move in ordered:
            with self._play(move, node_player) as cell:
                score = self.minimax(depth - 1, not is_maximizing, alpha, beta, last_cell=cell)

            if is_maximizing:
                if score > best_score:
                    best_score = score
                    best_move = move
                alpha = max(alpha, best_score)
            else:
                if score < best_score:
                    best_score = score
                    best_move = move
                beta = min(beta, best_score)

            if beta <= alpha:
                break

        if self.cache is not None:
            flag = transposition.bound_flag(best_score, alpha_orig, beta_orig)
            transposition.store(self.cache, key, depth, best_score, flag, best_move)
        return best_score

    def _tick(self):
        self.node_counter += 1
        self.budget.tick()


def minimax(board, player, depth, is_maximizing, alpha=-INF, beta=INF, *, win_length=4, gravity=True, weights=None):
    """Stand-alone alpha-beta call on `board` (no transposition table, no budget)."""
    searcher = MinimaxSearcher(
        board, player, win_length, gravity, max_depth=max(depth, 1), weights=weights, use_transposition=False
    )
    return searcher.minimax(depth, is_maximizing, alpha, beta)


def choose_move(board, player, depth, *, win_length=4, gravity=True, budget=None, candidates=None, weights=None, cache=None, zobrist_table=None, use_transposition=True):
    """
    Public function to start a search. Instantiates and uses MinimaxSearcher.
    Returns (move, score, stats).
    """
    searcher = MinimaxSearcher(
        board,
        player,
        win_length,
        gravity,
        max_depth=depth,
        budget=budget,
        weights=weights,
        use_transposition=use_transposition,
        cache=cache,
        zobrist_table=zobrist_table,
    )
    move, score = searcher.choose_move(candidates)
    return move, score, searcher.stats
