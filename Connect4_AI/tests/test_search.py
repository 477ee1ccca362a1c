"""Alpha-beta correctness, board restoration, budgets, and TT key shape."""

import logging
import random

import pytest

from Connect4_AI.Board import Board
from Connect4_AI.GameState import GameState
from Connect4_AI.ai import heuristic, move_selector, search_minimax, transposition
from Connect4_AI.engine import rules
from Connect4_AI.errors import NoLegalMoves, SearchTimedOut
from Connect4_AI.utils.timer import SearchBudget

WIN = search_minimax.WIN_SCORE


def plain_minimax(board, me, depth, is_max, win_length, last_cell=None):
    """Unpruned reference search with the same node order as the engine."""
    opp = 3 - me
    last_mover = opp if is_max else me
    if last_cell is not None:
        if rules.detect_win(board, last_cell[0], last_cell[1], last_mover, win_length):
            return WIN if last_mover == me else -WIN
    else:
        winner = rules.find_winner(board, win_length)
        if winner is not None:
            return WIN if winner == me else -WIN
    if depth == 0:
        return heuristic.evaluate(board, me, win_length)
    moves = rules.legal_moves(board)
    if not moves:
        return 0
    mover = me if is_max else opp
    scores = []
    for mv in moves:
        with rules.simulate(board, mv, mover) as cell:
            scores.append(plain_minimax(board, me, depth - 1, not is_max, win_length, cell))
    return max(scores) if is_max else min(scores)


def _random_position(rng, rows, cols, win_length, max_moves):
    state = GameState.new(rows, cols, win_length)
    for _ in range(rng.randint(0, max_moves)):
        moves = state.legal_moves()
        if not moves:
            break
        state.apply(rng.choice(moves))
    if state.is_terminal().is_over:
        state.undo()
    return state


@pytest.mark.parametrize("win_length", [3, 4])
@pytest.mark.parametrize("use_tt", [False, True])
def test_alpha_beta_matches_plain_minimax(win_length, use_tt):
    rng = random.Random(7 + win_length)
    for _ in range(10):
        state = _random_position(rng, 4, 4, win_length, 10)
        if not state.legal_moves():
            continue
        me = state.current_player
        for depth in (1, 2, 4, 6):
            board = state.board.clone()
            expected = plain_minimax(board, me, depth, True, win_length)
            searcher = search_minimax.MinimaxSearcher(
                board, me, win_length, max_depth=depth, use_transposition=use_tt
            )
            got = searcher.minimax(depth, True, -search_minimax.INF, search_minimax.INF)
            assert got == expected
            assert board == state.board


def test_search_restores_board():
    b = Board()
    for r, c, p in [(5, 3, 1), (5, 2, 2), (4, 3, 1)]:
        b.place(r, c, p)
    before = b.clone()
    move, score, stats = search_minimax.choose_move(b, 2, 4)
    assert move in rules.legal_moves(b)
    assert stats.nodes > 0
    assert b == before


def test_board_restored_when_evaluation_fails(monkeypatch):
    b = Board()
    b.place(5, 3, 1)
    before = b.clone()
    calls = {"n": 0}

    def flaky(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] > 5:
            raise RuntimeError("evaluation failed")
        return 0

    monkeypatch.setattr(heuristic, "evaluate", flaky)
    with pytest.raises(RuntimeError):
        search_minimax.choose_move(b, 2, 3)
    assert b == before


def test_prefers_immediate_win():
    b = Board()
    for c in range(3):
        b.place(5, c, 1)
        b.place(4, c, 2)
    move, score, stats = search_minimax.choose_move(b, 1, 3)
    assert move == 3
    assert score == WIN
    assert stats.depth_reached == 1


def test_node_budget_cut_keeps_last_completed_iteration():
    b = Board()
    b.place(5, 3, 1)
    before = b.clone()
    budget = SearchBudget(node_budget=50)
    move, score, stats = search_minimax.choose_move(b, 2, 8, budget=budget)
    assert move in rules.legal_moves(b)
    assert stats.timed_out
    assert 1 <= stats.depth_reached < 8
    assert budget.exhausted
    assert b == before


def test_time_budget_cut_still_returns_a_move():
    b = Board()
    budget = SearchBudget(time_budget=0.2)
    move, _, stats = search_minimax.choose_move(b, 1, 42, budget=budget)
    assert move in rules.legal_moves(b)
    assert stats.timed_out


def test_zero_progress_raises_timeout():
    b = Board()
    before = b.clone()
    with pytest.raises(SearchTimedOut):
        search_minimax.choose_move(b, 1, 3, budget=SearchBudget(cancel=lambda: True))
    assert b == before


def test_no_candidates_raises():
    b = Board(rows=1, cols=2)
    b.place(0, 0, 1)
    b.place(0, 1, 2)
    with pytest.raises(NoLegalMoves):
        search_minimax.choose_move(b, 1, 2)


def test_transposition_on_and_off_agree():
    rng = random.Random(99)
    for _ in range(5):
        state = _random_position(rng, 6, 7, 4, 12)
        if not state.legal_moves():
            continue
        me = state.current_player
        _, with_tt, _ = search_minimax.choose_move(state.board.clone(), me, 4, use_transposition=True)
        _, without_tt, _ = search_minimax.choose_move(state.board.clone(), me, 4, use_transposition=False)
        assert with_tt == without_tt


def test_transposition_key_includes_player():
    b = Board()
    b.place(5, 3, 1)
    ztable = transposition.zobrist_init(b.rows, b.cols, seed=1)
    cache = {}
    search_minimax.choose_move(b, 2, 2, cache=cache, zobrist_table=ztable)
    assert cache, "Expected TT cache to be populated"
    for key, entry in cache.items():
        assert isinstance(key, tuple) and len(key) == 3
        assert key[1] in (1, 2)
        assert key[2] == 2
        assert entry[2] in (transposition.EXACT, transposition.LOWER, transposition.UPPER)


def test_standalone_minimax_call():
    b = Board()
    for c in range(3):
        b.place(5, c, 1)
        b.place(4, c, 2)
    assert search_minimax.minimax(b, 1, 1, True) == WIN
    # P2 to move must block at column 3 or lose
    assert search_minimax.minimax(b, 2, 2, True) > -WIN


def test_cache_shared_by_both_sides_matches_fresh_search():
    rng = random.Random(4)
    ztable = transposition.zobrist_init(6, 7, seed=4)
    for _ in range(15):
        state = _random_position(rng, 6, 7, 4, 14)
        if not state.legal_moves():
            continue
        cache = {}
        me = state.current_player
        move, shared, _ = search_minimax.choose_move(
            state.board.clone(), me, 4, cache=cache, zobrist_table=ztable
        )
        _, fresh, _ = search_minimax.choose_move(state.board.clone(), me, 4, use_transposition=False)
        assert shared == fresh

        state.apply(move)
        if state.is_terminal().is_over:
            continue
        _, shared, _ = search_minimax.choose_move(
            state.board.clone(), 3 - me, 4, cache=cache, zobrist_table=ztable
        )
        _, fresh, _ = search_minimax.choose_move(state.board.clone(), 3 - me, 4, use_transposition=False)
        assert shared == fresh


def test_candidates_come_center_out_with_preferred_first():
    b = Board()
    for r in range(6):
        b.place(r, 3, 1 + r % 2)
    assert move_selector.generate_candidates(b) == [2, 4, 1, 5, 0, 6]
    assert move_selector.generate_candidates(b, first=6) == [6, 2, 4, 1, 5, 0]


def test_budget_cut_is_logged_with_time_left(caplog):
    caplog.set_level(logging.INFO, logger="Connect4_AI.ai.search_minimax")
    b = Board()
    search_minimax.choose_move(b, 1, 8, budget=SearchBudget(time_budget=60.0, node_budget=30))
    cut = [r.getMessage() for r in caplog.records if "search cut" in r.getMessage()]
    assert cut and "s left" in cut[0]
    assert "None s left" not in cut[0]
