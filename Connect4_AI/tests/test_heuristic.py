"""Window scoring, static evaluation, and landing-cell potential."""

from Connect4_AI.Board import Board
from Connect4_AI.ai import heuristic


def test_score_window_tiers():
    w = heuristic.DEFAULT_WEIGHTS
    assert heuristic.score_window([1, 1, 1, 1], 1, 4) == w["own_line"]
    assert heuristic.score_window([1, 1, 0, 1], 1, 4) == w["own_open_one"]
    assert heuristic.score_window([0, 1, 1, 0], 1, 4) == w["own_open_two"]
    assert heuristic.score_window([2, 2, 2, 0], 1, 4) == w["opp_open_one"]
    assert heuristic.score_window([2, 0, 0, 2], 1, 4) == w["opp_open_two"]
    assert heuristic.score_window([1, 2, 0, 0], 1, 4) == 0
    assert heuristic.score_window([0, 0, 0, 0], 1, 4) == 0


def test_opponent_threats_outweigh_own():
    w = heuristic.DEFAULT_WEIGHTS
    assert abs(w["opp_open_one"]) > w["own_open_one"]
    mixed = heuristic.score_window([1, 1, 1, 0], 1, 4) + heuristic.score_window([2, 2, 2, 0], 1, 4)
    assert mixed < 0


def test_window_count_on_standard_board():
    # 24 horizontal, 21 vertical, 12 per diagonal
    assert len(heuristic.windows(6, 7, 4)) == 69


def test_empty_board_is_neutral():
    b = Board()
    assert heuristic.evaluate(b, 1) == 0
    assert heuristic.evaluate(b, 2) == 0


def test_center_column_bonus():
    b = Board()
    b.place(5, 3, 1)
    center = heuristic.DEFAULT_WEIGHTS["center"]
    assert heuristic.evaluate(b, 1) == center
    assert heuristic.evaluate(b, 2) == -center

    edge = Board()
    edge.place(5, 0, 1)
    assert heuristic.evaluate(edge, 1) == 0


def test_evaluate_favors_the_stronger_side():
    b = Board()
    for r, c, p in [(5, 3, 1), (5, 2, 2), (4, 3, 1), (5, 4, 2), (3, 3, 1)]:
        b.place(r, c, p)
    assert heuristic.evaluate(b, 1) > 0 > heuristic.evaluate(b, 2)


def test_open_windows_through_landing_cell():
    b = Board()
    # 4 horizontal + one window on each diagonal; the vertical window floats
    assert heuristic.open_windows_through(b, 5, 3, 1) == 6
    b.place(5, 0, 2)
    assert heuristic.open_windows_through(b, 5, 3, 1) == 5


def test_load_weights_defaults_and_overrides(tmp_path):
    assert heuristic.load_weights(tmp_path / "missing.yaml") == heuristic.DEFAULT_WEIGHTS

    path = tmp_path / "weights.yaml"
    path.write_text("weights:\n  center: 7\n  unknown: 1\n", encoding="utf-8")
    weights = heuristic.load_weights(path)
    assert weights["center"] == 7
    assert "unknown" not in weights
    assert weights["own_line"] == heuristic.DEFAULT_WEIGHTS["own_line"]


def test_packaged_weights_match_defaults():
    assert heuristic.load_weights() == heuristic.DEFAULT_WEIGHTS
