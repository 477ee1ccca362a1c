"""Window-based position evaluation for connection games (open twos, open threes, lines)."""

from functools import lru_cache
from pathlib import Path

import yaml

from ..Board import EMPTY, opponent
from ..engine.rules import DIRECTIONS

# Default weights; can be overridden by loading config/weights.yaml.
DEFAULT_WEIGHTS = {
    "own_line": 100000,
    "own_open_one": 50,
    "own_open_two": 10,
    "opp_line": -100000,
    "opp_open_one": -80,
    "opp_open_two": -5,
    "center": 3,
}


def load_weights(path="config/weights.yaml"):
    """Load window weights from YAML; fallback to defaults on missing file or keys."""
    path = Path(path)
    if not path.is_absolute() and not path.exists():
        # Allow running from repo root (e.g., `python -m Connect4_AI.main`).
        candidate = Path(__file__).resolve().parents[1] / path
        if candidate.exists():
            path = candidate

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return dict(DEFAULT_WEIGHTS)

    weights = dict(DEFAULT_WEIGHTS)
    for key, value in (data.get("weights") or {}).items():
        if key in weights:
            weights[key] = int(value)
    return weights


@lru_cache(maxsize=32)
def windows(rows, cols, length):
    """All runs of exactly `length` cells along the four axes, as tuples of (row, col)."""
    found = []
    for dr, dc in DIRECTIONS:
        for r in range(rows):
            for c in range(cols):
                end_r = r + dr * (length - 1)
                end_c = c + dc * (length - 1)
                if not (0 <= end_r < rows and 0 <= end_c < cols):
                    continue
                found.append(tuple((r + dr * i, c + dc * i) for i in range(length)))
    return tuple(found)


def score_window(values, player, win_length, weights=None):
    """Score one window of cell values from `player`'s perspective."""
    weights = weights or DEFAULT_WEIGHTS
    opp = opponent(player)
    own = opp_count = empty = 0
    for v in values:
        if v == player:
            own += 1
        elif v == opp:
            opp_count += 1
        else:
            empty += 1

    score = 0
    if own == win_length:
        score += weights["own_line"]
    elif own == win_length - 1 and empty == 1:
        score += weights["own_open_one"]
    elif win_length > 2 and own == win_length - 2 and empty == 2:
        score += weights["own_open_two"]

    if opp_count == win_length:
        score += weights["opp_line"]
    elif opp_count == win_length - 1 and empty == 1:
        score += weights["opp_open_one"]
    elif win_length > 2 and opp_count == win_length - 2 and empty == 2:
        score += weights["opp_open_two"]
    return score


def evaluate(board, player, win_length=4, weights=None):
    """
    Static evaluation. Positive favors `player`, negative favors the opponent.
    Sums every win-length window plus a center-column bonus; no lookahead.
    """
    weights = weights or DEFAULT_WEIGHTS
    cells = board.cells
    total = 0
    for window in windows(board.rows, board.cols, win_length):
        total += score_window([cells[r][c] for r, c in window], player, win_length, weights)

    center = board.cols // 2
    opp = opponent(player)
    for r in range(board.rows):
        v = cells[r][center]
        if v == player:
            total += weights["center"]
        elif v == opp:
            total -= weights["center"]
    return total


def _window_open(board, cells, player, gravity, vertical):
    opp = opponent(player)
    for r, c in cells:
        v = board.cells[r][c]
        if v == opp:
            return False
        # A vertical window with an unsupported gap cannot be filled in order.
        if gravity and vertical and v == EMPTY and r < board.rows - 1 and board.cells[r + 1][c] == EMPTY:
            return False
    return True


def open_windows_through(board, row, col, player, win_length=4, gravity=True):
    """Number of win-length windows through (row, col) that hold no opponent token."""
    potential = 0
    for dr, dc in DIRECTIONS:
        for offset in range(-(win_length - 1), 1):
            start_r, start_c = row + offset * dr, col + offset * dc
            cells = [(start_r + i * dr, start_c + i * dc) for i in range(win_length)]
            if not all(board.in_bounds(r, c) for r, c in cells):
                continue
            if _window_open(board, cells, player, gravity, vertical=(dr, dc) == (1, 0)):
                potential += 1
    return potential
