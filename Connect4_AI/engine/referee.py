"""Move validation and time control for the match runner."""

import time

from . import rules
from ..errors import IllegalMoveRequested


def check_move(move, state, deadline=None):
    """
    Validate a move against time, game status, bounds, occupancy and gravity.
    Raises TimeoutError/IllegalMoveRequested on invalid moves.
    """
    if deadline is not None and time.monotonic() > deadline:
        raise TimeoutError("Move exceeded allotted time")

    if state.is_terminal().is_over:
        raise IllegalMoveRequested("Game is already over")

    rules.target_cell(state.board, move, state.gravity)
    return True
