"""Error kinds raised by the decision engine and the reference game runtime."""


class DecisionError(Exception):
    """Base class for everything the engine raises on purpose."""


class NoLegalMoves(DecisionError, ValueError):
    """The position has no move to make (full board or game already decided)."""


class IllegalMoveRequested(DecisionError, ValueError):
    """A move that is out of bounds, occupied, or unreachable was requested."""


class SearchTimedOut(DecisionError, TimeoutError):
    """The search budget ran out before the current iteration completed."""


class InvalidConfiguration(DecisionError, ValueError):
    """Engine settings or the supplied position are malformed."""
