"""Helpers for enforcing per-move time and node limits."""

import time

from ..errors import SearchTimedOut


def deadline_after(seconds):
    return time.monotonic() + seconds


def time_remaining(deadline):
    return deadline - time.monotonic()


class SearchBudget:
    """Deadline + node limit + cooperative cancel hook, checked at every node expansion."""

    def __init__(self, time_budget=None, node_budget=None, cancel=None):
        self.deadline = None if time_budget is None else deadline_after(time_budget)
        self.node_budget = node_budget
        self.cancel = cancel
        self.nodes = 0
        self.exhausted = False

    @classmethod
    def unlimited(cls):
        return cls()

    def tick(self):
        """Count one node; raise SearchTimedOut once any limit is hit."""
        self.nodes += 1
        if self.node_budget is not None and self.nodes > self.node_budget:
            self._cut(f"node budget of {self.node_budget} exhausted")
        if self.deadline is not None and time.monotonic() > self.deadline:
            self._cut("time budget exhausted")
        if self.cancel is not None and self.cancel():
            self._cut("search cancelled")

    def _cut(self, reason):
        self.exhausted = True
        raise SearchTimedOut(reason)

    def remaining(self):
        if self.deadline is None:
            return None
        return time_remaining(self.deadline)
