"""Candidate move generation and center-out ordering."""

from ..engine.rules import legal_moves

__all__ = ["legal_moves", "center_key", "order_moves", "center_closest", "generate_candidates"]


def center_key(move, rows, cols, gravity=True):
    """Sort key: distance from the board center, ties broken by lower index."""
    center_col = cols // 2
    if gravity:
        return (abs(move - center_col), move)
    row, col = move
    center_row = rows // 2
    return (abs(row - center_row) + abs(col - center_col), abs(col - center_col), row, col)


def order_moves(moves, rows, cols, gravity=True, *, first=None):
    """Center-out ordering; `first` (e.g. a transposition or PV move) is tried before the rest."""
    ordered = sorted(moves, key=lambda mv: center_key(mv, rows, cols, gravity))
    if first is not None and first in ordered:
        ordered.remove(first)
        ordered.insert(0, first)
    return ordered


def center_closest(moves, rows, cols, gravity=True):
    if not moves:
        return None
    return min(moves, key=lambda mv: center_key(mv, rows, cols, gravity))


def generate_candidates(board, gravity=True, *, first=None):
    """All legal moves for the position, center-out."""
    return order_moves(legal_moves(board, gravity), board.rows, board.cols, gravity, first=first)
