"""Tactical analysis: immediate wins, forced blocks, exact-fork patterns, and trap filtering."""

from ..Board import EMPTY, opponent
from ..engine import rules

FORK_WINDOW = 4
FORK_ROWS = 2  # only the rows nearest the base are scanned


def immediate_wins(board, player, win_length, gravity=True, moves=None):
    """Every move that completes a line for `player` right now."""
    if moves is None:
        moves = rules.legal_moves(board, gravity)
    return [mv for mv in moves if rules.is_win_after_move(board, mv, player, win_length, gravity)]


def find_immediate_win(board, player, win_length, gravity=True):
    wins = immediate_wins(board, player, win_length, gravity)
    return wins[0] if wins else None


def forced_blocks(board, player, win_length, gravity=True, moves=None):
    """Moves `player` must occupy because the opponent would win there next turn."""
    return immediate_wins(board, opponent(player), win_length, gravity, moves)


def find_forced_block(board, player, win_length, gravity=True):
    blocks = forced_blocks(board, player, win_length, gravity)
    return blocks[0] if blocks else None


def is_exact_fork_pattern(window, player):
    """[empty, p, empty, p] or its mirror [p, empty, p, empty]."""
    if len(window) != FORK_WINDOW:
        return False
    a, b, c, d = window
    return (a == EMPTY and b == player and c == EMPTY and d == player) or (
        a == player and b == EMPTY and c == player and d == EMPTY
    )


def find_fork_threats(board, player, gravity=True, *, win_length=4, history_length=None, min_moves=8):
    """
    Cells to fill so the opponent cannot grow an alternating pattern on the
    bottom rows into a double threat. Narrow by construction: one fixed
    4-cell pattern, the two lowest rows, and only from `min_moves` moves on.
    """
    if win_length != FORK_WINDOW:
        return []
    played = board.move_count if history_length is None else history_length
    if played < min_moves:
        return []

    opp = opponent(player)
    legal = set(rules.legal_moves(board, gravity))
    targets = []
    for row in range(max(0, board.rows - FORK_ROWS), board.rows):
        for col in range(board.cols - FORK_WINDOW + 1):
            window = [board.cells[row][col + i] for i in range(FORK_WINDOW)]
            if not is_exact_fork_pattern(window, opp):
                continue
            for i, value in enumerate(window):
                if value != EMPTY:
                    continue
                move = rules.move_for_cell(row, col + i, gravity)
                if move in legal and move not in targets:
                    targets.append(move)
    return targets


def gives_opponent_win(board, move, player, win_length, gravity=True):
    """One-ply trap check: after `move`, can the opponent complete a line at once?

    A move that wins on the spot ends the game and is never a trap.
    """
    opp = opponent(player)
    with rules.simulate(board, move, player, gravity) as (row, col):
        if rules.detect_win(board, row, col, player, win_length):
            return False
        for reply in rules.legal_moves(board, gravity):
            if rules.is_win_after_move(board, reply, opp, win_length, gravity):
                return True
    return False


def safe_moves(board, player, win_length, gravity=True, moves=None):
    if moves is None:
        moves = rules.legal_moves(board, gravity)
    return [mv for mv in moves if not gives_opponent_win(board, mv, player, win_length, gravity)]


def count_threats_after(board, move, player, win_length, gravity=True):
    """Number of distinct winning follow-ups `player` would have after playing `move`."""
    with rules.simulate(board, move, player, gravity):
        return len(immediate_wins(board, player, win_length, gravity))
