"""Zobrist hashing and transposition table helpers."""

import random

EXACT = "EXACT"
LOWER = "LOWER"
UPPER = "UPPER"


def zobrist_init(rows=6, cols=7, seed=None):
    rng = random.Random(seed)
    return [[rng.getrandbits(64) for _ in range(2)] for _ in range(rows * cols)]


def cell_key(table, cols, row, col, player):
    return table[row * cols + col][player - 1]


def hash_board(board, table):
    """Compute Zobrist hash for a Board (1 / 2 players, 0 empty)."""
    h = 0
    for r in range(board.rows):
        for c in range(board.cols):
            v = board.cells[r][c]
            if v == 0:
                continue
            h ^= cell_key(table, board.cols, r, c, v)
    return h


def bound_flag(score, alpha_orig, beta_orig):
    if score <= alpha_orig:
        return UPPER
    if score >= beta_orig:
        return LOWER
    return EXACT


def lookup(ttable, key):
    return ttable.get(key)


def store(ttable, key, depth, score, flag, move):
    ttable[key] = (depth, score, flag, move)
