"""Connect4_AI package exports."""

from .Board import Board
from .GameState import GameState, GameStateView, TerminalStatus
from .Player import Player, HumanPlayer, AIPlayer
from .Connect4game import Connect4game
from .ai.decision import Decision, DecisionPipeline, Stage, select_move
from .errors import DecisionError, IllegalMoveRequested, InvalidConfiguration, NoLegalMoves, SearchTimedOut
from .utils.settings import EngineConfig

# Subpackages for rules, AI search, and helpers
from . import ai, engine, utils

__all__ = [
    "Board",
    "GameState",
    "GameStateView",
    "TerminalStatus",
    "Player",
    "HumanPlayer",
    "AIPlayer",
    "Connect4game",
    "Decision",
    "DecisionPipeline",
    "Stage",
    "select_move",
    "DecisionError",
    "IllegalMoveRequested",
    "InvalidConfiguration",
    "NoLegalMoves",
    "SearchTimedOut",
    "EngineConfig",
    "ai",
    "engine",
    "utils",
]
