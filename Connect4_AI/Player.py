"""Player interface for human, scripted, or engine-backed controllers."""

from .ai.decision import DecisionPipeline
from .utils.settings import EngineConfig


class Player:
    def __init__(self, color):
        self.color = color

    def next_move(self, state, deadline=None):
        """Return the next move (column, or (row, col) in free placement)."""
        raise NotImplementedError

    def new_game(self):
        """Called by the match loop before the first move of a game."""


class HumanPlayer(Player):
    def __init__(self, color, input_fn=input):
        super().__init__(color)
        self.input_fn = input_fn

    def next_move(self, state, deadline=None):
        """Text-input player; deadline is checked by the referee after input."""
        if state.gravity:
            raw = self.input_fn(f"Player {self.color}, column (0-{state.board.cols - 1}): ").strip()
            try:
                return int(raw)
            except ValueError as exc:
                raise ValueError("Invalid input format; expected a column number") from exc

        raw = self.input_fn(f"Player {self.color}, enter move as 'row col': ").strip()
        try:
            row_str, col_str = raw.split()
            return int(row_str), int(col_str)
        except ValueError as exc:
            raise ValueError("Invalid input format; expected two integers") from exc


class AIPlayer(Player):
    """Engine-backed player. Keeps its transposition table across the moves of one game."""

    def __init__(self, color, config=None, strategy=None, rng=None, weights=None):
        super().__init__(color)
        self.config = config or EngineConfig()
        self.cache = {} if self.config.use_transposition else None
        self.pipeline = DecisionPipeline(
            self.config, strategy=strategy, rng=rng, weights=weights, cache=self.cache
        )
        self.last_decision = None

    def new_game(self):
        # Table is scoped to one game.
        if self.cache is not None:
            self.cache.clear()
        self.last_decision = None

    def next_move(self, state, deadline=None):
        self.last_decision = self.pipeline.decide(state.view())
        return self.last_decision.move
