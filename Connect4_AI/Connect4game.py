"""Game loop and turn management for gravity / free-placement connection games."""

from .GameState import GameState
from .Board import PLAYER_ONE, PLAYER_TWO, opponent
from .engine import referee
from .utils import timer


class Connect4game:
    def __init__(self, player_one, player_two, rows=6, cols=7, win_length=4, gravity=True, move_timeout=None, logger=print):
        self.state = GameState.new(rows, cols, win_length, gravity)
        self.move_timeout = move_timeout
        self.players = {PLAYER_ONE: player_one, PLAYER_TWO: player_two}
        self.logger = logger
        self.move_index = 0

    def play(self):
        """Run a single game. Returns 1 or 2 for the winner, or 0 for a draw."""
        state = self.state
        for player in self.players.values():
            player.new_game()
        while not state.is_terminal().is_over:
            color = state.current_player
            player = self.players[color]
            deadline = timer.deadline_after(self.move_timeout) if self.move_timeout else None

            try:
                move = player.next_move(state, deadline=deadline)
                referee.check_move(move, state, deadline)
                state.apply(move)
            except (TimeoutError, ValueError) as exc:
                self.logger(f"Disqualification: Player {color} - {exc}")
                return opponent(color)

            self.move_index += 1
            self.logger(f"Move {self.move_index}: P{color} {move}")

        status = state.is_terminal()
        if status.kind == "win":
            self.logger(f"Winner: Player {status.winner}")
            return status.winner
        self.logger("Result: Draw (board full)")
        return 0
