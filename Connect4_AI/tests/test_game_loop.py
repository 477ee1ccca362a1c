"""Tests for Connect4game turn handling and end-of-game state."""

from Connect4_AI.Connect4game import Connect4game
from Connect4_AI.Player import AIPlayer, HumanPlayer, Player
from Connect4_AI.ai.decision import Stage
from Connect4_AI.main import main
from Connect4_AI.utils.settings import EngineConfig


class SeqPlayer(Player):
    """Deterministic player that plays a fixed move sequence."""

    def __init__(self, color, moves):
        super().__init__(color)
        self._moves = list(moves)
        self._idx = 0

    def next_move(self, state, deadline=None):
        if self._idx >= len(self._moves):
            raise ValueError("No more scripted moves")
        mv = self._moves[self._idx]
        self._idx += 1
        return mv


def test_vertical_win_ends_game():
    lines = []
    game = Connect4game(SeqPlayer(1, [0, 0, 0, 0]), SeqPlayer(2, [1, 1, 1]), logger=lines.append)
    assert game.play() == 1
    assert game.state.is_terminal().winner == 1
    assert lines[-1] == "Winner: Player 1"
    assert game.move_index == 7


def test_illegal_move_disqualifies():
    lines = []
    game = Connect4game(SeqPlayer(1, [0, 1]), SeqPlayer(2, [7]), logger=lines.append)
    assert game.play() == 1
    assert lines[-1].startswith("Disqualification: Player 2")


def test_draw_on_full_board():
    game = Connect4game(
        SeqPlayer(1, [0, 2]), SeqPlayer(2, [1, 3]), rows=1, cols=4, win_length=3, logger=lambda *_: None
    )
    assert game.play() == 0


def test_human_input_parsing():
    human = HumanPlayer(1, input_fn=lambda prompt: " 4 ")
    game = Connect4game(human, SeqPlayer(2, []), logger=lambda *_: None)
    assert human.next_move(game.state) == 4

    free = HumanPlayer(1, input_fn=lambda prompt: "2 3")
    game = Connect4game(free, SeqPlayer(2, []), gravity=False, logger=lambda *_: None)
    assert free.next_move(game.state) == (2, 3)


def test_human_bad_input_disqualifies():
    human = HumanPlayer(1, input_fn=lambda prompt: "left")
    game = Connect4game(human, SeqPlayer(2, []), logger=lambda *_: None)
    assert game.play() == 2


def test_ai_blocks_scripted_attack():
    ai = AIPlayer(2, EngineConfig(strategy="evaluator", time_budget=None, seed=0))
    # P1 runs out of script after four moves; it must not have connected four by then.
    game = Connect4game(SeqPlayer(1, [0, 1, 2, 3]), ai, logger=lambda *_: None)
    assert game.play() == 2
    assert game.state.is_terminal().winner in (None, 2)
    assert ai.last_decision is not None


def test_ai_vs_ai_finishes():
    config = EngineConfig(strategy="minimax", max_depth=2, time_budget=None, seed=3)
    first, second = AIPlayer(1, config), AIPlayer(2, config)
    game = Connect4game(first, second, move_timeout=30.0, logger=lambda *_: None)
    result = game.play()
    assert result in (0, 1, 2)
    assert game.state.is_terminal().is_over
    assert first.last_decision is not None
    assert first.cache, "Expected the engine to keep its transposition table"


def test_ai_opens_in_center():
    ai = AIPlayer(1, EngineConfig(strategy="random", time_budget=None))
    game = Connect4game(ai, SeqPlayer(2, []), logger=lambda *_: None)
    assert ai.next_move(game.state) == 3
    assert ai.last_decision.stage == Stage.OPENING


def test_main_runs_engine_match(capsys):
    result = main(["--strategy", "random", "--seed", "5", "--rows", "4", "--cols", "5"])
    out = capsys.readouterr().out
    assert result in (0, 1, 2)
    assert "Move 1: P1 2" in out


def test_ai_starts_each_game_with_an_empty_table():
    ai = AIPlayer(2, EngineConfig(strategy="minimax", max_depth=2, time_budget=None))
    ai.cache[("stale", 1, 2)] = (9, 0, "EXACT", 0)
    game = Connect4game(SeqPlayer(1, [0, 6]), ai, logger=lambda *_: None)
    game.play()
    assert ("stale", 1, 2) not in ai.cache
    assert ai.pipeline.cache is ai.cache
