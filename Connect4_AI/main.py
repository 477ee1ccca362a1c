"""Entry point for engine matches. Load config, wire players, start Connect4game."""

import logging

from .Connect4game import Connect4game
from .Player import AIPlayer, HumanPlayer
from .ai import heuristic
from .utils.cli import parse_args
from .utils.logger import configure_logging, log_event
from .utils.settings import EngineConfig, load_settings

LOGGER = logging.getLogger(__name__)


def build_config(args, settings):
    overrides = {
        "max_depth": args.depth,
        "time_budget": args.timeout,
        "node_budget": args.nodes,
        "strategy": args.strategy,
        "seed": args.seed,
        "win_length": args.win_length,
    }
    if args.difficulty:
        return EngineConfig.for_difficulty(args.difficulty, settings, **overrides)
    return EngineConfig.from_settings(settings, **overrides)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.verbose)
    settings = load_settings(args.settings)

    rows = args.rows or settings.get("rows", 6)
    cols = args.cols or settings.get("cols", 7)
    win_length = args.win_length or settings.get("win_length", 4)
    gravity = False if args.free_placement else settings.get("gravity", True)

    config = build_config(args, settings)
    weights = heuristic.load_weights()
    LOGGER.debug("engine config: %s", config)

    def engine(color):
        return AIPlayer(color, config=config, weights=weights)

    if args.mode == "ai-vs-ai":
        first, second = engine(1), engine(2)
    elif args.mode == "human-vs-ai":
        first, second = HumanPlayer(1), engine(2)
    elif args.mode == "ai-vs-human":
        first, second = engine(1), HumanPlayer(2)
    else:
        raise ValueError(f"Unsupported mode: {args.mode}")

    game = Connect4game(
        first,
        second,
        rows=rows,
        cols=cols,
        win_length=win_length,
        gravity=gravity,
        logger=log_event,
    )
    result = game.play()
    outcome = {1: "Player 1 wins", 2: "Player 2 wins", 0: "Draw"}
    print(outcome.get(result, "Unknown result"))
    print(game.state.board)
    return result


if __name__ == "__main__":
    main()
