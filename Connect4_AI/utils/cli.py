"""CLI options for selecting players, board shape, engine strength, and config paths."""


def parse_args(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description="Connect Four decision engine")
    parser.add_argument("--rows", type=int, help="Board rows (default from settings)")
    parser.add_argument("--cols", type=int, help="Board columns (default from settings)")
    parser.add_argument("--win-length", type=int, help="Tokens in a row needed to win")
    parser.add_argument("--free-placement", action="store_true", help="Place on any empty cell instead of dropping")
    parser.add_argument("--timeout", type=float, help="Seconds per engine decision (default from settings)")
    parser.add_argument("--nodes", type=int, help="Maximum search nodes per decision")
    parser.add_argument("--depth", type=int, help="Search depth for the minimax strategy")
    parser.add_argument(
        "--strategy",
        choices=["random", "evaluator", "minimax", "threats", "weighted"],
        help="Final-choice strategy among safe moves",
    )
    parser.add_argument(
        "--difficulty",
        choices=["easy", "medium", "hard", "expert"],
        help="Preset strategy/depth (overridden by --strategy/--depth)",
    )
    parser.add_argument(
        "--mode",
        choices=["ai-vs-ai", "human-vs-ai", "ai-vs-human"],
        default="ai-vs-ai",
        help="Play mode (who moves first)",
    )
    parser.add_argument("--settings", default="config/settings.yaml", help="Path to settings YAML")
    parser.add_argument("--seed", type=int, help="Seed for random tie-breaks")
    parser.add_argument("--verbose", action="store_true", help="Log engine stages and search stats")
    return parser.parse_args(argv)
