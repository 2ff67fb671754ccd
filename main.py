#!/usr/bin/env python3
"""
Minesweeper Solver - Main entry point.

Usage:
    python main.py play [--level {easy,medium,hard}] [--seed N]
    python main.py evaluate [--level ...] [--games N] [--seed N]
    python main.py probabilities [--level ...] [--seed N] [--turns N]
"""
import argparse
import logging
import sys
from pathlib import Path

import numpy as np

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

from game import PRESETS
from play import Evaluator, GameController


def play(args: argparse.Namespace) -> None:
    """Let the solver play one game, printing every turn."""
    config = PRESETS[args.level]
    controller = GameController()
    controller.start_from_config(config, seed=args.seed)

    print(
        f"Board: {config.rows}x{config.columns} with {config.mines} mines"
    )

    for turn in range(1, args.max_turns + 1):
        report = controller.run_ai_turn()
        if report is None:
            break
        print(f"Turn {turn}: {report.message}")
        if report.info is None:
            print("Solver has no move, stopping.")
            break

    print()
    print(controller.board.render(reveal_mines=not controller.is_playing))
    print(f"\nResult: {controller.state.name}")
    print_statistics(controller)


def print_statistics(controller: GameController) -> None:
    """Print the inference statistics of a finished game."""
    stats = controller.get_statistics()
    print(f"  Inferences: {stats.moves_total}")
    print(f"  Avg certainty: {stats.average_certainty:.2f}")
    for kind, count in stats.kind_counts.items():
        print(f"  {kind.value}: {count}")
    for name, rate in stats.rule_success_rates.items():
        print(f"  Rule {name}: {rate:.1%} success")


def evaluate(args: argparse.Namespace) -> None:
    """Evaluate the solver over many games."""
    config = PRESETS[args.level]
    evaluator = Evaluator(config, num_games=args.games, seed=args.seed)

    print(f"\nEvaluating solver on {args.level} over {args.games} games...")
    results = evaluator.evaluate()

    print("Results:")
    print(f"  Win rate: {results['win_rate']:.1%}")
    print(f"  Loss rate: {results['loss_rate']:.1%}")
    print(f"  Stall rate: {results['stall_rate']:.1%}")
    print(f"  Avg turns: {results['avg_turns']:.1f}")
    print(f"  Avg revealed: {results['avg_revealed']:.1f} cells")
    for kind, count in results["kind_counts"].items():
        print(f"  {kind.value}: {count}")


def probabilities(args: argparse.Namespace) -> None:
    """Play a few turns, then show the mine probability of every hidden cell."""
    config = PRESETS[args.level]
    controller = GameController()
    controller.start_from_config(config, seed=args.seed)

    for _ in range(args.turns):
        report = controller.run_ai_turn()
        if report is None or report.info is None:
            break

    print(controller.board.render())
    print()

    grid = controller.engine.probability.probability_grid()
    for row in grid:
        print(" ".join("  . " if np.isnan(value) else f"{value:4.2f}" for value in row))


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minesweeper Solver - Watch and evaluate the inference engine"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log solver decisions"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    def add_board_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--level",
            choices=sorted(PRESETS),
            default="easy",
            help="Difficulty preset",
        )
        sub.add_argument(
            "--seed", type=int, default=None, help="Seed for mine placement"
        )

    # Play command
    play_parser = subparsers.add_parser("play", help="Let the solver play one game")
    add_board_args(play_parser)
    play_parser.add_argument(
        "--max-turns", type=int, default=1000, help="Maximum solver turns"
    )

    # Evaluate command
    eval_parser = subparsers.add_parser("evaluate", help="Evaluate the solver")
    add_board_args(eval_parser)
    eval_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )

    # Probabilities command
    prob_parser = subparsers.add_parser(
        "probabilities", help="Show mine probabilities after a few turns"
    )
    add_board_args(prob_parser)
    prob_parser.add_argument(
        "--turns", type=int, default=3, help="Solver turns to play first"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    if args.command == "play":
        play(args)
    elif args.command == "evaluate":
        evaluate(args)
    elif args.command == "probabilities":
        probabilities(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
