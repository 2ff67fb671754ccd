#!/usr/bin/env python3
"""Watch the solver play Minesweeper one timed turn at a time."""
import argparse
import logging
import os
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from game import PRESETS
from play import GameController, GameState


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(delay: float = 0.3, games: int = 5, level: str = "easy"):
    """Run demo games with visualization."""
    if games < 1:
        print("No games to play.")
        return

    config = PRESETS[level]
    controller = GameController()

    print(f"Board: {config.rows}x{config.columns} with {config.mines} mines "
          f"({100 * config.mines / config.total_cells:.1f}% density)")
    print("Starting in 2 seconds...")
    time.sleep(2)

    wins = 0

    for game in range(games):
        controller.start_from_config(config)

        clear_screen()
        print(f"=== Game {game + 1}/{games} ===")
        print(f"Wins so far: {wins}\n")
        print(controller.board.render())
        time.sleep(delay)

        step = 0

        while controller.is_playing:
            report = controller.run_ai_turn()
            step += 1

            clear_screen()
            print(f"=== Game {game + 1}/{games} | Step {step} ===")
            print(f"Wins so far: {wins}")
            print(f"Last move: {report.message}")
            if report.info is not None:
                print(f"  {report.info.kind.value} "
                      f"(certainty {report.info.certainty:.2f})\n")
            print(controller.board.render(reveal_mines=not controller.is_playing))

            # Stop autoplay when the solver has nothing to offer
            if report.info is None:
                print("\n*** STUCK (no inference available) ***")
                break

            time.sleep(delay)

        if controller.state == GameState.WON:
            wins += 1
            print("\n*** WIN! ***")
        elif controller.state == GameState.LOST:
            print("\n*** LOST (hit mine) ***")

        time.sleep(1.0)  # Pause between games

    print(f"\n=== Final: {wins}/{games} wins ({100 * wins / games:.0f}%) ===")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=5, help="Number of games")
    parser.add_argument("--level", choices=sorted(PRESETS), default="easy",
                        help="Difficulty preset")
    parser.add_argument("--verbose", action="store_true", help="Log solver decisions")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    demo(delay=args.delay, games=args.games, level=args.level)
