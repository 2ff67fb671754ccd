"""
Batch self-play evaluation of the solver.

Plays many seeded games through the GameController and aggregates
win rate, game length and the mix of inference kinds used.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from game.board import BoardConfig
from solver.types import InferenceKind

from .controller import GameController, GameState

logger = logging.getLogger(__name__)


# ============================================================================
# Game Statistics
# ============================================================================

@dataclass
class GameRecord:
    """Statistics for a single solver game."""

    won: bool = False
    lost: bool = False
    stalled: bool = False
    turns: int = 0
    revealed: int = 0
    kind_counts: Dict[InferenceKind, int] = field(default_factory=dict)


# ============================================================================
# Evaluator
# ============================================================================

class Evaluator:
    """
    Evaluate the solver over many games.

    A game ends when it is won or lost, when the solver has no move
    (stalled), or after ``max_turns`` turns (also counted as stalled).
    """

    def __init__(
        self,
        board_config: Optional[BoardConfig] = None,
        num_games: int = 100,
        max_turns: int = 1000,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the evaluator.

        Args:
            board_config: Board configuration for evaluation.
            num_games: Number of games to play.
            max_turns: Maximum solver turns per game.
            seed: Base seed; game i uses ``seed + i``. Random if omitted.
        """
        self.board_config = board_config or BoardConfig()
        self.num_games = num_games
        self.max_turns = max_turns
        self.seed = seed

    def play_game(self, seed: Optional[int] = None) -> GameRecord:
        """Play one game with the solver taking every turn."""
        controller = GameController()
        controller.start_from_config(self.board_config, seed=seed)
        record = GameRecord()
        kinds: Counter = Counter()

        for _ in range(self.max_turns):
            report = controller.run_ai_turn()
            if report is None:
                break
            if report.info is None:
                record.stalled = True
                break
            record.turns += 1
            kinds[report.info.kind] += 1
        else:
            record.stalled = controller.is_playing

        record.won = controller.state == GameState.WON
        record.lost = controller.state == GameState.LOST
        record.revealed = controller.cells_revealed
        record.kind_counts = dict(kinds)
        return record

    def run(self) -> List[GameRecord]:
        records = []
        for index in range(self.num_games):
            seed = None if self.seed is None else self.seed + index
            records.append(self.play_game(seed))
            logger.debug("Game %d/%d finished", index + 1, self.num_games)
        return records

    def evaluate(self) -> Dict[str, Any]:
        """
        Play every game and aggregate the results.

        Returns:
            Dictionary with evaluation metrics.
        """
        records = self.run()
        if not records:
            return {
                "games": 0,
                "win_rate": 0.0,
                "loss_rate": 0.0,
                "stall_rate": 0.0,
                "avg_turns": 0.0,
                "avg_revealed": 0.0,
                "kind_counts": {},
            }

        kinds: Counter = Counter()
        for record in records:
            kinds.update(record.kind_counts)

        return {
            "games": len(records),
            "win_rate": float(np.mean([r.won for r in records])),
            "loss_rate": float(np.mean([r.lost for r in records])),
            "stall_rate": float(np.mean([r.stalled for r in records])),
            "avg_turns": float(np.mean([r.turns for r in records])),
            "avg_revealed": float(np.mean([r.revealed for r in records])),
            "kind_counts": dict(kinds),
        }
