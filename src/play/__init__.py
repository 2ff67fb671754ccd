"""
Gameplay module for the Minesweeper solver.

Provides the game controller that applies moves and the evaluator
that runs batches of solver games.
"""
from .controller import (
    GameController,
    GameState,
    MoveResult,
    TurnInfo,
    TurnReport,
    FIRST_MOVE_CORNER_CERTAINTY,
)
from .evaluator import Evaluator, GameRecord

__all__ = [
    "GameController",
    "GameState",
    "MoveResult",
    "TurnInfo",
    "TurnReport",
    "FIRST_MOVE_CORNER_CERTAINTY",
    "Evaluator",
    "GameRecord",
]
