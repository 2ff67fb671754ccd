"""
Minesweeper game module.

Provides the board graph: cells, adjacency, mine placement and labels.
"""
from .cell import Cell, CellState
from .board import Board, BoardConfig, EASY, MEDIUM, HARD, PRESETS

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "EASY",
    "MEDIUM",
    "HARD",
    "PRESETS",
]
