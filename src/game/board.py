"""
Board module for the Minesweeper board graph.

Implements the grid of cells, its fixed 8-neighbor adjacency,
mine placement and numeric labeling. The board holds no game
rules; moves are applied by the game controller.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .cell import Cell, CellState

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

@dataclass
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        rows: Number of rows.
        columns: Number of columns.
        mines: Total mines to place.
    """

    rows: int = 8
    columns: int = 8
    mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.columns < 1:
            raise ValueError("Board dimensions must be positive")
        if self.mines < 0:
            raise ValueError("Number of mines cannot be negative")
        max_mines = self.rows * self.columns - 1
        if self.mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        return self.rows * self.columns


# Preset difficulty levels
EASY = BoardConfig(8, 8, 10)
MEDIUM = BoardConfig(16, 16, 40)
HARD = BoardConfig(16, 30, 99)

PRESETS: Dict[str, BoardConfig] = {
    "easy": EASY,
    "medium": MEDIUM,
    "hard": HARD,
}

# Row-major neighbor offsets (Moore neighborhood)
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (delta_row, delta_col)
    for delta_row in (-1, 0, 1)
    for delta_col in (-1, 0, 1)
    if not (delta_row == 0 and delta_col == 0)
)


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper board graph.

    Owns the grid of cells, wires their adjacency once at construction
    and places mines exactly once per game.
    """

    rows: int = 8
    columns: int = 8
    total_mines: int = 0
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)
    _mines_placed: bool = False

    def __post_init__(self) -> None:
        """Build the graph after dataclass creation."""
        if self.rows < 1 or self.columns < 1:
            raise ValueError("Board dimensions must be positive")
        self._build()

    @classmethod
    def from_config(cls, config: BoardConfig) -> "Board":
        """Create an empty board with the configured dimensions."""
        return cls(rows=config.rows, columns=config.columns)

    # ========================================================================
    # Graph Construction (Low-level)
    # ========================================================================

    def _build(self) -> None:
        """Create the cells and connect every cell to its neighbors."""
        self._grid = [
            [Cell(row=row, col=col) for col in range(self.columns)]
            for row in range(self.rows)
        ]
        for row in range(self.rows):
            for col in range(self.columns):
                cell = self._grid[row][col]
                for delta_row, delta_col in NEIGHBOR_OFFSETS:
                    neighbor = self.cell_at(row + delta_row, col + delta_col)
                    if neighbor is not None:
                        cell.neighbors.append(neighbor)

    def _is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.rows and 0 <= col < self.columns

    # ========================================================================
    # Mine Placement
    # ========================================================================

    def place_mines(
        self, count: int, rng: Optional[random.Random] = None
    ) -> None:
        """
        Place mines uniformly at random.

        Every subset of ``count`` cells is equally likely.

        Args:
            count: Number of mines to place.
            rng: Random source; the module-level generator when omitted.

        Raises:
            ValueError: If count is negative or exceeds the cell count.
            RuntimeError: If mines were already placed on this board.
        """
        if count < 0 or count > self.rows * self.columns:
            raise ValueError(
                f"Cannot place {count} mines on a "
                f"{self.rows}x{self.columns} board"
            )
        rng = rng or random
        positions = [cell.position for cell in self.all_cells()]
        self.set_mines(rng.sample(positions, count))

    def set_mines(self, positions: Iterable[Tuple[int, int]]) -> None:
        """
        Place mines at explicit coordinates.

        Args:
            positions: (row, col) coordinates of the mines.

        Raises:
            ValueError: If a position is out of range or repeated.
            RuntimeError: If mines were already placed on this board.
        """
        if self._mines_placed:
            raise RuntimeError("Mines have already been placed")

        mine_cells = []
        seen = set()
        for row, col in positions:
            cell = self.cell_at(row, col)
            if cell is None:
                raise ValueError(f"Mine position ({row},{col}) is off the board")
            if (row, col) in seen:
                raise ValueError(f"Duplicate mine position ({row},{col})")
            seen.add((row, col))
            mine_cells.append(cell)

        for cell in mine_cells:
            cell.is_mine = True
        self.total_mines = len(mine_cells)
        self._mines_placed = True
        self._calculate_adjacent_mines()
        logger.debug(
            "Placed %d mines on %dx%d board",
            self.total_mines, self.rows, self.columns,
        )

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all non-mine cells."""
        for cell in self.all_cells():
            if not cell.is_mine:
                cell.adjacent_mines = sum(
                    1 for neighbor in cell.neighbors if neighbor.is_mine
                )

    @property
    def mines_placed(self) -> bool:
        return self._mines_placed

    # ========================================================================
    # Queries
    # ========================================================================

    def cell_at(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self._is_valid_position(row, col):
            return None
        return self._grid[row][col]

    def all_cells(self) -> List[Cell]:
        """Every cell in row-major order."""
        return [cell for grid_row in self._grid for cell in grid_row]

    def hidden_cells(self) -> List[Cell]:
        return [cell for cell in self.all_cells() if cell.is_hidden]

    def frontier_cells(self) -> List[Cell]:
        """Hidden cells with at least one revealed neighbor."""
        return [
            cell
            for cell in self.all_cells()
            if cell.is_hidden
            and any(neighbor.is_revealed for neighbor in cell.neighbors)
        ]

    def count_in_state(self, state: CellState) -> int:
        return sum(1 for cell in self.all_cells() if cell.state == state)

    @property
    def total_cells(self) -> int:
        return self.rows * self.columns

    # ========================================================================
    # Rendering Helpers
    # ========================================================================

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            2D numpy array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = detonated mine
        """
        obs = np.zeros((self.rows, self.columns), dtype=np.int8)
        for cell in self.all_cells():
            obs[cell.row, cell.col] = cell.to_observation()
        return obs

    def render(self, reveal_mines: bool = False) -> str:
        """
        Render board as ASCII string.

        Args:
            reveal_mines: Show every mine as ``*`` (post-game display).
        """
        lines = []
        obs = self.get_observation()

        for row in range(self.rows):
            row_str = ""
            for col in range(self.columns):
                val = obs[row, col]
                if reveal_mines and self._grid[row][col].is_mine:
                    row_str += "*"
                elif val == -1:
                    row_str += "."
                elif val == -2:
                    row_str += "F"
                elif val == 9:
                    row_str += "*"
                elif val == 0:
                    row_str += " "
                else:
                    row_str += str(val)
                row_str += " "
            lines.append(row_str.rstrip())

        return "\n".join(lines)
