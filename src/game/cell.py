"""
Cell module for the Minesweeper board graph.

Represents individual nodes of the board graph with their state
(hidden/revealed/flagged/detonated), content (mine/number) and
their fixed set of adjacent cells.
"""
from enum import Enum, auto
from dataclasses import dataclass, field
from typing import List


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()
    DETONATED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass(eq=False)
class Cell:
    """
    Represents a single node in the Minesweeper board graph.

    Cells compare by identity; two cells are the same only if they are
    the same node of the same board.

    Attributes:
        row: Row index of the cell.
        col: Column index of the cell.
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Count of mines in neighboring cells (0-8).
        state: Current visual state.
        neighbors: Adjacent cells (up to 8, fewer at borders).
        mine_probability: Last estimated mine probability, only
            meaningful while the cell is hidden.
    """

    row: int = 0
    col: int = 0
    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN
    neighbors: List["Cell"] = field(default_factory=list, repr=False)
    mine_probability: float = 0.0

    @property
    def position(self) -> tuple:
        """(row, col) coordinate of this cell."""
        return self.row, self.col

    @property
    def cell_id(self) -> str:
        """Stable string key, e.g. ``"3-4"``."""
        return f"{self.row}-{self.col}"

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if cell was successfully revealed, False if it was
            not hidden.
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        return True

    def flag(self) -> bool:
        """
        Flag this cell as a mine.

        Returns:
            True if the flag was placed, False if cell is not hidden.
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.FLAGGED
        return True

    def detonate(self) -> bool:
        """Mark a hidden mine cell as exploded."""
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.DETONATED
        return True

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_detonated(self) -> bool:
        """Check if cell exploded."""
        return self.state == CellState.DETONATED

    # ========================================================================
    # Neighborhood Queries
    # ========================================================================

    def neighbors_in_state(self, state: CellState) -> List["Cell"]:
        """Neighbors currently in the given state, in adjacency order."""
        return [n for n in self.neighbors if n.state == state]

    def count_neighbors_in_state(self, state: CellState) -> int:
        return sum(1 for n in self.neighbors if n.state == state)

    @property
    def remaining_mines(self) -> int:
        """Mines still to be found among hidden neighbors."""
        return self.adjacent_mines - self.count_neighbors_in_state(
            CellState.FLAGGED
        )

    @property
    def hidden_neighbor_count(self) -> int:
        return self.count_neighbors_in_state(CellState.HIDDEN)

    def to_observation(self) -> int:
        """
        Convert cell to an integer code for grid rendering.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent mine count
            9: Detonated mine (game over state)
        """
        if self.state == CellState.HIDDEN:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        if self.state == CellState.DETONATED:
            return 9
        return self.adjacent_mines
