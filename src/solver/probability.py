"""
Mine probability estimation for hidden cells.

Small neighborhoods are solved exactly by enumerating every mine
assignment of the relevant cells; larger ones fall back to a weighted
average of the local mine densities around the cell.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from game.board import Board
from game.cell import Cell, CellState

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

EXACT_ENUMERATION_LIMIT = 12
REVEAL_THRESHOLD = 0.5
FLAG_THRESHOLD = 0.85


@dataclass
class CellProbability:
    """Mine probability of one hidden cell."""

    row: int
    col: int
    probability: float

    @property
    def key(self) -> str:
        return f"{self.row}-{self.col}"


@dataclass
class BestMove:
    """Safest hidden cell according to the current estimate."""

    cell: Optional[Cell]
    probability: float
    rationale: str


# ============================================================================
# Probability Engine
# ============================================================================

class ProbabilityEngine:
    """
    Estimates the chance that each hidden cell holds a mine.

    Strategy:
        1. Flagged cells count as mines, revealed cells as safe
        2. Cells with no numbered neighbor get the global mine density
        3. Otherwise enumerate every assignment of the relevant set
           (target plus hidden neighbors of its numbered neighbors)
           and count the ones satisfying every number exactly
        4. Relevant sets above EXACT_ENUMERATION_LIMIT use a weighted
           average of local densities instead

    Results are cached per cell until clear_cache() is called; the
    owner must clear the cache whenever the board changes.
    """

    def __init__(self, board: Board) -> None:
        """
        Args:
            board: Board to read. Not owned; must outlive the engine.
        """
        self.board = board
        self._cache: Dict[str, float] = {}

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    # ========================================================================
    # Single Cell Estimate
    # ========================================================================

    def probability_of(self, cell: Cell) -> float:
        """
        Probability that ``cell`` holds a mine.

        Returns:
            1.0 for flagged cells, 0.0 for revealed cells, otherwise
            an estimate in [0, 1].
        """
        if cell.state == CellState.FLAGGED:
            return 1.0
        if cell.state != CellState.HIDDEN:
            return 0.0

        cached = self._cache.get(cell.cell_id)
        if cached is not None:
            return cached

        informative = [
            neighbor
            for neighbor in cell.neighbors
            if neighbor.is_revealed and neighbor.adjacent_mines > 0
        ]
        if not informative:
            return self.global_ratio()

        probability = self._constrained_probability(cell, informative)
        probability = min(max(probability, 0.0), 1.0)
        self._cache[cell.cell_id] = probability
        return probability

    def global_ratio(self) -> float:
        """Unflagged mines spread evenly over all hidden cells."""
        hidden = self.board.count_in_state(CellState.HIDDEN)
        if hidden == 0:
            return 0.0
        flagged = self.board.count_in_state(CellState.FLAGGED)
        ratio = (self.board.total_mines - flagged) / hidden
        return min(max(ratio, 0.0), 1.0)

    def _constrained_probability(
        self, target: Cell, informative: List[Cell]
    ) -> float:
        """Pick exact enumeration or approximation by relevant-set size."""
        relevant = self._relevant_set(target, informative)
        if len(relevant) > EXACT_ENUMERATION_LIMIT:
            return self._approximate_probability(informative)
        return self._exact_probability(target, relevant, informative)

    @staticmethod
    def _relevant_set(target: Cell, informative: List[Cell]) -> List[Cell]:
        """Target plus every hidden neighbor of its numbered neighbors."""
        relevant = [target]
        seen = {id(target)}
        for number in informative:
            for neighbor in number.neighbors:
                if neighbor.is_hidden and id(neighbor) not in seen:
                    seen.add(id(neighbor))
                    relevant.append(neighbor)
        return relevant

    def _exact_probability(
        self, target: Cell, relevant: List[Cell], informative: List[Cell]
    ) -> float:
        """
        Count mine assignments of ``relevant`` that satisfy every number.

        Bit i of the mask marks ``relevant[i]`` as a mine. Each number
        is reduced to (required mines, bitmask of its relevant cells)
        so a check is a popcount.
        """
        index = {id(cell): bit for bit, cell in enumerate(relevant)}
        constraints = []
        for number in informative:
            required = number.remaining_mines
            cell_mask = 0
            for neighbor in number.neighbors:
                bit = index.get(id(neighbor))
                if bit is not None:
                    cell_mask |= 1 << bit
            constraints.append((required, cell_mask))

        target_bit = 1 << index[id(target)]
        valid = 0
        with_target = 0
        for mask in range(1 << len(relevant)):
            if all(
                bin(mask & cell_mask).count("1") == required
                for required, cell_mask in constraints
            ):
                valid += 1
                if mask & target_bit:
                    with_target += 1

        if valid == 0:
            logger.debug("No consistent assignment around %s", target.position)
            return self.global_ratio()
        return with_target / valid

    def _approximate_probability(self, informative: List[Cell]) -> float:
        """Weighted mean of local densities; tighter numbers weigh more."""
        ratios = []
        weights = []
        for number in informative:
            hidden = number.hidden_neighbor_count
            if hidden > 0:
                ratios.append(number.remaining_mines / hidden)
                weights.append(1.0 / (hidden + 1))

        if not ratios:
            return self.global_ratio()
        return float(np.average(ratios, weights=weights))

    # ========================================================================
    # Board-wide Views
    # ========================================================================

    def probability_map(self) -> List[CellProbability]:
        """
        Estimate every hidden cell, safest first.

        Also stores each estimate on ``cell.mine_probability``. Ties keep
        row-major order.
        """
        estimates = []
        for cell in self.board.all_cells():
            if cell.is_hidden:
                probability = self.probability_of(cell)
                cell.mine_probability = probability
                estimates.append(CellProbability(cell.row, cell.col, probability))
        return sorted(estimates, key=lambda estimate: estimate.probability)

    def probability_grid(self) -> np.ndarray:
        """Probabilities as a float grid, NaN where the cell is not hidden."""
        grid = np.full((self.board.rows, self.board.columns), np.nan)
        for estimate in self.probability_map():
            grid[estimate.row, estimate.col] = estimate.probability
        return grid

    def best_move(self) -> BestMove:
        """Lowest-probability hidden cell, or no cell when none is hidden."""
        estimates = self.probability_map()
        if not estimates:
            return BestMove(cell=None, probability=0.0, rationale="No moves")

        best = estimates[0]
        return BestMove(
            cell=self.board.cell_at(best.row, best.col),
            probability=best.probability,
            rationale=f"Bayesian estimate: {best.probability:.1%} mine probability",
        )
