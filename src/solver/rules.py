"""
Inference rules for the Minesweeper solver.

Each rule looks at the neighborhood of one revealed cell and either
produces a move (cells to reveal or flag) or fails silently. Rules
only read the board; moves are applied by the game controller.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from game.board import Board
from game.cell import Cell, CellState

from .types import Action, InferenceKind, InferenceResult

logger = logging.getLogger(__name__)


PATTERN_121_CERTAINTY = 0.95

# Opposite neighbor pairs checked around the center "2"
AXIS_PAIRS: Tuple[Tuple[Tuple[int, int], Tuple[int, int]], ...] = (
    ((-1, 0), (1, 0)),    # vertical
    ((0, -1), (0, 1)),    # horizontal
    ((-1, -1), (1, 1)),   # main diagonal
    ((-1, 1), (1, -1)),   # anti-diagonal
)


def _positions(cells: List[Cell]) -> List[Tuple[int, int]]:
    return [cell.position for cell in cells]


# ============================================================================
# Base Rule Interface
# ============================================================================

class Rule(ABC):
    """
    Abstract base class for inference rules.

    Rules are stateless with respect to the board. The attempt and
    success counters exist for statistics only and never influence
    which rule the engine picks.

    Attributes:
        name: Display name of the rule.
        priority: Lower values are tried first.
        category: Inference kind reported by successful results.
    """

    name: str = ""
    priority: int = 0
    category: InferenceKind = InferenceKind.DETERMINISTIC_LOGIC

    def __init__(self) -> None:
        self.attempts = 0
        self.successes = 0

    @abstractmethod
    def is_applicable(self, cell: Cell, board: Board) -> bool:
        """
        Cheap precondition check on the center cell.

        Args:
            cell: Center cell of the neighborhood.
            board: Board the cell belongs to.

        Returns:
            True if apply() may find something.
        """

    @abstractmethod
    def apply(self, cell: Cell, board: Board) -> InferenceResult:
        """
        Run the rule on the neighborhood of ``cell``.

        Returns:
            A successful result with targets, or a failed empty result.
        """

    @property
    def success_rate(self) -> float:
        if self.attempts == 0:
            return 0.0
        return self.successes / self.attempts

    def _record(self, success: bool) -> None:
        self.attempts += 1
        if success:
            self.successes += 1

    def _succeed(
        self,
        action: Action,
        targets: List[Cell],
        rationale: str,
        certainty: float = 1.0,
    ) -> InferenceResult:
        self._record(True)
        logger.debug("%s: %s %s (%s)", self.name, action.value,
                     _positions(targets), rationale)
        return InferenceResult(
            success=True,
            action=action,
            targets=_positions(targets),
            rationale=rationale,
            certainty=certainty,
            kind=self.category,
        )

    def _fail(self) -> InferenceResult:
        self._record(False)
        return InferenceResult.failed(self.category)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(priority={self.priority})"


def _is_numbered(cell: Optional[Cell]) -> bool:
    """Revealed cell that constrains its neighbors."""
    return cell is not None and cell.is_revealed and cell.adjacent_mines > 0


# ============================================================================
# Deterministic Rules
# ============================================================================

class CompleteMinesRule(Rule):
    """
    All mines around a number are flagged, so the rest are safe.

    Example:
        A revealed "2" with two flagged neighbors: every other hidden
        neighbor can be revealed.
    """

    name = "CompleteMines"
    priority = 1
    category = InferenceKind.DETERMINISTIC_LOGIC

    def is_applicable(self, cell: Cell, board: Board) -> bool:
        return _is_numbered(cell)

    def apply(self, cell: Cell, board: Board) -> InferenceResult:
        if not self.is_applicable(cell, board):
            return self._fail()

        hidden = cell.neighbors_in_state(CellState.HIDDEN)
        flagged = cell.count_neighbors_in_state(CellState.FLAGGED)

        if flagged == cell.adjacent_mines and hidden:
            return self._succeed(
                Action.REVEAL,
                hidden,
                f"All {cell.adjacent_mines} mines around {cell.position} "
                f"are flagged; {len(hidden)} safe cells",
            )
        return self._fail()


class SaturationRule(Rule):
    """
    Remaining mines equal remaining hidden neighbors, so all are mines.
    """

    name = "Saturation"
    priority = 1
    category = InferenceKind.DETERMINISTIC_LOGIC

    def is_applicable(self, cell: Cell, board: Board) -> bool:
        return _is_numbered(cell)

    def apply(self, cell: Cell, board: Board) -> InferenceResult:
        if not self.is_applicable(cell, board):
            return self._fail()

        hidden = cell.neighbors_in_state(CellState.HIDDEN)
        remaining = cell.remaining_mines

        if hidden and remaining == len(hidden):
            return self._succeed(
                Action.FLAG,
                hidden,
                f"Saturation at {cell.position}: {remaining} mines "
                f"in {len(hidden)} cells",
            )
        return self._fail()


class SubsetRule(Rule):
    """
    Compare the hidden neighborhoods of two adjacent numbers.

    If one number's hidden cells are a strict subset of the other's,
    the difference holds exactly the difference of their remaining
    mine counts.

    Example:
        A: {X, Y} has 1 mine
        B: {X, Y, Z} has 1 mine
        -> Z must be safe (B - A = {Z} has 0 mines)

    Only directly adjacent revealed cells are compared; chains of
    overlapping constraints are left to the probability engine.
    """

    name = "Subset"
    priority = 2
    category = InferenceKind.DETERMINISTIC_LOGIC

    def is_applicable(self, cell: Cell, board: Board) -> bool:
        return _is_numbered(cell)

    def apply(self, cell: Cell, board: Board) -> InferenceResult:
        if not self.is_applicable(cell, board):
            return self._fail()

        own_hidden = cell.neighbors_in_state(CellState.HIDDEN)
        if not own_hidden:
            return self._fail()
        own_set = set(map(id, own_hidden))
        own_mines = cell.remaining_mines

        for neighbor in cell.neighbors:
            if not _is_numbered(neighbor):
                continue

            other_hidden = neighbor.neighbors_in_state(CellState.HIDDEN)
            if not other_hidden:
                continue
            other_set = set(map(id, other_hidden))
            other_mines = neighbor.remaining_mines

            if own_set < other_set:
                diff = [c for c in other_hidden if id(c) not in own_set]
                diff_mines = other_mines - own_mines
            elif other_set < own_set:
                diff = [c for c in own_hidden if id(c) not in other_set]
                diff_mines = own_mines - other_mines
            else:
                continue

            if diff_mines > 0 and diff_mines == len(diff):
                return self._succeed(
                    Action.FLAG,
                    diff,
                    f"Subset of {cell.position} and {neighbor.position}: "
                    f"{diff_mines} mines in the difference",
                )
            if diff_mines == 0 and diff:
                return self._succeed(
                    Action.REVEAL,
                    diff,
                    f"Subset of {cell.position} and {neighbor.position}: "
                    f"{len(diff)} safe cells in the difference",
                )

        return self._fail()


# ============================================================================
# Pattern Rules
# ============================================================================

class Pattern121Rule(Rule):
    """
    Recognize a 1-2-1 line centered on a revealed "2".

    Only the four straight and diagonal triples through the center are
    checked; offset or L-shaped variants are not recognized.
    """

    name = "Pattern121"
    priority = 3
    category = InferenceKind.RECOGNIZED_PATTERN

    def is_applicable(self, cell: Cell, board: Board) -> bool:
        return cell.is_revealed and cell.adjacent_mines == 2

    def apply(self, cell: Cell, board: Board) -> InferenceResult:
        if not self.is_applicable(cell, board):
            return self._fail()

        for (dr1, dc1), (dr2, dc2) in AXIS_PAIRS:
            first = board.cell_at(cell.row + dr1, cell.col + dc1)
            second = board.cell_at(cell.row + dr2, cell.col + dc2)
            if not (self._is_one(first) and self._is_one(second)):
                continue

            candidates = [
                neighbor
                for neighbor in cell.neighbors
                if neighbor.is_hidden
                and (neighbor in first.neighbors) != (neighbor in second.neighbors)
            ]
            if len(candidates) >= 2:
                return self._succeed(
                    Action.FLAG,
                    candidates[:2],
                    f"1-2-1 pattern around {cell.position}",
                    certainty=PATTERN_121_CERTAINTY,
                )

        return self._fail()

    @staticmethod
    def _is_one(cell: Optional[Cell]) -> bool:
        return cell is not None and cell.is_revealed and cell.adjacent_mines == 1


# ============================================================================
# Rule Registry
# ============================================================================

def default_rules() -> List[Rule]:
    """Fresh instances of every rule, ordered by priority."""
    rules: List[Rule] = [
        CompleteMinesRule(),
        SaturationRule(),
        SubsetRule(),
        Pattern121Rule(),
    ]
    return sorted(rules, key=lambda rule: rule.priority)
