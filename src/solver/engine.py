"""
Inference engine coordinating rules and probability estimation.

One call produces at most one move. Phases run in a fixed order and
the first phase with an acceptable result wins.
"""
import logging
from collections import Counter
from typing import Dict, List, Optional

from game.board import Board
from game.cell import Cell

from .probability import (
    FLAG_THRESHOLD,
    REVEAL_THRESHOLD,
    ProbabilityEngine,
)
from .rules import Rule, default_rules
from .types import (
    Action,
    EngineStatistics,
    InferenceKind,
    InferenceResult,
)

logger = logging.getLogger(__name__)


PATTERN_MIN_CERTAINTY = 0.9


# ============================================================================
# Inference Engine
# ============================================================================

class InferenceEngine:
    """
    Runs the rule set, then the probability engine, one move per call.

    Strategy:
        1. Deterministic phase: scan revealed cells in row-major order,
           trying deterministic rules by priority
        2. Pattern phase: same scan with pattern rules, accepting only
           results with certainty >= PATTERN_MIN_CERTAINTY
        3. Bayesian phase: reveal the safest cell if its mine
           probability is below REVEAL_THRESHOLD, or flag it if above
           FLAG_THRESHOLD

    If all three phases come up empty, no move is returned and the
    caller should stop playing automatically.
    """

    def __init__(
        self, board: Board, rules: Optional[List[Rule]] = None
    ) -> None:
        """
        Initialize the engine.

        Args:
            board: Board to read. Not owned; must outlive the engine.
            rules: Rule instances to use; default_rules() when omitted.
        """
        self.board = board
        self.probability = ProbabilityEngine(board)
        self.rules: List[Rule] = sorted(
            rules if rules is not None else default_rules(),
            key=lambda rule: rule.priority,
        )
        self.history: List[InferenceResult] = []
        self.moves_total = 0

    # ========================================================================
    # Main Cycle
    # ========================================================================

    def next_inference(self) -> Optional[InferenceResult]:
        """
        Produce the next move.

        Returns:
            The accepted inference, or None if nothing can be inferred.
        """
        result = (
            self._deterministic_phase()
            or self._pattern_phase()
            or self._bayesian_phase()
        )
        if result is None:
            logger.debug("No inference available")
            return None

        self._register(result)
        return result

    def _scan(
        self, category: InferenceKind, min_certainty: float = 0.0
    ) -> Optional[InferenceResult]:
        """First successful result of ``category`` rules over revealed cells."""
        rules = [rule for rule in self.rules if rule.category == category]
        if not rules:
            return None

        for cell in self._revealed_cells():
            for rule in rules:
                if not rule.is_applicable(cell, self.board):
                    continue
                result = rule.apply(cell, self.board)
                if result.success and result.certainty >= min_certainty:
                    return result
        return None

    def _revealed_cells(self) -> List[Cell]:
        return [cell for cell in self.board.all_cells() if cell.is_revealed]

    def _deterministic_phase(self) -> Optional[InferenceResult]:
        return self._scan(InferenceKind.DETERMINISTIC_LOGIC)

    def _pattern_phase(self) -> Optional[InferenceResult]:
        return self._scan(
            InferenceKind.RECOGNIZED_PATTERN, PATTERN_MIN_CERTAINTY
        )

    def _bayesian_phase(self) -> Optional[InferenceResult]:
        move = self.probability.best_move()
        if move.cell is None:
            return None

        if move.probability < REVEAL_THRESHOLD:
            return InferenceResult(
                success=True,
                action=Action.REVEAL,
                targets=[move.cell.position],
                rationale=move.rationale,
                certainty=1.0 - move.probability,
                kind=InferenceKind.BAYESIAN_NETWORK,
            )

        if move.probability > FLAG_THRESHOLD:
            return InferenceResult(
                success=True,
                action=Action.FLAG,
                targets=[move.cell.position],
                rationale=f"High mine probability: {move.probability:.1%}",
                certainty=move.probability,
                kind=InferenceKind.BAYESIAN_NETWORK,
            )

        logger.debug(
            "Safest cell %s at %.3f is ambiguous, deferring",
            move.cell.position, move.probability,
        )
        return None

    def _register(self, result: InferenceResult) -> None:
        """Record an accepted inference; cached probabilities are now stale."""
        self.history.append(result)
        self.moves_total += 1
        self.probability.clear_cache()
        logger.debug(
            "Inference #%d: %s %s via %s (certainty %.2f)",
            self.moves_total, result.action.value, result.targets,
            result.kind.value, result.certainty,
        )

    def invalidate(self) -> None:
        """Drop cached probabilities after a board change made elsewhere."""
        self.probability.clear_cache()

    # ========================================================================
    # Reporting
    # ========================================================================

    def statistics(self) -> EngineStatistics:
        """Summary of every accepted inference so far."""
        kind_counts: Dict[InferenceKind, int] = dict(
            Counter(result.kind for result in self.history)
        )
        average = (
            sum(result.certainty for result in self.history) / len(self.history)
            if self.history
            else 0.0
        )
        return EngineStatistics(
            moves_total=self.moves_total,
            average_certainty=average,
            kind_counts=kind_counts,
            rule_success_rates={rule.name: rule.success_rate for rule in self.rules},
        )

    def probability_map(self) -> Dict[str, float]:
        """Mapping ``"row-col"`` -> mine probability, safest first."""
        return {
            estimate.key: estimate.probability
            for estimate in self.probability.probability_map()
        }
