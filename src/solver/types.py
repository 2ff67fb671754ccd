"""
Shared result types for the inference solver.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


# ============================================================================
# Constants
# ============================================================================

class Action(Enum):
    """What the solver asks the controller to do with its targets."""

    REVEAL = "reveal"
    FLAG = "flag"


class InferenceKind(Enum):
    """Family of reasoning that produced an inference."""

    DETERMINISTIC_LOGIC = "deterministic_logic"
    RECOGNIZED_PATTERN = "recognized_pattern"
    BAYESIAN_NETWORK = "bayesian_network"
    HEURISTIC = "heuristic"


# ============================================================================
# Result Data Classes
# ============================================================================

@dataclass
class InferenceResult:
    """
    One suggested move produced by a rule or the probability engine.

    Attributes:
        success: Whether the inference produced a move.
        action: Reveal or flag; None for failed results.
        targets: Ordered (row, col) coordinates the action applies to.
        rationale: Human-readable explanation.
        certainty: Confidence in [0, 1].
        kind: Reasoning family that produced the result.
    """

    success: bool
    action: Optional[Action] = None
    targets: List[Tuple[int, int]] = field(default_factory=list)
    rationale: str = ""
    certainty: float = 0.0
    kind: InferenceKind = InferenceKind.DETERMINISTIC_LOGIC

    @classmethod
    def failed(cls, kind: InferenceKind) -> "InferenceResult":
        """Empty result signalling that nothing could be inferred."""
        return cls(success=False, kind=kind)


@dataclass
class EngineStatistics:
    """Aggregated view of the inference history."""

    moves_total: int = 0
    average_certainty: float = 0.0
    kind_counts: Dict[InferenceKind, int] = field(default_factory=dict)
    rule_success_rates: Dict[str, float] = field(default_factory=dict)
