"""
Minesweeper inference solver module.

Provides the pieces that decide the next move:
- Rules: deterministic and pattern-based deductions around one cell
- ProbabilityEngine: exact/approximate mine probability per cell
- InferenceEngine: runs rules then probabilities, one move per call
"""
from .types import Action, InferenceKind, InferenceResult, EngineStatistics
from .rules import (
    Rule,
    CompleteMinesRule,
    SaturationRule,
    SubsetRule,
    Pattern121Rule,
    default_rules,
)
from .probability import (
    ProbabilityEngine,
    CellProbability,
    BestMove,
    EXACT_ENUMERATION_LIMIT,
    REVEAL_THRESHOLD,
    FLAG_THRESHOLD,
)
from .engine import InferenceEngine, PATTERN_MIN_CERTAINTY

__all__ = [
    "Action",
    "InferenceKind",
    "InferenceResult",
    "EngineStatistics",
    "Rule",
    "CompleteMinesRule",
    "SaturationRule",
    "SubsetRule",
    "Pattern121Rule",
    "default_rules",
    "ProbabilityEngine",
    "CellProbability",
    "BestMove",
    "EXACT_ENUMERATION_LIMIT",
    "REVEAL_THRESHOLD",
    "FLAG_THRESHOLD",
    "InferenceEngine",
    "PATTERN_MIN_CERTAINTY",
]
