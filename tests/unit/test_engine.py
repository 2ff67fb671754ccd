"""
Unit tests for the inference engine.

Tests phase ordering, acceptance thresholds, history bookkeeping
and statistics.
"""
import pytest
from game import Board, Cell
from solver import (
    Action,
    InferenceEngine,
    InferenceKind,
    InferenceResult,
    Pattern121Rule,
    Rule,
)

from conftest import WALL_MINES, WALL_OPENING


class LowCertaintyPattern(Rule):
    """Pattern rule that always fires below the acceptance bar."""

    name = "LowCertainty"
    priority = 5
    category = InferenceKind.RECOGNIZED_PATTERN

    def is_applicable(self, cell: Cell, board: Board) -> bool:
        return cell.is_revealed

    def apply(self, cell: Cell, board: Board) -> InferenceResult:
        hidden = [n for n in cell.neighbors if n.is_hidden]
        return self._succeed(Action.FLAG, hidden[:1], "weak guess", certainty=0.5)


# ============================================================================
# Phase Order Tests
# ============================================================================

class TestDeterministicPhase:
    """Deterministic rules run first, scanning row-major."""

    def test_first_revealed_number_wins(self, board_factory) -> None:
        """The "2" at (0, 3) saturates before anything else is tried."""
        board = board_factory(8, 8, WALL_MINES, revealed=WALL_OPENING)
        result = InferenceEngine(board).next_inference()

        assert result.kind == InferenceKind.DETERMINISTIC_LOGIC
        assert result.action == Action.FLAG
        assert result.targets == [(0, 4), (1, 4)]
        assert result.certainty == 1.0

    def test_deterministic_beats_pattern(self, board_factory) -> None:
        """A 1-2-1 line is also solvable by Subset, which runs first."""
        board = board_factory(
            2, 3, mines=[(0, 0), (0, 2)], revealed=[(1, 0), (1, 1), (1, 2)]
        )
        result = InferenceEngine(board).next_inference()
        assert result.kind == InferenceKind.DETERMINISTIC_LOGIC
        assert result.targets == [(0, 2)]


class TestPatternPhase:
    """Pattern rules run only after deterministic rules fail."""

    def test_pattern_result_accepted(self, board_factory) -> None:
        """High-certainty pattern results are returned."""
        board = board_factory(
            2, 3, mines=[(0, 0), (0, 2)], revealed=[(1, 0), (1, 1), (1, 2)]
        )
        engine = InferenceEngine(board, rules=[Pattern121Rule()])
        result = engine.next_inference()

        assert result.kind == InferenceKind.RECOGNIZED_PATTERN
        assert result.targets == [(0, 0), (0, 2)]
        assert result.certainty == pytest.approx(0.95)

    def test_low_certainty_pattern_rejected(self, board_factory) -> None:
        """Certainty below 0.9 falls through to the Bayesian phase."""
        board = board_factory(2, 2, mines=[(1, 0)], revealed=[(0, 0)])
        engine = InferenceEngine(board, rules=[LowCertaintyPattern()])
        result = engine.next_inference()
        assert result.kind == InferenceKind.BAYESIAN_NETWORK


class TestBayesianPhase:
    """Probability thresholds decide the final phase."""

    def test_reveals_safest_cell(self, board_factory) -> None:
        """Below 0.5 the safest cell is revealed, ties in row-major order."""
        board = board_factory(2, 2, mines=[(1, 0)], revealed=[(0, 0)])
        result = InferenceEngine(board).next_inference()

        assert result.kind == InferenceKind.BAYESIAN_NETWORK
        assert result.action == Action.REVEAL
        assert result.targets == [(0, 1)]
        assert result.certainty == pytest.approx(2 / 3)

    def test_flags_near_certain_mine(self, board_factory) -> None:
        """Above 0.85 the cell is flagged."""
        board = board_factory(1, 3, mines=[(0, 0), (0, 2)], revealed=[(0, 1)])
        result = InferenceEngine(board, rules=[]).next_inference()

        assert result.action == Action.FLAG
        assert result.targets == [(0, 0)]
        assert result.certainty == pytest.approx(1.0)

    def test_ambiguous_zone_defers(self, board_factory) -> None:
        """A 50/50 guess yields no move."""
        board = board_factory(1, 3, mines=[(0, 0)], revealed=[(0, 1)])
        engine = InferenceEngine(board)
        assert engine.next_inference() is None
        assert engine.history == []
        assert engine.moves_total == 0

    def test_no_hidden_cells(self, board_factory) -> None:
        """A fully resolved board yields no move."""
        board = board_factory(1, 2, mines=[(0, 0)], revealed=[(0, 1)],
                              flagged=[(0, 0)])
        assert InferenceEngine(board).next_inference() is None


# ============================================================================
# Bookkeeping Tests
# ============================================================================

class TestBookkeeping:
    """Accepted results are recorded and invalidate the cache."""

    def test_history_and_counter(self, board_factory) -> None:
        """Each accepted inference is appended once."""
        board = board_factory(2, 2, mines=[(1, 0)], revealed=[(0, 0)])
        engine = InferenceEngine(board)
        result = engine.next_inference()
        assert engine.history == [result]
        assert engine.moves_total == 1

    def test_cache_cleared_after_inference(self, board_factory) -> None:
        """Stale probabilities are dropped once a move is chosen."""
        board = board_factory(2, 2, mines=[(1, 0)], revealed=[(0, 0)])
        engine = InferenceEngine(board)
        engine.probability.probability_map()
        assert engine.probability.cache_size == 3

        engine.next_inference()
        assert engine.probability.cache_size == 0

    def test_invalidate(self, board_factory) -> None:
        """External board changes can drop the cache explicitly."""
        board = board_factory(2, 2, mines=[(1, 0)], revealed=[(0, 0)])
        engine = InferenceEngine(board)
        engine.probability_map()
        engine.invalidate()
        assert engine.probability.cache_size == 0


# ============================================================================
# Statistics Tests
# ============================================================================

class TestStatistics:
    """Test statistics and probability map reporting."""

    def test_empty_statistics(self, board_factory) -> None:
        """No history gives zeros."""
        board = board_factory(2, 2, mines=[(1, 0)])
        stats = InferenceEngine(board).statistics()
        assert stats.moves_total == 0
        assert stats.average_certainty == 0.0
        assert stats.kind_counts == {}
        assert set(stats.rule_success_rates) == {
            "CompleteMines", "Saturation", "Subset", "Pattern121"
        }
        assert all(rate == 0.0 for rate in stats.rule_success_rates.values())

    def test_statistics_after_inference(self, board_factory) -> None:
        """Average certainty and kind counts follow the history."""
        board = board_factory(2, 2, mines=[(1, 0)], revealed=[(0, 0)])
        engine = InferenceEngine(board)
        engine.next_inference()
        stats = engine.statistics()

        assert stats.moves_total == 1
        assert stats.average_certainty == pytest.approx(2 / 3)
        assert stats.kind_counts == {InferenceKind.BAYESIAN_NETWORK: 1}
        assert stats.rule_success_rates["Saturation"] == 0.0

    def test_rule_success_rate(self, board_factory) -> None:
        """A rule that fired once out of one attempt reports 1.0."""
        board = board_factory(8, 8, WALL_MINES, revealed=WALL_OPENING)
        engine = InferenceEngine(board)
        engine.next_inference()
        rates = engine.statistics().rule_success_rates
        assert rates["Saturation"] == 1.0
        assert rates["CompleteMines"] == 0.0

    def test_probability_map_keys(self, board_factory) -> None:
        """Keys are "row-col" strings."""
        board = board_factory(2, 2, mines=[(1, 0)], revealed=[(0, 0)])
        mapping = InferenceEngine(board).probability_map()
        assert set(mapping) == {"0-1", "1-0", "1-1"}
        assert all(p == pytest.approx(1 / 3) for p in mapping.values())
