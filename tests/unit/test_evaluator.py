"""
Unit tests for batch evaluation.
"""
import pytest
from game import BoardConfig, EASY
from play import Evaluator, GameRecord
from solver import InferenceKind


class TestPlayGame:
    """Test single-game records."""

    def test_mine_free_board_is_won_in_one_turn(self) -> None:
        """The opening cascade clears a board without mines."""
        evaluator = Evaluator(BoardConfig(4, 4, 0))
        record = evaluator.play_game(seed=0)

        assert isinstance(record, GameRecord)
        assert record.won is True
        assert record.lost is False
        assert record.stalled is False
        assert record.turns == 1
        assert record.revealed == 16
        assert record.kind_counts == {InferenceKind.HEURISTIC: 1}

    def test_turn_limit_counts_as_stalled(self) -> None:
        """A game cut off while still running is stalled."""
        record = Evaluator(EASY, max_turns=0).play_game(seed=0)
        assert record.stalled is True
        assert record.turns == 0
        assert record.won is False

    @pytest.mark.parametrize("seed", range(4))
    def test_outcomes_are_exclusive(self, seed: int) -> None:
        """Every game ends in exactly one way."""
        record = Evaluator(EASY).play_game(seed=seed)
        assert [record.won, record.lost, record.stalled].count(True) == 1


class TestEvaluate:
    """Test aggregated metrics."""

    def test_aggregates_mine_free_games(self) -> None:
        """Three trivial wins."""
        metrics = Evaluator(BoardConfig(4, 4, 0), num_games=3, seed=0).evaluate()

        assert metrics["games"] == 3
        assert metrics["win_rate"] == 1.0
        assert metrics["loss_rate"] == 0.0
        assert metrics["stall_rate"] == 0.0
        assert metrics["avg_turns"] == pytest.approx(1.0)
        assert metrics["avg_revealed"] == pytest.approx(16.0)
        assert metrics["kind_counts"] == {InferenceKind.HEURISTIC: 3}

    def test_rates_sum_to_one(self) -> None:
        """Win, loss and stall rates partition the games."""
        metrics = Evaluator(EASY, num_games=5, seed=10).evaluate()
        total = metrics["win_rate"] + metrics["loss_rate"] + metrics["stall_rate"]
        assert total == pytest.approx(1.0)

    def test_seeded_runs_are_reproducible(self) -> None:
        """The same base seed replays the same games."""
        first = Evaluator(EASY, num_games=3, seed=5).run()
        second = Evaluator(EASY, num_games=3, seed=5).run()
        assert first == second

    def test_no_games(self) -> None:
        """Zero games yields zeroed metrics."""
        metrics = Evaluator(num_games=0).evaluate()
        assert metrics["games"] == 0
        assert metrics["win_rate"] == 0.0
        assert metrics["kind_counts"] == {}
