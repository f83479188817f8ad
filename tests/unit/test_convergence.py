import pytest

from arena_core.domain.battle.convergence import ConvergenceDetector, ConvergenceState
from tests.fixtures.factories import MODEL_B, make_prompt_round, make_review


@pytest.fixture
def detector() -> ConvergenceDetector:  # type: ignore[misc]
    return ConvergenceDetector(epsilon=0.3, window=2)


class TestConsensus:
    def test_all_perfect_reviews(self, detector: ConvergenceDetector) -> None:
        history = [make_prompt_round(1, 10.0)]
        decision = detector.evaluate(history)
        assert decision.state is ConvergenceState.CONSENSUS_REACHED
        assert decision.should_stop

    def test_one_imperfect_review_blocks_consensus(
        self, detector: ConvergenceDetector
    ) -> None:
        reviews = (make_review(10.0), make_review(9.9, reviewer_id="other"))
        history = [make_prompt_round(1, 9.95, reviews=reviews)]
        assert not detector.consensus_reached(history)

    def test_original_prompt_never_beaten_has_no_consensus(
        self, detector: ConvergenceDetector
    ) -> None:
        history = [make_prompt_round(1, 10.0, accepted=False)]
        assert detector.champion_reviews(history) == ()
        assert not detector.consensus_reached(history)

    def test_champion_reviews_come_from_last_accepted_round(
        self, detector: ConvergenceDetector
    ) -> None:
        accepted = make_prompt_round(1, 10.0)
        rejected = make_prompt_round(2, 10.0, accepted=False, reviews=(make_review(3.0),))
        assert detector.champion_reviews([accepted, rejected]) == accepted.peer_reviews

    def test_fallback_review_counts_as_not_perfect(
        self, detector: ConvergenceDetector
    ) -> None:
        reviews = (make_review(5.0, reviewer_id=MODEL_B, is_fallback=True),)
        history = [make_prompt_round(1, 5.0, reviews=reviews)]
        assert not detector.consensus_reached(history)


class TestPlateau:
    def test_needs_a_full_window(self, detector: ConvergenceDetector) -> None:
        assert detector.plateau_reason([make_prompt_round(1, 6.0)]) is None

    def test_small_gain_is_a_plateau(self, detector: ConvergenceDetector) -> None:
        history = [
            make_prompt_round(1, 5.0),
            make_prompt_round(2, 7.0),
            make_prompt_round(3, 7.1),
        ]
        decision = detector.evaluate(history)
        assert decision.state is ConvergenceState.PLATEAUED
        assert "7.0 -> 7.1" in (decision.reason or "")

    def test_large_gain_continues(self, detector: ConvergenceDetector) -> None:
        history = [make_prompt_round(1, 5.0), make_prompt_round(2, 7.0)]
        decision = detector.evaluate(history)
        assert decision.state is ConvergenceState.CONTINUING
        assert not decision.should_stop

    def test_gain_equal_to_epsilon_is_a_plateau(
        self, detector: ConvergenceDetector
    ) -> None:
        history = [make_prompt_round(1, 6.0), make_prompt_round(2, 6.3)]
        assert detector.plateau_reason(history) is not None

    def test_consensus_wins_over_plateau(self, detector: ConvergenceDetector) -> None:
        history = [make_prompt_round(1, 10.0), make_prompt_round(2, 10.0)]
        decision = detector.evaluate(history)
        assert decision.state is ConvergenceState.CONSENSUS_REACHED

    @pytest.mark.parametrize(
        ("epsilon", "window"),
        [(-0.1, 2), (0.3, 1), (0.3, 0)],
    )
    def test_invalid_settings(self, epsilon: float, window: int) -> None:
        with pytest.raises(ValueError):
            ConvergenceDetector(epsilon=epsilon, window=window)
