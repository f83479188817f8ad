"""Stop conditions for prompt battles.

Pure functions of the round history. ``ConsensusReached`` is checked
before ``Plateaued``; when neither holds the battle keeps going until its
round budget runs out.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from arena_core.domain.battle.models import PeerReview, RoundResult
from arena_core.shared.constants import MAX_SUB_SCORE


class ConvergenceState(Enum):
    CONTINUING = "continuing"
    CONSENSUS_REACHED = "consensus_reached"
    PLATEAUED = "plateaued"


@dataclass(frozen=True)
class ConvergenceDecision:
    state: ConvergenceState
    reason: str | None = None

    @property
    def should_stop(self) -> bool:
        return self.state is not ConvergenceState.CONTINUING


class ConvergenceDetector:
    def __init__(
        self,
        epsilon: float = 0.3,
        window: int = 2,
        perfect_score: float = MAX_SUB_SCORE,
    ):
        if epsilon < 0:
            raise ValueError("epsilon must not be negative")
        if window < 2:
            raise ValueError("window must cover at least two rounds")
        self.epsilon = epsilon
        self.window = window
        self.perfect_score = perfect_score

    @staticmethod
    def champion_reviews(history: Sequence[RoundResult]) -> tuple[PeerReview, ...]:
        """Reviews of the prompt that currently holds the title.

        That is the latest round whose candidate took over. An original
        prompt that was never beaten has no reviews.
        """
        for result in reversed(history):
            if result.accepted:
                return result.peer_reviews
        return ()

    def consensus_reached(self, history: Sequence[RoundResult]) -> bool:
        reviews = self.champion_reviews(history)
        return bool(reviews) and all(
            review.overall == self.perfect_score for review in reviews
        )

    def plateau_reason(self, history: Sequence[RoundResult]) -> str | None:
        scores = [result.champion_score for result in history]
        if len(scores) < self.window:
            return None

        gain = round(scores[-1] - scores[-self.window], 2)
        if gain > self.epsilon:
            return None
        return (
            f"Champion score moved {gain:+.1f} over the last {self.window} rounds "
            f"({scores[-self.window]:.1f} -> {scores[-1]:.1f}), "
            f"within the {self.epsilon:.1f} improvement threshold"
        )

    def evaluate(self, history: Sequence[RoundResult]) -> ConvergenceDecision:
        if self.consensus_reached(history):
            return ConvergenceDecision(
                ConvergenceState.CONSENSUS_REACHED,
                "Every reviewer gave the champion prompt a perfect score",
            )

        reason = self.plateau_reason(history)
        if reason:
            return ConvergenceDecision(ConvergenceState.PLATEAUED, reason)

        return ConvergenceDecision(ConvergenceState.CONTINUING)
