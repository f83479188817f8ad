from arena_core.domain.battle.models import Battle, ModelResponse, PeerReview
from arena_core.shared.logging import get_contextual_logger


class CostTracker:
    """Feeds every billed call of one battle into its running total."""

    def __init__(self, battle: Battle):
        self.battle = battle
        self.logger = get_contextual_logger("arena.cost_tracker")

    def add_cost(self, model_id: str, cents: float) -> None:
        self.battle.add_cost(model_id, cents)
        self.logger.debug(
            "Added %.4fc for %s, total now: %.4fc",
            cents,
            model_id,
            self.battle.total_cost,
        )

    def add_response(self, response: ModelResponse) -> None:
        self.add_cost(response.model_id, response.cost)

    def add_reviews(self, reviews: list[PeerReview] | tuple[PeerReview, ...]) -> None:
        for review in reviews:
            self.add_cost(review.reviewer_id, review.cost)
