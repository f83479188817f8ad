import asyncio

from arena_core.domain.battle.models import PeerReview
from arena_core.domain.prompts.parsing import parse_review
from arena_core.domain.prompts.templates import build_review_prompt
from arena_core.ports.llm import ModelInvoker
from arena_core.shared.constants import (
    NEUTRAL_REVIEW_SCORE,
    REVIEW_CRITERIA,
    REVIEW_MAX_TOKENS,
    REVIEW_TEMPERATURE,
)
from arena_core.shared.logging import get_contextual_logger
from arena_core.shared.statistics import rounded_mean

logger = get_contextual_logger("arena.peer_review")


class PeerReviewPanel:
    """Has every model except the author score a candidate prompt.

    Always returns one review per eligible reviewer. A reviewer whose call
    fell back, or whose answer lacks criteria, contributes the neutral
    score for what is missing.
    """

    def __init__(
        self,
        invoker: ModelInvoker,
        neutral_score: float = NEUTRAL_REVIEW_SCORE,
        max_tokens: int = REVIEW_MAX_TOKENS,
        temperature: float = REVIEW_TEMPERATURE,
    ):
        self.invoker = invoker
        self.neutral_score = neutral_score
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def review(
        self,
        candidate_prompt: str,
        author_id: str,
        reviewer_ids: list[str] | tuple[str, ...],
        original_prompt: str = "",
        category: str = "general",
    ) -> list[PeerReview]:
        reviewers = [model_id for model_id in reviewer_ids if model_id != author_id]
        if not reviewers:
            return []

        review_prompt = build_review_prompt(
            original_prompt or candidate_prompt, candidate_prompt, category
        )
        return list(
            await asyncio.gather(
                *(
                    self._review_one(reviewer, author_id, review_prompt, category)
                    for reviewer in reviewers
                )
            )
        )

    async def _review_one(
        self, reviewer_id: str, author_id: str, review_prompt: str, category: str
    ) -> PeerReview:
        with logger.scope(phase="peer_review", model=reviewer_id):
            response = await self.invoker.invoke(
                reviewer_id,
                review_prompt,
                self.max_tokens,
                self.temperature,
                category,
            )

        if response.is_fallback:
            logger.warning(
                "Review by %s fell back (%s). Using neutral score %.1f",
                reviewer_id,
                response.error_type,
                self.neutral_score,
                neutral_fallback=True,
            )
            return PeerReview(
                reviewer_id=reviewer_id,
                reviewee_id=author_id,
                criteria=dict.fromkeys(REVIEW_CRITERIA, self.neutral_score),
                overall=self.neutral_score,
                critique="Review unavailable; neutral score applied.",
                is_fallback=True,
                cost=response.cost,
            )

        parsed = parse_review(response.text, self.neutral_score)
        if parsed.missing:
            logger.warning(
                "Review by %s is missing %d/%d criteria (%s). Using neutral score %.1f for them",
                reviewer_id,
                len(parsed.missing),
                len(REVIEW_CRITERIA),
                ", ".join(parsed.missing),
                self.neutral_score,
                neutral_fallback=True,
            )

        overall = rounded_mean(parsed.criteria.values())
        logger.info(f"{reviewer_id} reviewed {author_id}'s prompt: {overall}/10")
        return PeerReview(
            reviewer_id=reviewer_id,
            reviewee_id=author_id,
            criteria=parsed.criteria,
            overall=overall,
            critique=parsed.critique,
            suggestions=parsed.suggestions,
            cost=response.cost,
        )
