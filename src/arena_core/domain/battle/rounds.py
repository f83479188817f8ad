import asyncio
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace

from arena_core.domain.battle.models import (
    BattleConfig,
    ModelResponse,
    ModelStatus,
    RoundResult,
    Score,
)
from arena_core.domain.battle.scoring import ResponseScorer
from arena_core.ports.llm import ModelInvoker
from arena_core.shared.logging import get_contextual_logger

logger = get_contextual_logger("arena.rounds")

StatusCallback = Callable[[str, ModelStatus], None]


def pick_champion(
    models: Sequence[str],
    scores: Mapping[str, Score],
    fallback_ids: frozenset[str] | set[str] = frozenset(),
) -> str:
    """Highest overall wins. Ties go to whoever is listed first.

    A model that actually answered always beats fallback content.
    """

    def rank(model_id: str) -> tuple[bool, float]:
        return model_id not in fallback_ids, scores[model_id].overall

    champion = models[0]
    for model_id in models[1:]:
        if rank(model_id) > rank(champion):
            champion = model_id
    return champion


class RoundExecutor:
    """Runs one response round: both models answer, both answers are scored.

    A round cannot fail. Models that never answered are represented by
    fallback responses, which are scored like any other text.
    """

    def __init__(self, invoker: ModelInvoker, scorer: ResponseScorer | None = None):
        self.invoker = invoker
        self.scorer = scorer or ResponseScorer()

    async def _invoke(
        self,
        config: BattleConfig,
        round_number: int,
        model_id: str,
        prompt: str,
        on_status: StatusCallback | None,
    ) -> ModelResponse:
        if on_status:
            on_status(model_id, ModelStatus.RUNNING)
        with logger.scope(round_number=round_number, phase="response", model=model_id):
            response = await self.invoker.invoke(
                model_id,
                prompt,
                config.max_tokens,
                config.temperature,
                config.category,
            )
        if on_status:
            on_status(
                model_id,
                ModelStatus.FAILED if response.is_fallback else ModelStatus.COMPLETED,
            )
        return response

    async def run_round(
        self,
        config: BattleConfig,
        round_number: int,
        models: Sequence[str],
        prompt: str | None = None,
        on_status: StatusCallback | None = None,
    ) -> RoundResult:
        round_prompt = prompt or config.prompt
        responses = await asyncio.gather(
            *(
                self._invoke(config, round_number, model_id, round_prompt, on_status)
                for model_id in models
            )
        )

        scores: dict[str, Score] = {}
        notes = []
        for response in responses:
            score = self.scorer.score(response.text, config.prompt, config.category)
            if response.is_fallback:
                score = replace(score, notes=f"{score.notes}; fallback content")
                notes.append(
                    f"{response.model_id} used fallback content ({response.error_type})"
                )
            scores[response.model_id] = score

        fallback_ids = {r.model_id for r in responses if r.is_fallback}
        champion = pick_champion(models, scores, fallback_ids)
        logger.info(
            f"Round {round_number} champion: {champion} "
            f"({scores[champion].overall}/10)",
        )
        return RoundResult(
            round_number=round_number,
            champion_model_id=champion,
            champion_score=scores[champion].overall,
            scores=scores,
            responses=tuple(responses),
            notes=tuple(notes),
        )
