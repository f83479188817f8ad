from typing import Any

from arena_core.domain.battle import (
    BattleConfig,
    BattleMode,
    BattleType,
    ModelResponse,
    PeerReview,
    RoundResult,
    Score,
)
from arena_core.domain.catalog import Model, ModelCatalog
from arena_core.shared.constants import REVIEW_CRITERIA

MODEL_A = "alpha-large"
MODEL_B = "beta-fast"
MODEL_C = "gamma-offline"


def create_model_config(
    name: str = "alpha-large", provider: str = "fake", **overrides: Any
) -> dict[str, Any]:
    """Factory for model entries in the ``models`` settings section.

    Example:
        >>> create_model_config("beta-fast", price_per_1k_tokens=0.1)
        {'provider': 'fake', 'model_name': 'beta-fast', ...}
    """
    config = {
        "provider": provider,
        "model_name": name,
        "display_name": name.replace("-", " ").title(),
        "description": f"Test model {name}",
        "strengths": ["testing"],
        "context_window": 8192,
        "max_completion_tokens": 2048,
        "price_per_1k_tokens": 0.5,
    }
    config.update(overrides)
    return config


def make_catalog(*extra: Model) -> ModelCatalog:
    return ModelCatalog(
        [
            Model(id=MODEL_A, name="Alpha Large", provider="fake", price_per_1k_tokens=0.5),
            Model(id=MODEL_B, name="Beta Fast", provider="fake", price_per_1k_tokens=0.1),
            Model(id=MODEL_C, name="Gamma Offline", provider="fake", available=False),
            *extra,
        ]
    )


def make_config(**overrides: Any) -> BattleConfig:
    values: dict[str, Any] = {
        "battle_type": BattleType.RESPONSE,
        "mode": BattleMode.MANUAL,
        "prompt": "Explain photosynthesis simply",
        "models": (MODEL_A, MODEL_B),
    }
    values.update(overrides)
    return BattleConfig(**values)


def make_response(model_id: str = MODEL_A, text: str = "An answer.", **overrides: Any) -> ModelResponse:
    values: dict[str, Any] = {
        "model_id": model_id,
        "text": text,
        "latency_ms": 10.0,
        "tokens": 20,
        "cost": 0.1,
    }
    values.update(overrides)
    return ModelResponse(**values)


def make_review(
    overall: float,
    reviewer_id: str = MODEL_B,
    reviewee_id: str = MODEL_A,
    is_fallback: bool = False,
) -> PeerReview:
    return PeerReview(
        reviewer_id=reviewer_id,
        reviewee_id=reviewee_id,
        criteria=dict.fromkeys(REVIEW_CRITERIA, overall),
        overall=overall,
        is_fallback=is_fallback,
    )


def make_prompt_round(
    round_number: int,
    champion_score: float,
    accepted: bool = True,
    reviews: tuple[PeerReview, ...] | None = None,
) -> RoundResult:
    """A prompt-battle round where ``MODEL_A`` proposed the candidate."""
    score = Score.from_parts(7.0, 7.0, 7.0, 7.0)
    return RoundResult(
        round_number=round_number,
        champion_model_id=MODEL_A,
        champion_score=champion_score,
        scores={MODEL_A: score},
        peer_reviews=reviews if reviews is not None else (make_review(champion_score),),
        candidate_author_id=MODEL_A,
        accepted=accepted,
    )
