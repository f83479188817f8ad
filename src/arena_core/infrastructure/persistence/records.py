"""Mapping between domain battles and their snake_case wire records.

Records are plain dicts ready for ``json.dumps``. Domain types never leave
this module as anything else, and wire dicts only enter the domain
through ``battle_config_from_dict``.
"""

from collections.abc import Mapping
from typing import Any

from arena_core.domain.battle.models import (
    Battle,
    BattleConfig,
    BattleMode,
    BattleType,
    ModelResponse,
    PeerReview,
    PromptEvolutionEntry,
    RoundResult,
    Score,
)
from arena_core.shared.constants import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from arena_core.shared.errors import ConfigurationError
from arena_core.shared.json_utils import sanitize_for_json


def _enum_value(enum_type: type, raw: Any, field_name: str) -> Any:
    if isinstance(raw, enum_type):
        return raw
    try:
        return enum_type(str(raw).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)  # type: ignore[attr-defined]
        raise ConfigurationError(
            f"Invalid {field_name} {raw!r}", [f"{field_name} must be one of: {allowed}"]
        ) from None


def _models_field(raw: Any) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return tuple(item.strip() for item in raw.split(",") if item.strip())
    return tuple(str(item) for item in raw)


def battle_config_from_dict(data: Mapping[str, Any]) -> BattleConfig:
    """Build a validated ``BattleConfig`` from wire data.

    Accepts ``type`` as an alias of ``battle_type`` and ``models`` either
    as a list or a comma-separated string.
    """
    battle_type = data.get("battle_type", data.get("type", BattleType.RESPONSE.value))
    try:
        rounds = int(data.get("rounds", 1))
        max_tokens = int(data.get("max_tokens", DEFAULT_MAX_TOKENS))
        temperature = float(data.get("temperature", DEFAULT_TEMPERATURE))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid numeric battle setting: {e}") from e

    return BattleConfig(
        battle_type=_enum_value(BattleType, battle_type, "battle_type"),
        mode=_enum_value(BattleMode, data.get("mode", BattleMode.AUTO.value), "mode"),
        prompt=str(data.get("prompt") or ""),
        category=str(data.get("category") or "general"),
        models=_models_field(data.get("models")),
        rounds=rounds,
        max_tokens=max_tokens,
        temperature=temperature,
    )


def battle_config_to_dict(config: BattleConfig) -> dict[str, Any]:
    return {
        "battle_type": config.battle_type.value,
        "mode": config.mode.value,
        "prompt": config.prompt,
        "category": config.category,
        "models": list(config.models),
        "rounds": config.rounds,
        "max_tokens": config.max_tokens,
        "temperature": config.temperature,
    }


def response_to_record(response: ModelResponse, battle_id: str) -> dict[str, Any]:
    return {
        "id": response.id,
        "battle_id": battle_id,
        "model_id": response.model_id,
        "response_text": response.text,
        "latency_ms": round(response.latency_ms, 1),
        "tokens": response.tokens,
        "cost_cents": response.cost,
        "is_fallback": response.is_fallback,
        "error_type": response.error_type,
        "attempts": response.attempts,
        "created_at": response.created_at,
    }


def score_to_record(
    score: Score, battle_id: str, round_number: int, model_id: str
) -> dict[str, Any]:
    return {
        "battle_id": battle_id,
        "round_number": round_number,
        "model_id": model_id,
        "accuracy": score.accuracy,
        "reasoning": score.reasoning,
        "structure": score.structure,
        "creativity": score.creativity,
        "overall": score.overall,
        "notes": score.notes,
    }


def evolution_to_record(entry: PromptEvolutionEntry, battle_id: str) -> dict[str, Any]:
    return {
        "battle_id": battle_id,
        "round_number": entry.round_number,
        "prompt_text": entry.prompt,
        "author_id": entry.author_id,
        "improvements": list(entry.improvements),
        "score": entry.score,
        "thinking": entry.thinking,
    }


def review_to_record(
    review: PeerReview, battle_id: str, round_number: int
) -> dict[str, Any]:
    return {
        "battle_id": battle_id,
        "round_number": round_number,
        "reviewer_id": review.reviewer_id,
        "reviewee_id": review.reviewee_id,
        "criteria": dict(review.criteria),
        "overall": review.overall,
        "critique": review.critique,
        "suggestions": list(review.suggestions),
        "is_fallback": review.is_fallback,
        "cost_cents": review.cost,
    }


def _round_summary(result: RoundResult) -> dict[str, Any]:
    return {
        "round_number": result.round_number,
        "champion_model_id": result.champion_model_id,
        "champion_score": result.champion_score,
        "candidate_author_id": result.candidate_author_id,
        "accepted": result.accepted,
        "has_fallback": result.has_fallback,
        "notes": list(result.notes),
    }


def battle_to_record(battle: Battle) -> dict[str, Any]:
    """Flatten a finalized battle into the persisted record shape."""
    battle_id = battle.id
    scores = [
        score_to_record(score, battle_id, result.round_number, model_id)
        for result in battle.rounds
        for model_id, score in result.scores.items()
    ]
    reviews = [
        review_to_record(review, battle_id, result.round_number)
        for result in battle.rounds
        for review in result.peer_reviews
    ]

    record = {
        "battle": {
            "id": battle_id,
            "status": battle.status.value,
            **battle_config_to_dict(battle.config),
            "models": list(battle.models),
            "winner_model_id": battle.winner_model_id,
            "total_cost_cents": round(battle.total_cost, 6),
            "cost_by_model": dict(battle.cost_by_model),
            "global_consensus": battle.global_consensus,
            "plateau_reason": battle.plateau_reason,
            "final_prompt": battle.final_prompt,
            "kept_original": battle.kept_original,
            "summary": battle.summary,
            "selection_rationale": battle.selection_rationale,
            "failure_reason": battle.failure_reason,
            "degraded_notes": list(battle.degraded_notes),
            "rounds_run": len(battle.rounds),
            "created_at": battle.created_at,
            "completed_at": battle.completed_at,
        },
        "rounds": [_round_summary(result) for result in battle.rounds],
        "responses": [
            response_to_record(response, battle_id) for response in battle.responses
        ],
        "scores": scores,
        "prompt_evolution": [
            evolution_to_record(entry, battle_id) for entry in battle.evolution
        ],
        "peer_reviews": reviews,
    }
    return sanitize_for_json(record)  # type: ignore[no-any-return]
