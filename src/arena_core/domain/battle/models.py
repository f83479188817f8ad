"""Typed records for battles, rounds, responses and reviews."""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from arena_core.domain.errors import BattleStateError
from arena_core.shared.constants import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    MAX_SUB_SCORE,
)
from arena_core.shared.errors import ConfigurationError
from arena_core.shared.statistics import rounded_mean

KNOWN_CATEGORIES = frozenset(
    {
        "general",
        "creative",
        "technical",
        "analysis",
        "summary",
        "explanation",
        "math",
        "research",
    }
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class BattleType(Enum):
    RESPONSE = "response"
    PROMPT = "prompt"


class BattleMode(Enum):
    AUTO = "auto"
    MANUAL = "manual"


class BattleStatus(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ModelStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class BattleConfig:
    """What the user asked for. Validated on construction."""

    battle_type: BattleType
    mode: BattleMode
    prompt: str
    category: str = "general"
    models: tuple[str, ...] = ()
    rounds: int = 1
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE

    def __post_init__(self) -> None:
        object.__setattr__(self, "models", tuple(self.models))
        object.__setattr__(
            self, "category", (self.category or "general").strip().lower()
        )

        problems = []
        if not isinstance(self.battle_type, BattleType):
            problems.append(f"Unknown battle type: {self.battle_type!r}")
        if not isinstance(self.mode, BattleMode):
            problems.append(f"Unknown battle mode: {self.mode!r}")
        if not self.prompt or not self.prompt.strip():
            problems.append("Prompt must not be empty")
        if self.rounds < 1:
            problems.append(f"Round budget must be at least 1, got {self.rounds}")
        if self.max_tokens <= 0:
            problems.append(f"max_tokens must be positive, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 2.0:
            problems.append(
                f"temperature must be between 0 and 2, got {self.temperature}"
            )
        if self.mode is BattleMode.MANUAL:
            if len(self.models) != 2 or len(set(self.models)) != 2:
                problems.append(
                    "Manual mode needs exactly two distinct model ids, "
                    f"got {list(self.models)}"
                )
        elif self.models and len(self.models) != 2:
            problems.append(
                f"A battle has exactly two models, got {list(self.models)}"
            )

        if problems:
            raise ConfigurationError("Invalid battle configuration", problems)


@dataclass(frozen=True)
class ModelResponse:
    model_id: str
    text: str
    latency_ms: float
    tokens: int
    # Cents
    cost: float
    created_at: datetime = field(default_factory=_utcnow)
    is_fallback: bool = False
    error_type: str | None = None
    attempts: int = 1
    id: str = field(default_factory=_new_id)


@dataclass(frozen=True)
class Score:
    accuracy: float
    reasoning: float
    structure: float
    creativity: float
    overall: float
    notes: str = ""

    def __post_init__(self) -> None:
        for name in ("accuracy", "reasoning", "structure", "creativity", "overall"):
            value = getattr(self, name)
            if not 0.0 <= value <= MAX_SUB_SCORE:
                raise ValueError(f"Score {name} out of range: {value}")

    @classmethod
    def from_parts(
        cls,
        accuracy: float,
        reasoning: float,
        structure: float,
        creativity: float,
        notes: str = "",
    ) -> "Score":
        parts = [round(value, 1) for value in (accuracy, reasoning, structure, creativity)]
        return cls(*parts, overall=rounded_mean(parts), notes=notes)


@dataclass(frozen=True)
class PeerReview:
    reviewer_id: str
    reviewee_id: str
    criteria: Mapping[str, float]
    overall: float
    critique: str = ""
    suggestions: tuple[str, ...] = ()
    is_fallback: bool = False
    cost: float = 0.0

    @property
    def is_perfect(self) -> bool:
        return self.overall == MAX_SUB_SCORE


@dataclass(frozen=True)
class PromptEvolutionEntry:
    round_number: int
    prompt: str
    author_id: str
    improvements: tuple[str, ...] = ()
    score: float = 0.0
    thinking: str = ""


@dataclass(frozen=True)
class RoundResult:
    round_number: int
    champion_model_id: str
    champion_score: float
    scores: Mapping[str, Score]
    responses: tuple[ModelResponse, ...] = ()
    # Prompt battles: author id -> prompt text for incumbent and challenger
    candidates: Mapping[str, str] = field(default_factory=dict)
    peer_reviews: tuple[PeerReview, ...] = ()
    candidate_author_id: str | None = None
    # Prompt battles: the candidate took the title this round
    accepted: bool = False
    notes: tuple[str, ...] = ()

    @property
    def has_fallback(self) -> bool:
        return any(response.is_fallback for response in self.responses) or any(
            review.is_fallback for review in self.peer_reviews
        )


@dataclass
class Battle:
    """Aggregate root. Only the orchestrator running it may mutate it."""

    config: BattleConfig
    id: str = field(default_factory=_new_id)
    status: BattleStatus = BattleStatus.RUNNING
    models: tuple[str, ...] = ()
    winner_model_id: str | None = None
    total_cost: float = 0.0
    cost_by_model: dict[str, float] = field(default_factory=dict)
    global_consensus: bool = False
    plateau_reason: str | None = None
    final_prompt: str | None = None
    # Prompt battles: no refinement beat the submitted prompt
    kept_original: bool = False
    summary: str = ""
    selection_rationale: str = ""
    failure_reason: str | None = None
    degraded_notes: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    _rounds: list[RoundResult] = field(default_factory=list, repr=False)
    _evolution: list[PromptEvolutionEntry] = field(default_factory=list, repr=False)

    @property
    def rounds(self) -> tuple[RoundResult, ...]:
        return tuple(self._rounds)

    @property
    def evolution(self) -> tuple[PromptEvolutionEntry, ...]:
        return tuple(self._evolution)

    @property
    def responses(self) -> list[ModelResponse]:
        return [response for result in self._rounds for response in result.responses]

    @property
    def is_final(self) -> bool:
        return self.status is not BattleStatus.RUNNING

    @property
    def degraded(self) -> bool:
        return bool(self.degraded_notes)

    def _ensure_running(self) -> None:
        if self.is_final:
            raise BattleStateError(
                f"Battle {self.id} is {self.status.value} and can no longer change"
            )

    def assign_models(self, models: tuple[str, ...] | list[str]) -> None:
        self._ensure_running()
        if self.models:
            raise BattleStateError("Battle models are already assigned")
        models = tuple(models)
        if len(models) != 2 or models[0] == models[1]:
            raise BattleStateError(
                f"A battle needs exactly two distinct models, got {list(models)}"
            )
        self.models = models
        for model_id in models:
            self.cost_by_model.setdefault(model_id, 0.0)

    def append_round(self, result: RoundResult) -> None:
        self._ensure_running()
        if len(self._rounds) >= self.config.rounds:
            raise BattleStateError(
                f"Round budget of {self.config.rounds} already used"
            )
        expected = len(self._rounds) + 1
        if result.round_number != expected:
            raise BattleStateError(
                f"Expected round {expected}, got round {result.round_number}"
            )
        self._rounds.append(result)

    def append_evolution(self, entry: PromptEvolutionEntry) -> None:
        self._ensure_running()
        if entry.round_number != len(self._evolution):
            raise BattleStateError(
                f"Expected evolution entry {len(self._evolution)}, "
                f"got {entry.round_number}"
            )
        self._evolution.append(entry)

    def add_cost(self, model_id: str, cents: float) -> None:
        self._ensure_running()
        if cents < 0:
            raise BattleStateError(f"Negative cost {cents} for {model_id}")
        self.cost_by_model[model_id] = self.cost_by_model.get(model_id, 0.0) + cents
        self.total_cost += cents

    def note_degraded(self, note: str) -> None:
        self._ensure_running()
        if note not in self.degraded_notes:
            self.degraded_notes.append(note)

    def complete(self, winner_model_id: str, summary: str = "") -> None:
        self._ensure_running()
        if winner_model_id not in self.models:
            raise BattleStateError(
                f"Winner {winner_model_id} is not one of {list(self.models)}"
            )
        if self.global_consensus and not self._rounds:
            raise BattleStateError("Consensus requires at least one round")
        self.winner_model_id = winner_model_id
        self.summary = summary
        self.status = BattleStatus.COMPLETED
        self.completed_at = _utcnow()

    def fail(self, reason: str) -> None:
        self._ensure_running()
        self.global_consensus = False
        self.failure_reason = reason
        self.status = BattleStatus.FAILED
        self.completed_at = _utcnow()
