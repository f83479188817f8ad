from typing import Literal

from pydantic import BaseModel, Field, model_validator


class RetryConfig(BaseModel):
    max_attempts: int = Field(default=5, ge=1)
    initial_delay: float = Field(default=1.0, ge=0.0)
    max_delay: float = Field(default=30.0, ge=0.0)
    jitter: float = Field(default=1.0, ge=0.0)
    # Per attempt, in seconds
    timeout: float = Field(default=45.0, gt=0.0)

    @model_validator(mode="after")
    def _check_delays(self) -> "RetryConfig":
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must not be smaller than initial_delay")
        return self


class ConvergenceConfig(BaseModel):
    epsilon: float = Field(default=0.3, ge=0.0, le=10.0)
    window: int = Field(default=2, ge=2)
    perfect_score: float = Field(default=10.0, gt=0.0, le=10.0)


class BattleDefaultsConfig(BaseModel):
    battle_type: Literal["response", "prompt"] = "response"
    mode: Literal["auto", "manual"] = "auto"
    category: str = "general"
    rounds: int = Field(default=1, ge=1)
    prompt_rounds: int = Field(default=3, ge=1)
    max_tokens: int = Field(default=500, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    improvement_max_tokens: int = Field(default=1500, ge=1)
    review_max_tokens: int = Field(default=800, ge=1)


class ModelConfig(BaseModel):
    model_config = {"extra": "allow"}

    provider: str
    model_name: str
    display_name: str | None = None
    description: str = ""
    available: bool = True
    premium: bool = False
    strengths: list[str] = Field(default_factory=list)
    context_window: int | None = None
    max_completion_tokens: int | None = None
    price_per_1k_tokens: float = Field(default=0.0, ge=0.0)
    speed: Literal["fast", "medium", "slow"] = "medium"
    quality: Literal["high", "medium", "standard", "good"] = "good"


class ClientConfig(BaseModel):
    provider: str = "groq"
    api_base: str | None = None


class ArenaConfig(BaseModel):
    models: dict[str, ModelConfig] = Field(default_factory=dict)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    convergence: ConvergenceConfig = Field(default_factory=ConvergenceConfig)
    battle: BattleDefaultsConfig = Field(default_factory=BattleDefaultsConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    outputs_dir: str | None = None
