from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from arena_core.domain.battle.models import ModelResponse


@dataclass(frozen=True)
class CompletionResult:
    text: str
    tokens: int
    cost_cents: float
    latency_ms: float


class CompletionClient(Protocol):
    """Invokes one remote model.

    Implementations raise ``TransientCompletionError`` for failures worth
    retrying and ``TerminalCompletionError`` for everything else.
    """

    async def invoke(
        self,
        model_id: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> CompletionResult: ...


class CompletionClientProvider(Protocol):
    @classmethod
    def from_config(cls, config: dict[str, Any]) -> CompletionClient: ...


class ModelInvoker(Protocol):
    """A model call that never fails: errors come back as fallback responses."""

    async def invoke(
        self,
        model_id: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
        category: str = "general",
    ) -> "ModelResponse": ...
