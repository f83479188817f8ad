from arena_core.ports.llm import (
    CompletionClient,
    CompletionClientProvider,
    CompletionResult,
    ModelInvoker,
)
from arena_core.ports.persistence import BattleRecorder

__all__ = [
    "BattleRecorder",
    "CompletionClient",
    "CompletionClientProvider",
    "CompletionResult",
    "ModelInvoker",
]
