from arena_core.infrastructure.llm.fallback import estimate_tokens, fallback_text
from arena_core.infrastructure.llm.litellm_adapter import LiteLLMCompletionClient
from arena_core.infrastructure.llm.providers import LITELLM_PROVIDERS
from arena_core.infrastructure.llm.registry import ProviderRegistry
from arena_core.infrastructure.llm.retry import (
    Ok,
    Outcome,
    RetryingInvoker,
    RetryPolicy,
    TerminalFailure,
    TransientFailure,
)

__all__ = [
    "LITELLM_PROVIDERS",
    "LiteLLMCompletionClient",
    "Ok",
    "Outcome",
    "ProviderRegistry",
    "RetryPolicy",
    "RetryingInvoker",
    "TerminalFailure",
    "TransientFailure",
    "estimate_tokens",
    "fallback_text",
]
