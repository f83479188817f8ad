"""Standard completion providers for Arena."""

from collections.abc import Callable
from typing import Any, TypeVar

from arena_core.infrastructure.llm.litellm_adapter import LiteLLMCompletionClient
from arena_core.infrastructure.llm.registry import ProviderRegistry

__all__ = ["LITELLM_PROVIDERS", "LiteLLMProvider", "ProviderRegistry"]

T = TypeVar("T")


def register_providers(provider_names: list[str]) -> Callable[[T], T]:
    def decorator(cls: T) -> T:
        for name in provider_names:
            ProviderRegistry.register(name)(cls)  # type: ignore[arg-type]
        return cls

    return decorator


LITELLM_PROVIDERS = [
    "groq",
    "openai",
    "anthropic",
    "together_ai",
    "openrouter",
    "ollama",
]


@register_providers(LITELLM_PROVIDERS)
class LiteLLMProvider:
    @classmethod
    def from_config(cls, config: dict[str, Any]) -> LiteLLMCompletionClient:
        return LiteLLMCompletionClient.from_config(config)
