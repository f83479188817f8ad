"""Provider registry for extensible completion client creation."""

from collections.abc import Callable
from typing import Any, ClassVar

from arena_core.ports.llm import CompletionClient, CompletionClientProvider
from arena_core.shared.errors import ConfigurationError
from arena_core.shared.logging import get_contextual_logger

logger = get_contextual_logger("arena.models.registry")


class ProviderRegistry:
    """Registry of completion client providers.

    Production providers are registered at import time of
    ``arena_core.infrastructure.llm.providers``. Tests register their
    own fake providers.
    """

    _providers: ClassVar[dict[str, type[CompletionClientProvider]]] = {}

    @classmethod
    def register(
        cls, provider_name: str
    ) -> Callable[[type[CompletionClientProvider]], type[CompletionClientProvider]]:
        """Decorator to register a provider.

        Usage:
            @ProviderRegistry.register("groq")
            class GroqProvider:
                @classmethod
                def from_config(cls, config):
                    return LiteLLMCompletionClient.from_config(config)
        """

        def decorator(
            provider_class: type[CompletionClientProvider],
        ) -> type[CompletionClientProvider]:
            cls._providers[provider_name] = provider_class
            logger.debug(f"Registered provider: {provider_name}")
            return provider_class

        return decorator

    @classmethod
    def create(cls, provider_name: str, config: dict[str, Any]) -> CompletionClient:
        provider_class = cls._providers.get(provider_name)

        if not provider_class:
            available = ", ".join(sorted(cls._providers))
            raise ConfigurationError(
                f"Unknown provider: '{provider_name}'. "
                f"Available providers: {available}"
            )

        return provider_class.from_config(config)

    @classmethod
    def is_registered(cls, provider_name: str) -> bool:
        return provider_name in cls._providers

    @classmethod
    def list_providers(cls) -> list[str]:
        return list(cls._providers.keys())
