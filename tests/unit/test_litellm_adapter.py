from types import SimpleNamespace
from typing import Any

import litellm
import pytest

import arena_core.infrastructure.llm.providers  # noqa: F401
from arena_core.domain.catalog import ModelCatalog
from arena_core.domain.errors import (
    ConfigurationError,
    TerminalCompletionError,
    TransientCompletionError,
)
from arena_core.infrastructure.llm import LiteLLMCompletionClient, ProviderRegistry
from tests.fixtures.factories import MODEL_A


class RateLimitError(Exception):
    pass


def _response(
    content: str | None = "Hello there",
    reasoning: str | None = None,
    total_tokens: int = 42,
    response_cost: float | None = None,
) -> SimpleNamespace:
    message = SimpleNamespace(content=content, reasoning_content=reasoning)
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=message)],
        usage=SimpleNamespace(total_tokens=total_tokens),
    )
    if response_cost is not None:
        response._hidden_params = {"response_cost": response_cost}
    return response


class FakeLiteLLM:
    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def __call__(self, **params: Any) -> Any:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def no_cost_lookup(monkeypatch: pytest.MonkeyPatch) -> None:  # type: ignore[misc]
    monkeypatch.setattr(litellm, "completion_cost", lambda **kwargs: 0.0)


@pytest.mark.usefixtures("no_cost_lookup")
class TestLiteLLMCompletionClient:
    @pytest.mark.asyncio
    async def test_successful_completion(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeLiteLLM(_response("  Hello there  ", response_cost=0.0012))
        monkeypatch.setattr(litellm, "acompletion", fake)
        client = LiteLLMCompletionClient(provider="groq", api_base="http://localhost:1")

        result = await client.invoke(MODEL_A, "Say hi", 50, 0.2)

        assert result.text == "Hello there"
        assert result.tokens == 42
        assert result.cost_cents == pytest.approx(0.12)
        assert fake.calls == [
            {
                "model": f"groq/{MODEL_A}",
                "messages": [{"role": "user", "content": "Say hi"}],
                "max_tokens": 50,
                "temperature": 0.2,
                "api_base": "http://localhost:1",
            }
        ]

    @pytest.mark.asyncio
    async def test_reasoning_content_is_used_when_content_is_empty(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            litellm, "acompletion", FakeLiteLLM(_response("", reasoning="Deep thought"))
        )
        result = await LiteLLMCompletionClient().invoke(MODEL_A, "Q", 50, 0.2)
        assert result.text == "Deep thought"

    @pytest.mark.asyncio
    async def test_catalog_prices_unknown_cost(
        self, monkeypatch: pytest.MonkeyPatch, catalog: ModelCatalog
    ) -> None:
        monkeypatch.setattr(litellm, "acompletion", FakeLiteLLM(_response(total_tokens=2000)))
        client = LiteLLMCompletionClient(catalog=catalog)

        result = await client.invoke(MODEL_A, "Q", 50, 0.2)

        assert result.cost_cents == catalog.cost_for(MODEL_A, 2000)
        assert result.cost_cents > 0

    @pytest.mark.asyncio
    async def test_empty_answer_is_terminal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(litellm, "acompletion", FakeLiteLLM(_response(content=None)))
        with pytest.raises(TerminalCompletionError) as exc_info:
            await LiteLLMCompletionClient().invoke(MODEL_A, "Q", 50, 0.2)
        assert exc_info.value.error_type == "model_response_error"

    @pytest.mark.asyncio
    async def test_provider_errors_are_classified(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            litellm, "acompletion", FakeLiteLLM(error=RateLimitError("429 slow down"))
        )
        with pytest.raises(TransientCompletionError) as exc_info:
            await LiteLLMCompletionClient().invoke(MODEL_A, "Q", 50, 0.2)
        assert exc_info.value.error_type == "rate_limit"
        assert isinstance(exc_info.value.__cause__, RateLimitError)


class TestProviderRegistry:
    def test_litellm_providers_are_registered(self) -> None:
        for name in ("groq", "openai", "ollama"):
            assert ProviderRegistry.is_registered(name)

    def test_create_passes_settings(self, catalog: ModelCatalog) -> None:
        client = ProviderRegistry.create(
            "ollama", {"provider": "ollama", "api_base": None, "catalog": catalog}
        )
        assert isinstance(client, LiteLLMCompletionClient)
        assert client.provider == "ollama"
        assert client.catalog is catalog

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown provider: 'carrier-pigeon'"):
            ProviderRegistry.create("carrier-pigeon", {})
