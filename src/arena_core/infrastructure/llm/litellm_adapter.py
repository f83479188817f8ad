"""LiteLLM-backed completion client for Arena."""

import time
from typing import Any

import litellm

from arena_core.domain.catalog import ModelCatalog
from arena_core.domain.errors import (
    CompletionError,
    ExceptionClassifier,
    ModelResponseError,
)
from arena_core.infrastructure.llm.fallback import estimate_tokens
from arena_core.ports.llm import CompletionResult
from arena_core.shared.logging import get_contextual_logger

logger = get_contextual_logger("arena.models")


class LiteLLMCompletionClient:
    """One client for every model served by ``provider``.

    Raises ``TransientCompletionError`` or ``TerminalCompletionError``;
    retries and timeouts are the caller's business.
    """

    def __init__(
        self,
        provider: str = "groq",
        api_base: str | None = None,
        catalog: ModelCatalog | None = None,
    ):
        self.provider = provider
        self.api_base = api_base
        self.catalog = catalog

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "LiteLLMCompletionClient":
        return cls(
            provider=config.get("provider", "groq"),
            api_base=config.get("api_base"),
            catalog=config.get("catalog"),
        )

    def _litellm_model(self, model_id: str) -> str:
        # Catalog ids such as "openai/gpt-oss-20b" are still routed through
        # the configured provider
        return f"{self.provider}/{model_id}"

    def _build_completion_params(
        self, model_id: str, prompt: str, max_tokens: int, temperature: float
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "model": self._litellm_model(model_id),
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": float(temperature),
        }
        if self.api_base:
            params["api_base"] = self.api_base
            logger.debug(f"Using api_base={self.api_base} for {model_id}")
        return params

    def _extract_response_content(self, response: Any) -> str | None:
        """Extract content from a LiteLLM response.

        Reasoning models sometimes spend every token thinking, leaving the
        answer in ``reasoning_content`` instead of ``content``.
        """
        try:
            message = response.choices[0].message
        except (AttributeError, IndexError, KeyError, TypeError):
            return None

        content: str | None = getattr(message, "content", None)
        if content and content.strip():
            return content

        reasoning_content: str | None = getattr(message, "reasoning_content", None)
        if reasoning_content and reasoning_content.strip():
            return reasoning_content
        return None

    def _extract_response_cost(self, response: Any) -> float:
        """Provider cost in dollars, 0.0 when unknown."""
        hidden = getattr(response, "_hidden_params", None)
        if isinstance(hidden, dict) and hidden.get("response_cost"):
            return float(hidden["response_cost"])
        if hidden is not None and getattr(hidden, "response_cost", None):
            return float(hidden.response_cost)

        if getattr(response, "usage", None):
            try:
                cost_calc = litellm.completion_cost(completion_response=response)
                if cost_calc and cost_calc > 0:
                    return float(cost_calc)
            except Exception as e:
                logger.debug(f"Failed to calculate cost via litellm.completion_cost: {e}")

        logger.debug("No cost information found in response, returning 0.0")
        return 0.0

    def _extract_tokens(self, response: Any, text: str) -> int:
        usage = getattr(response, "usage", None)
        total = getattr(usage, "total_tokens", 0) if usage else 0
        return int(total) if total else estimate_tokens(text)

    async def invoke(
        self,
        model_id: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> CompletionResult:
        params = self._build_completion_params(
            model_id, prompt, max_tokens, temperature
        )

        start_time = time.perf_counter()
        try:
            response = await litellm.acompletion(**params)
        except CompletionError:
            raise
        except Exception as e:
            classification = ExceptionClassifier.classify(e, context=model_id)
            if classification.is_retryable:
                logger.warning(
                    f"{classification.message}. model={model_id}, provider={self.provider}"
                )
            else:
                logger.error(
                    f"API error with {model_id}: {classification.message}"
                )
            raise classification.to_error(model_id) from e
        latency_ms = (time.perf_counter() - start_time) * 1000

        text = self._extract_response_content(response)
        if not text:
            logger.warning(
                f"{model_id} content extraction failed. "
                f"Response type: {type(response)}, has choices: {hasattr(response, 'choices')}"
            )
            error = ModelResponseError(
                "Model returned empty or unusable response", model_key=model_id
            )
            raise ExceptionClassifier.classify(error, model_id).to_error(model_id) from error

        text = text.strip()
        tokens = self._extract_tokens(response, text)
        cost_cents = round(self._extract_response_cost(response) * 100, 6)
        if not cost_cents and self.catalog is not None:
            cost_cents = self.catalog.cost_for(model_id, tokens)

        logger.info(
            "LLM request completed: model=%s provider=%s tokens=%d latency_ms=%.0f cost=%.4fc",
            model_id,
            self.provider,
            tokens,
            latency_ms,
            cost_cents,
        )
        return CompletionResult(
            text=text,
            tokens=tokens,
            cost_cents=cost_cents,
            latency_ms=latency_ms,
        )
