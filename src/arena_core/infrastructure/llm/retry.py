"""Bounded retry around a ``CompletionClient``.

Each attempt is reduced to an explicit outcome value (``Ok``,
``TransientFailure`` or ``TerminalFailure``) and ``RetryPolicy`` decides
from that value alone whether and how long to wait. The invoker owns the
I/O; the policy is a pure function.
"""

import asyncio
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Union

from arena_core.domain.battle.models import ModelResponse
from arena_core.domain.catalog import ModelCatalog
from arena_core.domain.errors import CompletionError, ExceptionClassifier
from arena_core.infrastructure.llm.fallback import estimate_tokens, fallback_text
from arena_core.ports.llm import CompletionClient, CompletionResult
from arena_core.shared.constants import DEFAULT_MODEL_TIMEOUT
from arena_core.shared.logging import get_contextual_logger

logger = get_contextual_logger("arena.retry")


@dataclass(frozen=True)
class Ok:
    result: CompletionResult


@dataclass(frozen=True)
class TransientFailure:
    error_type: str
    message: str


@dataclass(frozen=True)
class TerminalFailure:
    error_type: str
    message: str


Outcome = Union[Ok, TransientFailure, TerminalFailure]


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 5
    base_delay: float = 1.0
    max_delay: float = 30.0
    # Upper bound in seconds added on top of the exponential delay
    jitter: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0 or self.jitter < 0:
            raise ValueError("Retry delays must not be negative")

    def backoff(self, attempt: int, jitter_sample: float = 0.0) -> float:
        """Delay after the 1-based ``attempt`` failed.

        That is ``base_delay * 2**n`` for the 0-based attempt index ``n``,
        so the first retry waits ``base_delay``. ``jitter_sample`` is
        expected in [0, 1).
        """
        exponential = self.base_delay * (2 ** (attempt - 1))
        return min(exponential, self.max_delay) + jitter_sample * self.jitter

    def next_delay(
        self, outcome: Outcome, attempt: int, jitter_sample: float = 0.0
    ) -> float | None:
        """Seconds to wait before the next attempt, or ``None`` to stop."""
        if isinstance(outcome, (Ok, TerminalFailure)):
            return None
        if attempt >= self.max_attempts:
            return None
        return self.backoff(attempt, jitter_sample)


class RetryingInvoker:
    """Calls a model until it answers or the policy gives up.

    ``invoke`` never raises for remote failures. When every attempt fails
    it returns a fallback ``ModelResponse`` flagged with ``is_fallback``.
    """

    def __init__(
        self,
        client: CompletionClient,
        catalog: ModelCatalog,
        policy: RetryPolicy | None = None,
        timeout: float = DEFAULT_MODEL_TIMEOUT,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Callable[[], float] = random.random,
    ):
        self.client = client
        self.catalog = catalog
        self.policy = policy or RetryPolicy()
        self.timeout = timeout
        self._sleep = sleep
        self._rng = rng

    async def _attempt(
        self,
        model_id: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> Outcome:
        try:
            result = await asyncio.wait_for(
                self.client.invoke(model_id, prompt, max_tokens, temperature),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            return TransientFailure(
                "timeout", f"No answer within {self.timeout:.1f}s"
            )
        except CompletionError as exc:
            failure = TransientFailure if exc.transient else TerminalFailure
            return failure(exc.error_type, str(exc))
        except Exception as exc:
            classification = ExceptionClassifier.classify(exc, model_id)
            failure = (
                TransientFailure if classification.is_retryable else TerminalFailure
            )
            return failure(classification.error_type, classification.message)
        return Ok(result)

    async def invoke(
        self,
        model_id: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
        category: str = "general",
    ) -> ModelResponse:
        start_time = time.monotonic()
        max_attempts = self.policy.max_attempts
        logger.log_prompt(prompt, model_id)

        attempt = 0
        while True:
            attempt += 1
            outcome = await self._attempt(model_id, prompt, max_tokens, temperature)

            if isinstance(outcome, Ok):
                if attempt > 1:
                    logger.info(
                        "Retry successful for %s on attempt %d/%d. Total elapsed: %.2fs",
                        model_id,
                        attempt,
                        max_attempts,
                        time.monotonic() - start_time,
                        successful_attempt=attempt,
                    )
                result = outcome.result
                logger.log_response(result.text, model_id, result.cost_cents)
                return ModelResponse(
                    model_id=model_id,
                    text=result.text,
                    latency_ms=result.latency_ms,
                    tokens=result.tokens,
                    cost=result.cost_cents,
                    attempts=attempt,
                )

            delay = self.policy.next_delay(outcome, attempt, self._rng())
            if delay is None:
                if isinstance(outcome, TerminalFailure):
                    logger.warning(
                        "Attempt %d/%d failed with non-retryable error for %s. Error type: %s. Elapsed: %.2fs",
                        attempt,
                        max_attempts,
                        model_id,
                        outcome.error_type,
                        time.monotonic() - start_time,
                        error_classification="non-retryable",
                    )
                break

            logger.warning(
                "Attempt %d/%d failed for %s. Retrying after %.2fs delay. Error type: %s. Error: %s",
                attempt,
                max_attempts,
                model_id,
                delay,
                outcome.error_type,
                outcome.message,
                error_classification="retryable",
                retry_delay=delay,
            )
            await self._sleep(delay)

        return self._fallback_response(
            model_id, prompt, category, outcome, attempt, start_time
        )

    def _fallback_response(
        self,
        model_id: str,
        prompt: str,
        category: str,
        outcome: TransientFailure | TerminalFailure,
        attempts: int,
        start_time: float,
    ) -> ModelResponse:
        elapsed_ms = (time.monotonic() - start_time) * 1000
        text = fallback_text(self.catalog.display_name(model_id), prompt, category)
        tokens = estimate_tokens(text)
        logger.warning(
            "All %d attempts failed for %s (%s). Using fallback content. Total elapsed: %.2fs",
            attempts,
            model_id,
            outcome.error_type,
            elapsed_ms / 1000,
            fallback=True,
            error_type=outcome.error_type,
        )
        return ModelResponse(
            model_id=model_id,
            text=text,
            latency_ms=elapsed_ms,
            tokens=tokens,
            cost=self.catalog.cost_for(model_id, tokens),
            is_fallback=True,
            error_type=outcome.error_type,
            attempts=attempts,
        )
