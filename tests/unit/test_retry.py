import asyncio

import pytest

from arena_core.domain.catalog import ModelCatalog
from arena_core.domain.errors import TerminalCompletionError, TransientCompletionError
from arena_core.infrastructure.llm.retry import (
    Ok,
    RetryingInvoker,
    RetryPolicy,
    TerminalFailure,
    TransientFailure,
)
from arena_core.ports.llm import CompletionResult
from tests.fixtures.clients import FakeCompletionClient
from tests.fixtures.factories import MODEL_A

OK = Ok(CompletionResult(text="hi", tokens=1, cost_cents=0.0, latency_ms=1.0))


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class TestRetryPolicy:
    """Pure decision function over attempt outcomes."""

    def test_exponential_backoff_is_capped(self) -> None:
        policy = RetryPolicy(base_delay=1.0, max_delay=5.0, jitter=0.0)
        assert [policy.backoff(n) for n in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 5.0]

    def test_delay_doubles_from_base_delay(self) -> None:
        """The first retry waits base_delay * 2**0."""
        policy = RetryPolicy(base_delay=0.5, max_delay=60.0, jitter=0.0)
        transient = TransientFailure(error_type="timeout", message="slow")
        delays = [policy.next_delay(transient, attempt) for attempt in (1, 2, 3)]
        assert delays == [0.5 * 2**n for n in range(3)]

    def test_jitter_is_added(self) -> None:
        policy = RetryPolicy(base_delay=1.0, max_delay=5.0, jitter=2.0)
        assert policy.backoff(1, jitter_sample=0.5) == 2.0

    def test_success_and_terminal_failures_stop(self) -> None:
        policy = RetryPolicy(max_attempts=5)
        assert policy.next_delay(OK, 1) is None
        assert policy.next_delay(TerminalFailure("authentication", "bad key"), 1) is None

    def test_transient_failures_retry_until_budget(self) -> None:
        policy = RetryPolicy(max_attempts=3, base_delay=1.0, jitter=0.0)
        failure = TransientFailure("timeout", "slow")
        assert policy.next_delay(failure, 1) == 1.0
        assert policy.next_delay(failure, 2) == 2.0
        assert policy.next_delay(failure, 3) is None

    def test_invalid_policy_rejected(self) -> None:
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)
        with pytest.raises(ValueError):
            RetryPolicy(base_delay=-1.0)


class TestRetryingInvoker:
    """I/O loop driven by the policy."""

    def _invoker(
        self, client: FakeCompletionClient, catalog: ModelCatalog, **kwargs: object
    ) -> tuple[RetryingInvoker, SleepRecorder]:
        sleep = SleepRecorder()
        invoker = RetryingInvoker(
            client,
            catalog,
            policy=RetryPolicy(max_attempts=3, base_delay=1.0, max_delay=10.0, jitter=0.0),
            sleep=sleep,
            rng=lambda: 0.0,
            **kwargs,  # type: ignore[arg-type]
        )
        return invoker, sleep

    @pytest.mark.asyncio
    async def test_success_first_try(self, catalog: ModelCatalog) -> None:
        client = FakeCompletionClient(responses={MODEL_A: "An answer"})
        invoker, sleep = self._invoker(client, catalog)

        response = await invoker.invoke(MODEL_A, "Q?", 100, 0.5)

        assert response.text == "An answer"
        assert response.cost == 0.25
        assert response.attempts == 1
        assert not response.is_fallback
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_transient_failures_are_retried(self, catalog: ModelCatalog) -> None:
        client = FakeCompletionClient(
            failures={
                MODEL_A: [
                    TransientCompletionError("429", MODEL_A, error_type="rate_limit"),
                    TransientCompletionError("429", MODEL_A, error_type="rate_limit"),
                ]
            }
        )
        invoker, sleep = self._invoker(client, catalog)

        response = await invoker.invoke(MODEL_A, "Q?", 100, 0.5)

        assert not response.is_fallback
        assert response.attempts == 3
        assert sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_terminal_failure_is_not_retried(self, catalog: ModelCatalog) -> None:
        client = FakeCompletionClient(
            failures={MODEL_A: TerminalCompletionError("bad key", MODEL_A, "authentication")}
        )
        invoker, sleep = self._invoker(client, catalog)

        response = await invoker.invoke(MODEL_A, "Explain tides", 100, 0.5, "explanation")

        assert response.is_fallback
        assert response.error_type == "authentication"
        assert response.attempts == 1
        assert len(client.calls) == 1
        assert sleep.delays == []
        assert "Alpha Large" in response.text

    @pytest.mark.asyncio
    async def test_exhausted_retries_fall_back(self, catalog: ModelCatalog) -> None:
        """Fallback content is priced from the catalog like a real answer."""
        client = FakeCompletionClient(failures={MODEL_A: ConnectionError("network down")})
        invoker, sleep = self._invoker(client, catalog)

        response = await invoker.invoke(MODEL_A, "Q?", 100, 0.5)

        assert response.is_fallback
        assert response.error_type == "connection"
        assert response.attempts == 3
        assert len(sleep.delays) == 2
        assert response.tokens > 0
        assert response.cost == catalog.cost_for(MODEL_A, response.tokens)

    @pytest.mark.asyncio
    async def test_timeout_counts_as_transient(self, catalog: ModelCatalog) -> None:
        client = FakeCompletionClient(delays={MODEL_A: 1.0})
        invoker, sleep = self._invoker(client, catalog, timeout=0.01)

        response = await invoker.invoke(MODEL_A, "Q?", 100, 0.5)

        assert response.is_fallback
        assert response.error_type == "timeout"
        assert len(client.calls) == 3

    @pytest.mark.asyncio
    async def test_calls_for_different_models_are_independent(
        self, catalog: ModelCatalog
    ) -> None:
        client = FakeCompletionClient(failures={MODEL_A: RuntimeError("503 unavailable")})
        invoker, _sleep = self._invoker(client, catalog)

        failed, ok = await asyncio.gather(
            invoker.invoke(MODEL_A, "Q?", 100, 0.5),
            invoker.invoke("beta-fast", "Q?", 100, 0.5),
        )

        assert failed.is_fallback
        assert not ok.is_fallback
