"""Pytest configuration and shared fixtures."""

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from arena_core.domain.catalog import ModelCatalog
from tests.fixtures.clients import FakeCompletionClient
from tests.fixtures.factories import (
    MODEL_A,
    MODEL_B,
    MODEL_C,
    create_model_config,
    make_catalog,
)

ARENA_ENV_VARS = (
    "ARENA_MODEL_TIMEOUT",
    "ARENA_MAX_ATTEMPTS",
    "ARENA_OUTPUTS_DIR",
    "ARENA_DISABLED_MODELS",
    "ARENA_SAVE_RECORDS",
)


@pytest.fixture(autouse=True)  # type: ignore[misc]
def clean_arena_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep ARENA_* variables from the developer's shell out of tests."""
    for name in ARENA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture()  # type: ignore[misc]
def catalog() -> ModelCatalog:
    """Three-model catalog; the third model is unavailable."""
    return make_catalog()


@pytest.fixture()  # type: ignore[misc]
def fake_client() -> FakeCompletionClient:
    """Completion client answering every model with the default text."""
    return FakeCompletionClient()


@pytest.fixture()  # type: ignore[misc]
def sample_settings(tmp_path: Path) -> dict[str, Any]:
    """Small settings dict with fast retries and records under tmp_path."""
    return {
        "models": {
            "alpha": create_model_config(MODEL_A),
            "beta": create_model_config(MODEL_B, price_per_1k_tokens=0.1),
            "gamma": create_model_config(MODEL_C, available=False),
        },
        "retry": {
            "max_attempts": 2,
            "initial_delay": 0.0,
            "max_delay": 0.0,
            "jitter": 0.0,
            "timeout": 1.0,
        },
        "outputs_dir": str(tmp_path),
    }


@pytest.fixture()  # type: ignore[misc]
def sample_prompt() -> str:
    """Sample prompt for testing."""
    return "Explain photosynthesis simply"
