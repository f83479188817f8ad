"""Integration test fixtures and utilities."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from arena_core import Arena, build_arena
from arena_core.domain.battle import ProgressChannel, ProgressEvent
from arena_core.ports.llm import CompletionClient
from tests.fixtures.factories import MODEL_A, MODEL_B

ArenaFactory = Callable[..., Arena]


@pytest.fixture()  # type: ignore[misc]
def records_dir(tmp_path: Path) -> Path:
    return tmp_path / "records"


@pytest.fixture()  # type: ignore[misc]
def arena_settings(sample_settings: dict[str, Any], records_dir: Path) -> dict[str, Any]:
    """Fake-provider settings with records written under tmp_path."""
    settings = dict(sample_settings)
    settings["outputs_dir"] = str(records_dir)
    return settings


@pytest.fixture()  # type: ignore[misc]
def make_arena(arena_settings: dict[str, Any]) -> ArenaFactory:
    """Build an Arena around a scripted client.

    Keyword arguments patch the ``retry`` section, e.g. ``timeout=0.05``.
    """

    def factory(
        client: CompletionClient, save_records: bool = True, **retry: Any
    ) -> Arena:
        settings = dict(arena_settings)
        settings["retry"] = {**arena_settings["retry"], **retry}
        return build_arena(settings, client=client, save_records=save_records)

    return factory


@pytest.fixture()  # type: ignore[misc]
def manual_battle() -> dict[str, Any]:
    """Wire-format battle request between the two fake models."""
    return {
        "battle_type": "response",
        "mode": "manual",
        "prompt": "Explain photosynthesis simply",
        "category": "explanation",
        "models": [MODEL_A, MODEL_B],
    }


async def collect_events(channel: ProgressChannel) -> list[ProgressEvent]:
    return [event async for event in channel]
