"""Progress events and the channel that carries them to one subscriber."""

import asyncio
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Protocol

from arena_core.domain.battle.models import ModelStatus
from arena_core.shared.constants import ROUNDS_PROGRESS_SPAN, SELECTION_PROGRESS


@dataclass(frozen=True)
class ProgressEvent:
    phase: str
    progress_percent: float
    model_status: Mapping[str, ModelStatus] = field(default_factory=dict)
    sub_phase: str | None = None
    current_round: int | None = None
    total_rounds: int | None = None
    battle_id: str | None = None


class ProgressSink(Protocol):
    def publish(self, event: ProgressEvent) -> None: ...

    def close(self) -> None: ...


def round_progress(round_number: int, total_rounds: int, step: float) -> float:
    """Percent complete at ``step`` (0..1) through round ``round_number``."""
    completed = (round_number - 1) + min(max(step, 0.0), 1.0)
    return round(SELECTION_PROGRESS + ROUNDS_PROGRESS_SPAN * completed / total_rounds, 1)


class NullProgressSink:
    def publish(self, event: ProgressEvent) -> None:
        return None

    def close(self) -> None:
        return None


class ProgressChannel:
    """Unbounded single-consumer queue of ``ProgressEvent``.

    ``publish`` never blocks and never raises for a slow consumer. Events
    are delivered in emission order; iteration ends after ``close``.
    """

    _CLOSED = object()

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False
        self._last_percent = 0.0

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, event: ProgressEvent) -> None:
        if self._closed:
            return
        # Percentages only move forward
        if event.progress_percent < self._last_percent:
            event = replace(event, progress_percent=self._last_percent)
        self._last_percent = event.progress_percent
        self._queue.put_nowait(event)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(self._CLOSED)

    def __aiter__(self) -> AsyncIterator[ProgressEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[ProgressEvent]:
        while True:
            item = await self._queue.get()
            if item is self._CLOSED:
                return
            yield item  # type: ignore[misc]
