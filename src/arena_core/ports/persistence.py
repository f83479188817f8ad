from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from arena_core.domain.battle.models import Battle


class BattleRecorder(Protocol):
    """Receives each finalized battle exactly once."""

    async def record(self, battle: "Battle") -> str: ...
