import asyncio
import json
import re
from pathlib import Path

from arena_core.domain.battle.models import Battle
from arena_core.domain.errors import BattleStateError, PersistenceError
from arena_core.infrastructure.persistence.records import battle_to_record
from arena_core.shared.logging import get_contextual_logger

logger = get_contextual_logger("arena.persistence")

_BATTLE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class JsonFileRecorder:
    """Writes each finalized battle to ``<outputs_dir>/battle_<id>.json``."""

    def __init__(self, outputs_dir: str | Path | None = None):
        self.base_dir = Path(outputs_dir or ".").resolve()

    def _validate_path(self, filename: str) -> Path:
        """Validate path is within base_dir to prevent path traversal attacks."""
        resolved = (self.base_dir / filename).resolve()
        if not resolved.is_relative_to(self.base_dir):
            raise PersistenceError(
                f"Path traversal detected: '{filename}' escapes base directory",
                file_path=str(resolved),
            )
        return resolved

    def path_for(self, battle_id: str) -> Path:
        if not _BATTLE_ID_RE.match(battle_id):
            raise PersistenceError(f"Invalid battle id: {battle_id!r}")
        return self._validate_path(f"battle_{battle_id}.json")

    async def record(self, battle: Battle) -> str:
        if not battle.is_final:
            raise BattleStateError(
                f"Battle {battle.id} is still running and cannot be recorded"
            )

        file_path = self.path_for(battle.id)
        content = json.dumps(battle_to_record(battle), indent=2, ensure_ascii=False)
        try:
            await asyncio.to_thread(
                file_path.parent.mkdir, parents=True, exist_ok=True
            )
            await asyncio.to_thread(file_path.write_text, content, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(
                f"Failed to write battle record: {e}", file_path=str(file_path)
            ) from e

        logger.info(f"Battle record saved to {file_path}")
        return str(file_path)

    async def load(self, battle_id: str) -> dict[str, object]:
        file_path = self.path_for(battle_id)
        try:
            content = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(
                f"Failed to read battle record: {e}", file_path=str(file_path)
            ) from e
        data: dict[str, object] = json.loads(content)
        return data
