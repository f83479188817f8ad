import asyncio
import dataclasses
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from arena_core.domain.battle import (
    Battle,
    BattleConfig,
    BattleOrchestrator,
    BattleType,
    ProgressChannel,
    ProgressSink,
)
from arena_core.domain.catalog import ModelCatalog
from arena_core.infrastructure.config.loader import Config
from arena_core.infrastructure.config.models import ArenaConfig
from arena_core.infrastructure.persistence import battle_config_from_dict
from arena_core.ports.llm import CompletionClient
from arena_core.ports.persistence import BattleRecorder
from arena_core.shared.logging import get_contextual_logger

logger = get_contextual_logger("arena.engine")


class Arena:
    """Facade over one configured orchestrator.

    Safe to share between concurrent battles: every ``run_battle`` call
    owns its own ``Battle`` and only reads the catalog.
    """

    def __init__(
        self,
        config: Config,
        catalog: ModelCatalog,
        orchestrator: BattleOrchestrator,
        recorder: BattleRecorder | None = None,
    ) -> None:
        self.config = config
        self.catalog = catalog
        self.orchestrator = orchestrator
        self.recorder = recorder

    @classmethod
    def from_settings(
        cls,
        settings: dict[str, Any],
        client: CompletionClient | None = None,
        recorder: BattleRecorder | None = None,
        save_records: bool | None = None,
    ) -> "Arena":
        from arena_core.application.bootstrap import build_arena

        return build_arena(
            settings, client=client, recorder=recorder, save_records=save_records
        )

    @classmethod
    def from_config(
        cls,
        config_path: str | Path,
        client: CompletionClient | None = None,
        recorder: BattleRecorder | None = None,
        save_records: bool | None = None,
    ) -> "Arena":
        from arena_core.application.bootstrap import build_arena

        return build_arena(
            config_path, client=client, recorder=recorder, save_records=save_records
        )

    # === Public Properties ===

    @property
    def settings(self) -> ArenaConfig:
        assert self.config.settings is not None
        return self.config.settings

    @property
    def config_data(self) -> dict[str, Any]:
        return self.config.config_data

    @property
    def model_keys(self) -> dict[str, str]:
        """Configured short keys mapped to catalog model ids."""
        return {
            key: model.model_name for key, model in self.settings.models.items()
        }

    # === Battle Construction ===

    def resolve_model(self, reference: str) -> str:
        """Map a configured key (``llama-8b``) or catalog id to a catalog id.

        Unknown references are returned unchanged so the orchestrator can
        report them.
        """
        reference = reference.strip()
        if reference in self.catalog:
            return reference
        return self.model_keys.get(reference, reference)

    def build_config(
        self,
        prompt: str,
        battle_type: str | None = None,
        mode: str | None = None,
        models: list[str] | tuple[str, ...] | None = None,
        category: str | None = None,
        rounds: int | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> BattleConfig:
        """A ``BattleConfig`` with unset fields taken from the battle defaults."""
        defaults = self.settings.battle
        battle_type = battle_type or defaults.battle_type
        if rounds is None:
            rounds = (
                defaults.prompt_rounds
                if battle_type == BattleType.PROMPT.value
                else defaults.rounds
            )
        return battle_config_from_dict(
            {
                "battle_type": battle_type,
                "mode": mode or defaults.mode,
                "prompt": prompt,
                "category": category or defaults.category,
                "models": [self.resolve_model(m) for m in models or ()],
                "rounds": rounds,
                "max_tokens": max_tokens if max_tokens is not None else defaults.max_tokens,
                "temperature": (
                    temperature if temperature is not None else defaults.temperature
                ),
            }
        )

    def _coerce_config(self, config: BattleConfig | Mapping[str, Any]) -> BattleConfig:
        if not isinstance(config, BattleConfig):
            config = battle_config_from_dict(config)
        resolved = tuple(self.resolve_model(m) for m in config.models)
        if resolved != config.models:
            return dataclasses.replace(config, models=resolved)
        return config

    # === Execution Methods ===

    async def run_battle(
        self,
        config: BattleConfig | Mapping[str, Any],
        progress: ProgressSink | None = None,
    ) -> Battle:
        """Run one battle to completion and record it.

        Raises ``ConfigurationError`` for an invalid config and
        ``PersistenceError`` when the record cannot be written.
        """
        battle_config = self._coerce_config(config)
        battle = await self.orchestrator.run(battle_config, progress=progress)

        if self.recorder is not None:
            location = await self.recorder.record(battle)
            logger.info(f"Battle {battle.id} recorded at {location}")
        return battle

    async def stream_battle(
        self, config: BattleConfig | Mapping[str, Any]
    ) -> tuple[ProgressChannel, "asyncio.Task[Battle]"]:
        """Start a battle in the background and return its progress channel.

        Iterate the channel for events; it closes when the battle ends.
        Await the task for the finalized ``Battle``.
        """
        battle_config = self._coerce_config(config)
        channel = ProgressChannel()
        task = asyncio.create_task(self.run_battle(battle_config, progress=channel))
        return channel, task
