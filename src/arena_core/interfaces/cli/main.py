#!/usr/bin/env python3

import asyncio
import sys
from pathlib import Path
from typing import Any, NoReturn

import colorama

from arena_core.application.bootstrap import build_arena
from arena_core.domain.battle import Battle, BattleStatus
from arena_core.domain.errors import (
    ArenaError,
    ConfigurationError,
    FatalError,
    InputError,
)
from arena_core.engine import Arena
from arena_core.interfaces.cli.args import parse_arguments
from arena_core.interfaces.cli.input import async_input
from arena_core.interfaces.cli.ui import Display, cli_error, get_display
from arena_core.ports.llm import CompletionClient
from arena_core.shared.constants import DEFAULT_CONFIG_FILE
from arena_core.shared.logging import get_contextual_logger


class App:
    def __init__(
        self,
        args: dict[str, Any] | None = None,
        display: Display | None = None,
        settings: dict[str, Any] | None = None,
        client: CompletionClient | None = None,
    ) -> None:
        self.args = args if args is not None else parse_arguments()
        self.display = display or get_display()
        self.logger = get_contextual_logger("arena.cli")
        self._settings = settings
        self._client = client
        self.arena: Arena | None = None

    def _fatal_error(self, message: str) -> NoReturn:
        self.logger.error(message)
        raise FatalError(message)

    def _config_source(self) -> dict[str, Any] | str:
        """Explicit --config, else ./config.yml when present, else defaults."""
        if self._settings is not None:
            return dict(self._settings)
        config_path = self.args.get("config")
        if config_path:
            if not Path(str(config_path)).exists():
                self._fatal_error(
                    f"Config file not found: {config_path}. "
                    f"Use --config to specify a different config file."
                )
            return str(config_path)
        if Path(DEFAULT_CONFIG_FILE).exists():
            return DEFAULT_CONFIG_FILE
        self.logger.info("No config file found, using packaged defaults")
        return {}

    def _initialize_arena(self) -> Arena:
        source = self._config_source()
        outputs_dir = self.args.get("outputs_dir")
        try:
            self.arena = build_arena(
                source,
                client=self._client,
                save_records=False if self.args.get("no_save") else None,
                outputs_dir=str(outputs_dir) if outputs_dir else None,
            )
        except ConfigurationError as e:
            self._fatal_error(f"Configuration error: {e}")

        assert self.arena is not None
        return self.arena

    async def _get_prompt(self) -> str:
        prompt = self.args.get("prompt")
        if prompt:
            return str(prompt).strip()

        prompt_path = self.args.get("prompt_file")
        if prompt_path:
            path = Path(str(prompt_path))
            if not path.is_file():
                self._fatal_error(f"Prompt file not found: {path}")
            try:
                content = path.read_text(encoding="utf-8")
            except OSError as e:
                self._fatal_error(f"Failed to read prompt file '{path}': {e!s}")
            self.logger.info(f"Using prompt from file: {path}")
            return content.strip()

        self.display.print_header("Enter your prompt:")
        try:
            return (await async_input("> ")).strip()
        except InputError as e:
            self._fatal_error(str(e))

    def list_models(self) -> None:
        arena = self._initialize_arena()
        self.display.model_catalog(arena.catalog, arena.model_keys)

    async def run_battle(self) -> Battle:
        arena = self._initialize_arena()
        prompt = await self._get_prompt()
        if not prompt:
            self._fatal_error("A prompt is required")

        try:
            config = arena.build_config(
                prompt,
                battle_type=self.args.get("battle_type"),
                mode=self.args.get("mode"),
                models=self.args.get("models"),
                category=self.args.get("category"),
                rounds=self.args.get("rounds"),
                max_tokens=self.args.get("max_tokens"),
                temperature=self.args.get("temperature"),
            )
        except ConfigurationError as e:
            self._fatal_error(f"Invalid battle: {e}")

        channel, task = await arena.stream_battle(config)
        async for event in channel:
            if event.phase == "selection" and event.model_status:
                self.display.assign_colors(list(event.model_status))
            self.display.progress(event)

        try:
            battle = await task
        except ArenaError as e:
            self._fatal_error(f"Error during battle: {e!s}")

        self.display.battle_result(battle, arena.catalog)
        if battle.status is BattleStatus.FAILED:
            self._fatal_error(f"Battle failed: {battle.failure_reason}")
        return battle

    async def run(self) -> None:
        self.logger.info("Starting Arena")
        command = self.args.get("command", "battle")
        if command == "models":
            self.list_models()
            return
        await self.run_battle()
        self.logger.info("Arena completed successfully")


def run_from_cli() -> None:
    from dotenv import load_dotenv

    load_dotenv()

    from arena_core.shared.logging import setup_logging

    args = parse_arguments()

    outputs_dir = args.get("outputs_dir")
    setup_logging(
        debug=args.get("debug", False),
        verbose=args.get("verbose", False),
        log_dir=str(outputs_dir) if outputs_dir else None,
    )

    from arena_core.interfaces.cli.ui import configure_display

    configure_display(use_color=not bool(args.get("no_color", False)))

    colorama.init(autoreset=True)

    try:
        app = App(args)
        asyncio.run(app.run())
    except FatalError as e:
        cli_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...")
        sys.exit(130)


if __name__ == "__main__":
    run_from_cli()
