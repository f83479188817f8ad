import logging

from colorama import Fore

from arena_core.domain.battle import Battle, BattleStatus, BattleType, ProgressEvent
from arena_core.domain.catalog import ModelCatalog
from arena_core.shared.logging import get_contextual_logger
from arena_core.shared.terminal import (
    DEFAULT_COLOR,
    STATUS_COLORS,
    competitor_color,
    should_use_color,
)
from arena_core.shared.text import truncate

logger = get_contextual_logger("arena.interfaces.cli.ui")

PROMPT_PREVIEW_LENGTH = 300


class Display:
    def __init__(self, use_color: bool = True):
        self.use_color = use_color and should_use_color()
        self.default_color = DEFAULT_COLOR
        self._model_colors: dict[str, str] = {}

    def assign_colors(self, model_ids: tuple[str, ...] | list[str]) -> None:
        self._model_colors = {
            model_id: competitor_color(position)
            for position, model_id in enumerate(model_ids)
        }

    def get_color_for_model(self, model_id: str) -> str:
        if not self.use_color:
            return ""
        return self._model_colors.get(model_id, DEFAULT_COLOR)

    def print(
        self, text: str, level_or_color: str = DEFAULT_COLOR, end: str = "\n"
    ) -> None:
        level_map = {
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
            "debug": logging.DEBUG,
        }

        try:
            if level_or_color in level_map:
                logger.logger.log(level_map[level_or_color], text)
            else:
                ansi_color = level_or_color if self.use_color else None
                logger.info(
                    text,
                    display_type="colored_text",
                    ansi_color=ansi_color,
                )
        except BrokenPipeError:
            logger.debug("Broken pipe error during print (output may be piped)")

    def print_header(self, text: str, color: str = Fore.CYAN) -> None:
        logger.info(text, display_type="header")

    def print_section_header(self, text: str) -> None:
        logger.info(text, display_type="section_header")

    def error(self, text: str) -> None:
        self.print(text, Fore.RED)

    def success(self, text: str) -> None:
        self.print(text, Fore.GREEN)

    def warning(self, text: str) -> None:
        self.print(text, Fore.YELLOW)

    def cyan(self, text: str) -> None:
        self.print(text, Fore.CYAN)

    def info(self, text: str) -> None:
        self.print(text)

    # === Battle Rendering ===

    def progress(self, event: ProgressEvent) -> None:
        if event.phase == "model_status":
            return

        round_info = ""
        if event.current_round is not None and event.total_rounds:
            round_info = f" round {event.current_round}/{event.total_rounds}"
        statuses = " ".join(
            f"{self.get_color_for_model(model_id)}{model_id}="
            f"{STATUS_COLORS.get(status.value, '') if self.use_color else ''}"
            f"{status.value}{self.default_color if self.use_color else ''}"
            for model_id, status in event.model_status.items()
        )
        sub_phase = f" ({event.sub_phase})" if event.sub_phase else ""
        self.print(
            f"[{event.progress_percent:5.1f}%] {event.phase}{round_info}{sub_phase} {statuses}".rstrip()
        )

    def battle_result(self, battle: Battle, catalog: ModelCatalog) -> None:
        if battle.status is BattleStatus.FAILED:
            self.error(f"Battle failed: {battle.failure_reason}")
            return

        self.print_header(f"{battle.config.battle_type.value.title()} battle complete")
        if battle.selection_rationale:
            self.info(battle.selection_rationale)

        for result in battle.rounds:
            self.print_section_header(f"Round {result.round_number}")
            for model_id, score in result.scores.items():
                self.print(
                    f"{catalog.display_name(model_id)}: {score.overall:.1f}/10 "
                    f"(accuracy {score.accuracy}, reasoning {score.reasoning}, "
                    f"structure {score.structure}, creativity {score.creativity})",
                    self.get_color_for_model(model_id) or DEFAULT_COLOR,
                )
            for note in result.notes:
                self.warning(f"  {note}")

        if battle.config.battle_type is BattleType.RESPONSE:
            for response in battle.rounds[-1].responses if battle.rounds else ():
                self.print_section_header(catalog.display_name(response.model_id))
                self.print(response.text, self.get_color_for_model(response.model_id) or DEFAULT_COLOR)
        elif battle.final_prompt:
            self.print_section_header("Final prompt")
            self.print(truncate(battle.final_prompt, PROMPT_PREVIEW_LENGTH))

        winner = battle.winner_model_id or ""
        self.success(f"\nWinner: {catalog.display_name(winner)}")
        if battle.summary:
            self.info(battle.summary)
        for note in battle.degraded_notes:
            self.warning(f"Fallback used: {note}")
        self.info(f"Total cost: {battle.total_cost:.4f} cents")
        total = battle.total_cost
        for model_id, cents in sorted(
            battle.cost_by_model.items(), key=lambda x: x[1], reverse=True
        ):
            percentage = (cents / total) * 100 if total > 0 else 0
            self.print(
                f"  {catalog.display_name(model_id)}: {cents:.4f} cents ({percentage:.1f}%)",
                self.get_color_for_model(model_id) or DEFAULT_COLOR,
            )

    def model_catalog(self, catalog: ModelCatalog, model_keys: dict[str, str]) -> None:
        keys_by_id = {model_id: key for key, model_id in model_keys.items()}
        self.print_header("Model catalog")
        for model in catalog:
            color = Fore.GREEN if model.available else Fore.RED
            state = "available" if model.available else "unavailable"
            key = keys_by_id.get(model.id, model.id)
            self.print(f"{key:<18} {model.name} [{model.provider}] {state}", color)
            if model.descriptor:
                self.print(f"{'':<18} {model.descriptor}")


_display = Display()


def configure_display(*, use_color: bool | None = None) -> Display:
    global _display  # noqa: PLW0603 - intentional module-level state
    if use_color is None:
        _display = Display()
    else:
        _display = Display(use_color=use_color)
    return _display


def get_display() -> Display:
    return _display


def cli_error(text: str) -> None:
    _display.error(text)


def cli_success(text: str) -> None:
    _display.success(text)


def cli_warning(text: str) -> None:
    _display.warning(text)
