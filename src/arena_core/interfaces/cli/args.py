import argparse
from typing import Any

from arena_core.__about__ import __version__
from arena_core.domain.battle.models import KNOWN_CATEGORIES, BattleMode, BattleType
from arena_core.shared.constants import DEFAULT_CONFIG_FILE


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable detailed debug logging",
    )
    parser.add_argument(
        "-v", "--verbose", help="Enable verbose output", action="store_true"
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help=f"Path to config file (used when present: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--no-color", help="Disable colored output", action="store_true"
    )


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _model_list(value: str) -> list[str]:
    models = [item.strip() for item in value.split(",") if item.strip()]
    if len(models) != 2:
        raise argparse.ArgumentTypeError(
            f"expected exactly two comma-separated models, got {len(models)}"
        )
    return models


def _add_battle_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-p", "--prompt", help="Prompt to battle over")
    parser.add_argument(
        "-f", "--prompt-file", help="Read the prompt from a text file"
    )
    parser.add_argument(
        "-t",
        "--type",
        dest="battle_type",
        choices=[t.value for t in BattleType],
        default=None,
        help="Battle over the best response or the best prompt",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in BattleMode],
        default=None,
        help="Pick models automatically or use --models",
    )
    parser.add_argument(
        "-m",
        "--models",
        type=_model_list,
        default=None,
        help="Two comma-separated model keys or ids (implies --mode manual)",
    )
    parser.add_argument(
        "--category",
        default=None,
        help=f"Prompt category, e.g. {', '.join(sorted(KNOWN_CATEGORIES))}",
    )
    parser.add_argument(
        "-r", "--rounds", type=_positive_int, default=None, help="Round budget"
    )
    parser.add_argument("--max-tokens", type=_positive_int, default=None)
    parser.add_argument("--temperature", type=float, default=None)
    parser.add_argument(
        "-o",
        "--outputs-dir",
        default=None,
        help="Directory for battle records and logs (default: current directory)",
    )
    parser.add_argument(
        "--no-save", help="Do not write the battle record", action="store_true"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arena",
        description="Arena - pit two LLMs against each other over a prompt",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Arena {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    battle_parser = subparsers.add_parser(
        "battle",
        aliases=["run"],
        help="Run a battle",
    )
    _add_common_args(battle_parser)
    _add_battle_args(battle_parser)

    models_parser = subparsers.add_parser(
        "models",
        aliases=["ls"],
        help="List the model catalog",
    )
    _add_common_args(models_parser)

    return parser


def parse_arguments(argv: list[str] | None = None) -> dict[str, Any]:
    parser = build_parser()
    args_dict = vars(parser.parse_args(argv))

    command = args_dict.get("command")
    if command is None:
        parser.print_help()
        parser.exit(2)
    if command == "run":
        args_dict["command"] = "battle"
    elif command == "ls":
        args_dict["command"] = "models"

    if args_dict.get("models") and args_dict.get("mode") is None:
        args_dict["mode"] = BattleMode.MANUAL.value

    if args_dict.get("debug"):
        args_dict["verbose"] = True

    return args_dict
