"""Terminal capability detection for Arena's console output."""

import os
import re
import sys

from colorama import Fore, Style

_ANSI_PATTERN = re.compile(r"\x1B\[[0-9;]*[mK]")

# Competitor colors, assigned by position in the battle's model list
COMPETITOR_COLORS = [
    Fore.CYAN,
    Fore.MAGENTA,
    Fore.YELLOW,
    Fore.BLUE,
]

STATUS_COLORS: dict[str, str] = {
    "pending": Fore.WHITE,
    "running": Fore.CYAN,
    "completed": Fore.GREEN,
    "failed": Fore.RED,
}

DEFAULT_COLOR = Fore.WHITE
RESET = Style.RESET_ALL


def competitor_color(position: int) -> str:
    return COMPETITOR_COLORS[position % len(COMPETITOR_COLORS)]


def should_use_color() -> bool:
    if os.environ.get("NO_COLOR") is not None:
        return False

    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False

    if os.environ.get("TERM", "").lower() == "dumb":
        return False

    if sys.platform.lower().startswith("win"):
        # Windows Terminal and ANSICON hosts understand escape codes
        return "WT_SESSION" in os.environ or "ANSICON" in os.environ

    return True


def strip_ansi_codes(text: str) -> str:
    return _ANSI_PATTERN.sub("", text)
