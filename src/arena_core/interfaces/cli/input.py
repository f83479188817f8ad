import asyncio
import sys

from arena_core.domain.errors import InputError
from arena_core.shared.logging import get_contextual_logger

logger = get_contextual_logger("arena.interfaces.cli.input")


async def async_input(prompt: str = "> ") -> str:
    """Read one line from stdin without blocking the event loop."""
    print(prompt, end="", flush=True)
    try:
        line = await asyncio.to_thread(sys.stdin.readline)
    except (OSError, ValueError) as e:
        raise InputError(f"Error getting user input: {e!s}") from e
    if not line:
        logger.debug("stdin closed while waiting for input")
        return ""
    return line.rstrip("\n")
