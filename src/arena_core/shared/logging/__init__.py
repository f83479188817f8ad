from arena_core.shared.logging.setup import setup_logging
from arena_core.shared.logging.structured import (
    ContextualLogger,
    get_context,
    get_contextual_logger,
)

__all__ = [
    "ContextualLogger",
    "get_context",
    "get_contextual_logger",
    "setup_logging",
]
