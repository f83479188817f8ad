"""Arena: two LLMs battle over a response or over the prompt itself."""

from arena_core.__about__ import __version__
from arena_core.public import *  # noqa: F403
from arena_core.public import __all__ as _public_all

__all__ = ["__version__", *_public_all]
