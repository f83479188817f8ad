from arena_core.domain.catalog import Model, ModelCatalog
from arena_core.domain.errors import ArenaError, ConfigurationError

__all__ = [
    "ArenaError",
    "ConfigurationError",
    "Model",
    "ModelCatalog",
]
