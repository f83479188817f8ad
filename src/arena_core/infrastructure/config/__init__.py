from arena_core.infrastructure.config.defaults import (
    BATTLE,
    CLIENT,
    CONVERGENCE,
    MODELS,
    RETRY,
    get_defaults,
)
from arena_core.infrastructure.config.env import (
    get_bool_env,
    get_comma_separated_env,
    get_float_env,
    get_int_env,
    get_str_env,
)
from arena_core.infrastructure.config.loader import Config, validate_config
from arena_core.infrastructure.config.models import (
    ArenaConfig,
    BattleDefaultsConfig,
    ClientConfig,
    ConvergenceConfig,
    ModelConfig,
    RetryConfig,
)

__all__ = [
    "BATTLE",
    "CLIENT",
    "CONVERGENCE",
    "MODELS",
    "RETRY",
    "ArenaConfig",
    "BattleDefaultsConfig",
    "ClientConfig",
    "Config",
    "ConvergenceConfig",
    "ModelConfig",
    "RetryConfig",
    "get_bool_env",
    "get_comma_separated_env",
    "get_defaults",
    "get_float_env",
    "get_int_env",
    "get_str_env",
    "validate_config",
]
