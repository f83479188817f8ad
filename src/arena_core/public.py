from arena_core.application.bootstrap import build_arena
from arena_core.domain.battle import (
    Battle,
    BattleConfig,
    BattleMode,
    BattleStatus,
    BattleType,
    ModelResponse,
    ModelStatus,
    PeerReview,
    ProgressChannel,
    ProgressEvent,
    PromptEvolutionEntry,
    RoundResult,
    Score,
)
from arena_core.domain.catalog import Model, ModelCatalog
from arena_core.domain.errors import (
    ArenaError,
    BattleStateError,
    ConfigurationError,
    FatalError,
    FileSystemError,
    InputError,
    ModelError,
    ModelResponseError,
    PersistenceError,
    TerminalCompletionError,
    TransientCompletionError,
)
from arena_core.engine import Arena
from arena_core.infrastructure.llm import (
    LiteLLMCompletionClient,
    ProviderRegistry,
    RetryPolicy,
)
from arena_core.infrastructure.persistence import (
    JsonFileRecorder,
    battle_config_from_dict,
    battle_to_record,
)
from arena_core.ports.llm import CompletionClient, CompletionResult

__all__ = [
    "Arena",
    "ArenaError",
    "Battle",
    "BattleConfig",
    "BattleMode",
    "BattleStateError",
    "BattleStatus",
    "BattleType",
    "CompletionClient",
    "CompletionResult",
    "ConfigurationError",
    "FatalError",
    "FileSystemError",
    "InputError",
    "JsonFileRecorder",
    "LiteLLMCompletionClient",
    "Model",
    "ModelCatalog",
    "ModelError",
    "ModelResponse",
    "ModelResponseError",
    "ModelStatus",
    "PeerReview",
    "PersistenceError",
    "ProgressChannel",
    "ProgressEvent",
    "PromptEvolutionEntry",
    "ProviderRegistry",
    "RetryPolicy",
    "RoundResult",
    "Score",
    "TerminalCompletionError",
    "TransientCompletionError",
    "battle_config_from_dict",
    "battle_to_record",
    "build_arena",
]
