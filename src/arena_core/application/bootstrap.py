from pathlib import Path
from typing import TYPE_CHECKING, Any

# Import providers to trigger registration at bootstrap time
import arena_core.infrastructure.llm.providers  # noqa: F401

if TYPE_CHECKING:
    from arena_core.engine import Arena

from arena_core.domain.battle import (
    BattleOrchestrator,
    ConvergenceDetector,
    PeerReviewPanel,
    ResponseScorer,
    RoundExecutor,
)
from arena_core.domain.catalog import ModelCatalog
from arena_core.domain.errors import ConfigurationError
from arena_core.domain.model_selection import ModelSelector
from arena_core.infrastructure.config import (
    ArenaConfig,
    Config,
    get_bool_env,
    get_comma_separated_env,
    get_float_env,
    get_int_env,
    get_str_env,
)
from arena_core.infrastructure.llm.registry import ProviderRegistry
from arena_core.infrastructure.llm.retry import RetryingInvoker, RetryPolicy
from arena_core.infrastructure.persistence import JsonFileRecorder
from arena_core.ports.llm import CompletionClient
from arena_core.ports.persistence import BattleRecorder
from arena_core.shared.logging import get_contextual_logger

logger = get_contextual_logger("arena.bootstrap")


def env_overrides(config_data: dict[str, Any]) -> dict[str, Any]:
    """Settings overrides taken from ``ARENA_*`` environment variables."""
    overrides: dict[str, Any] = {}
    try:
        if get_str_env("ARENA_MODEL_TIMEOUT"):
            overrides.setdefault("retry", {})["timeout"] = get_float_env(
                "ARENA_MODEL_TIMEOUT", "45"
            )
        if get_str_env("ARENA_MAX_ATTEMPTS"):
            overrides.setdefault("retry", {})["max_attempts"] = get_int_env(
                "ARENA_MAX_ATTEMPTS", "5"
            )
    except ValueError as e:
        raise ConfigurationError(f"Invalid numeric environment override: {e}") from e

    outputs_dir = get_str_env("ARENA_OUTPUTS_DIR")
    if outputs_dir:
        overrides["outputs_dir"] = outputs_dir

    disabled = set(get_comma_separated_env("ARENA_DISABLED_MODELS"))
    if disabled:
        for model_key, model_cfg in config_data.get("models", {}).items():
            if model_key in disabled or model_cfg.get("model_name") in disabled:
                overrides.setdefault("models", {})[model_key] = {"available": False}
                logger.info(f"Model {model_key} disabled by ARENA_DISABLED_MODELS")

    return overrides


def _load_config(config: Config | dict[str, Any] | str | Path) -> Config:
    if isinstance(config, (str, Path)):
        config_path = Path(config)
        logger.info(f"Loading configuration from {config_path}")
        config_obj = Config(str(config_path))
        if not config_obj.load():
            raise ConfigurationError(
                f"Failed to load configuration from {config_path}"
            )
    elif isinstance(config, dict):
        config_obj = Config()
        is_valid, errors = config_obj.load_from_dict(config)
        if not is_valid:
            raise ConfigurationError("Invalid configuration provided", errors)
    elif isinstance(config, Config):
        config_obj = config
        if config_obj.settings is None:
            is_valid, errors = config_obj.apply_overrides({})
            if not is_valid:
                raise ConfigurationError("Invalid configuration provided", errors)
    else:
        raise TypeError(f"Unsupported config type: {type(config)}")

    overrides = env_overrides(config_obj.config_data)
    if overrides:
        is_valid, errors = config_obj.apply_overrides(overrides)
        if not is_valid:
            raise ConfigurationError(
                "Environment overrides produced an invalid configuration", errors
            )
    return config_obj


def build_catalog(settings: ArenaConfig) -> ModelCatalog:
    catalog = ModelCatalog.from_config(
        {key: model.model_dump() for key, model in settings.models.items()}
    )
    logger.info(
        f"Model catalog ready: {len(catalog)} models, "
        f"{len(catalog.available())} available"
    )
    return catalog


def create_client(settings: ArenaConfig, catalog: ModelCatalog) -> CompletionClient:
    client_config = settings.client.model_dump()
    client_config["catalog"] = catalog
    provider = settings.client.provider
    client = ProviderRegistry.create(provider, client_config)
    logger.info(f"Created {provider} completion client")
    return client


def build_orchestrator(
    settings: ArenaConfig, catalog: ModelCatalog, client: CompletionClient
) -> BattleOrchestrator:
    retry = settings.retry
    invoker = RetryingInvoker(
        client,
        catalog,
        policy=RetryPolicy(
            max_attempts=retry.max_attempts,
            base_delay=retry.initial_delay,
            max_delay=retry.max_delay,
            jitter=retry.jitter,
        ),
        timeout=retry.timeout,
    )
    scorer = ResponseScorer()
    convergence = settings.convergence
    return BattleOrchestrator(
        catalog=catalog,
        invoker=invoker,
        selector=ModelSelector(catalog),
        scorer=scorer,
        round_executor=RoundExecutor(invoker, scorer),
        review_panel=PeerReviewPanel(
            invoker, max_tokens=settings.battle.review_max_tokens
        ),
        convergence=ConvergenceDetector(
            epsilon=convergence.epsilon,
            window=convergence.window,
            perfect_score=convergence.perfect_score,
        ),
        improvement_max_tokens=settings.battle.improvement_max_tokens,
    )


def build_arena(
    config: Config | dict[str, Any] | str | Path,
    client: CompletionClient | None = None,
    recorder: BattleRecorder | None = None,
    save_records: bool | None = None,
    outputs_dir: str | None = None,
) -> "Arena":
    from arena_core.engine import Arena

    config_obj = _load_config(config)
    if outputs_dir:
        is_valid, errors = config_obj.apply_overrides({"outputs_dir": outputs_dir})
        if not is_valid:
            raise ConfigurationError("Invalid outputs directory", errors)
    settings = config_obj.settings
    assert settings is not None  # Set by a successful load

    catalog = build_catalog(settings)
    if client is None:
        client = create_client(settings, catalog)

    if save_records is None:
        save_records = get_bool_env("ARENA_SAVE_RECORDS", "true")
    if recorder is None and save_records:
        recorder = JsonFileRecorder(settings.outputs_dir)

    orchestrator = build_orchestrator(settings, catalog, client)
    logger.info(
        f"Arena initialized: {len(catalog.available())} available models, "
        f"records {'enabled' if recorder else 'disabled'}"
    )
    return Arena(
        config=config_obj,
        catalog=catalog,
        orchestrator=orchestrator,
        recorder=recorder,
    )
