from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from arena_core.infrastructure.config.models import ArenaConfig, ModelConfig
from arena_core.shared.logging import get_contextual_logger

logger = get_contextual_logger("arena.config")


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config_data: dict[str, Any]) -> tuple[bool, list[str]]:
    errors: list[str] = []
    logger.debug(f"Validating config sections: {list(config_data.keys())}")

    models = config_data.get("models", {})
    if not models:
        errors.append("Section 'models' is empty but must contain values")

    for model_key, model_cfg in models.items():
        if not isinstance(model_cfg, dict):
            errors.append(f"Model '{model_key}' must be a dictionary")
            continue
        try:
            ModelConfig(**model_cfg)
        except ValidationError as e:
            for err in e.errors():
                field = ".".join(str(x) for x in err["loc"])
                errors.append(f"Model '{model_key}': {field} - {err['msg']}")

    try:
        ArenaConfig(**config_data)
    except ValidationError as e:
        for err in e.errors():
            loc = err["loc"]
            if loc and loc[0] == "models":
                continue  # Already reported per model
            field = ".".join(str(x) for x in loc)
            errors.append(f"{field}: {err['msg']}")

    available = [
        key
        for key, cfg in models.items()
        if isinstance(cfg, dict) and cfg.get("available", True)
    ]
    if models and len(available) < 2:
        errors.append(
            f"At least two models must be available, found {len(available)}"
        )

    is_valid = len(errors) == 0
    logger.debug(f"Config validation: is_valid={is_valid}, errors={len(errors)}")
    return is_valid, errors


class Config:
    """Settings assembled from packaged defaults plus a YAML file or dict.

    A ``models`` section in user settings replaces the default catalog:
    listed keys are merged over the matching defaults and all other
    defaults are dropped.
    """

    def __init__(self, config_path: str | Path | None = None) -> None:
        self.config_path = Path(config_path) if config_path else None
        self.config_data: dict[str, Any] = {}
        self.settings: ArenaConfig | None = None

    def _load_defaults(self) -> dict[str, Any]:
        from arena_core.infrastructure.config.defaults import get_defaults

        defaults = get_defaults()
        logger.debug(f"Loaded defaults with sections: {list(defaults.keys())}")
        return defaults

    def _validate_config_path(self) -> bool:
        if self.config_path is None:
            logger.error("No config path specified.")
            return False
        if not self.config_path.exists():
            logger.error(f"Config file not found at {self.config_path.resolve()}")
            return False
        return True

    def _parse_yaml_file(self) -> dict[str, Any] | None:
        try:
            with open(self.config_path, encoding="utf-8") as f:  # type: ignore[arg-type]
                result = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config file: {e}")
            return None
        if result is None:
            return {}
        return dict(result) if isinstance(result, dict) else None

    def _merge_models(
        self,
        user_models: dict[str, Any],
        default_models: dict[str, dict[str, Any]],
    ) -> dict[str, Any]:
        merged_models = {}
        for model_key, user_model in user_models.items():
            base_model = default_models.get(model_key, {})
            if not base_model:
                logger.warning(
                    f"Model '{model_key}' not found in defaults. "
                    f"Provide full configuration (provider, model_name, etc.)"
                )
            if not isinstance(user_model, dict):
                # Keep it so validation reports the bad entry
                merged_models[model_key] = user_model
                continue
            merged_models[model_key] = _deep_merge(base_model, user_model)

        logger.info(
            f"Loaded {len(merged_models)} models: {list(merged_models.keys())}"
        )
        return merged_models

    def _merge_user_settings(self, user_config: dict[str, Any]) -> None:
        without_models = {k: v for k, v in user_config.items() if k != "models"}
        default_models = self.config_data.get("models", {})
        self.config_data = _deep_merge(self.config_data, without_models)

        if user_config.get("models"):
            self.config_data["models"] = self._merge_models(
                user_config["models"], default_models
            )
        else:
            logger.debug("No models specified - using all defaults")

    def _finish(self) -> tuple[bool, list[str]]:
        is_valid, errors = validate_config(self.config_data)
        self.settings = ArenaConfig(**self.config_data) if is_valid else None
        return is_valid, errors

    def load(self) -> bool:
        if not self._validate_config_path():
            return False
        user_config = self._parse_yaml_file()
        if user_config is None:
            return False

        self.config_data = self._load_defaults()
        self._merge_user_settings(user_config)

        is_valid, errors = self._finish()
        if not is_valid:
            logger.error("Configuration validation failed.")
            for error in errors:
                logger.error(f"  - {error}")
            return False

        logger.info(f"Loaded configuration from {self.config_path}")
        return True

    def load_from_dict(self, settings: dict[str, Any]) -> tuple[bool, list[str]]:
        logger.info("Loading configuration from dictionary")
        self.config_data = self._load_defaults()
        if settings:
            self._merge_user_settings(settings)
        return self._finish()

    def apply_overrides(self, overrides: dict[str, Any]) -> tuple[bool, list[str]]:
        """Deep-merge ``overrides`` into the loaded data and re-validate.

        Unlike user settings, a ``models`` entry here patches individual
        models instead of replacing the catalog.
        """
        if not overrides:
            return self._finish()
        logger.debug(f"Applying overrides for sections: {list(overrides.keys())}")
        self.config_data = _deep_merge(self.config_data, overrides)
        return self._finish()

    def get_model_config(self, model_key: str) -> dict[str, Any]:
        models: dict[str, Any] = self.config_data.get("models", {})
        return dict(models.get(model_key, {}))

    def get_active_model_keys(self) -> list[str]:
        return [
            key
            for key, cfg in self.config_data.get("models", {}).items()
            if cfg.get("available", True)
        ]
