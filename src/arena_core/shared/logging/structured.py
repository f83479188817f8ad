import contextvars
import json
import logging
import uuid
from datetime import datetime
from typing import Any

from arena_core.shared.json_utils import sanitize_for_json

# Correlation fields attached to every record emitted inside a battle
battle_id_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "battle_id", default=None
)
round_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "round", default=None
)
phase_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "phase", default=None
)
model_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "model", default=None
)

_CONTEXT_VARS: dict[str, contextvars.ContextVar[str | None]] = {
    "battle_id": battle_id_context,
    "round": round_context,
    "phase": phase_context,
    "model": model_context,
}

# Short labels used by the console formatter
_CONTEXT_LABELS = {
    "battle_id": "battle",
    "round": "round",
    "phase": "phase",
    "model": "model",
}

_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


def generate_run_id() -> str:
    return str(uuid.uuid4())[:8]


def get_context() -> dict[str, str]:
    return {
        key: value
        for key, var in _CONTEXT_VARS.items()
        if (value := var.get())
    }


def build_context_parts(record: logging.LogRecord) -> list[str]:
    parts = []
    for key, label in _CONTEXT_LABELS.items():
        value = getattr(record, key, None)
        if value:
            parts.append(f"{label}:{value}")
    return parts


class JSONFormatter(logging.Formatter):
    def _sanitize_value(self, value: object, max_length: int = 500) -> object:
        return sanitize_for_json(
            value,
            max_length=max_length,
            truncate_suffix=(
                f"... (truncated, {len(str(value))} total chars)"
                if isinstance(value, str)
                else "... (truncated)"
            ),
        )

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.pathname:
            log_entry["module"] = record.module
            log_entry["line"] = record.lineno

        log_entry.update(get_context())

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = self._sanitize_value(value)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        context = get_context()
        for key in _CONTEXT_VARS:
            setattr(record, key, context.get(key, ""))
        return True


class ContextualLogger:
    """Logger wrapper whose keyword arguments become structured ``extra`` fields."""

    def __init__(self, name: str = "arena"):
        self.logger = logging.getLogger(name)
        self._battle_id: str | None = None

    def set_run(self, battle_id: str | None = None) -> str:
        if battle_id is None:
            battle_id = generate_run_id()
        self._battle_id = battle_id
        battle_id_context.set(battle_id)
        return battle_id

    class BattleScope:
        def __init__(
            self,
            round_number: int | None = None,
            phase: str | None = None,
            model: str | None = None,
        ):
            self.values = {
                "round": str(round_number) if round_number is not None else None,
                "phase": phase,
                "model": model,
            }
            self._tokens: list[
                tuple[contextvars.ContextVar[str | None], contextvars.Token[str | None]]
            ] = []

        def __enter__(self) -> "ContextualLogger.BattleScope":
            for key, value in self.values.items():
                if value is not None:
                    var = _CONTEXT_VARS[key]
                    self._tokens.append((var, var.set(value)))
            return self

        def __exit__(
            self, _exc_type: object, _exc_val: object, _exc_tb: object
        ) -> None:
            for var, token in reversed(self._tokens):
                var.reset(token)
            self._tokens.clear()

    def scope(
        self,
        round_number: int | None = None,
        phase: str | None = None,
        model: str | None = None,
    ) -> BattleScope:
        return self.BattleScope(
            round_number=round_number, phase=phase, model=model
        )

    def _log(
        self,
        level: int,
        message: str,
        args: tuple[object, ...],
        kwargs: dict[str, object],
        exc_info: bool = False,
    ) -> None:
        extra = {k: v for k, v in kwargs.items() if k != "exc_info"}
        self.logger.log(
            level,
            message,
            *args,
            exc_info=exc_info or bool(kwargs.get("exc_info", False)),
            extra=extra,
            stacklevel=3,
        )

    def debug(self, message: str, *args: object, **kwargs: object) -> None:
        self._log(logging.DEBUG, message, args, kwargs)

    def info(self, message: str, *args: object, **kwargs: object) -> None:
        self._log(logging.INFO, message, args, kwargs)

    def warning(self, message: str, *args: object, **kwargs: object) -> None:
        self._log(logging.WARNING, message, args, kwargs)

    def error(self, message: str, *args: object, **kwargs: object) -> None:
        self._log(logging.ERROR, message, args, kwargs)

    def exception(self, message: str, *args: object, **kwargs: object) -> None:
        self._log(logging.ERROR, message, args, kwargs, exc_info=True)

    def critical(self, message: str, *args: object, **kwargs: object) -> None:
        self._log(logging.CRITICAL, message, args, kwargs, exc_info=True)

    def log_prompt(
        self, prompt: str, model: str | None = None, **kwargs: object
    ) -> None:
        extra: dict[str, object] = {
            "event_type": "prompt",
            "prompt": prompt,
            "prompt_length": len(prompt),
            **kwargs,
        }
        if model:
            extra["target_model"] = model

        self.logger.debug(
            f"Prompt ({len(prompt)} chars)" + (f" to {model}" if model else ""),
            extra=extra,
            stacklevel=2,
        )

    def log_response(
        self,
        response: str,
        model: str | None = None,
        cost_cents: float | None = None,
        **kwargs: object,
    ) -> None:
        extra: dict[str, object] = {
            "event_type": "response",
            "response": response,
            "response_length": len(response),
            **kwargs,
        }
        if model:
            extra["source_model"] = model
        if cost_cents is not None:
            extra["cost_cents"] = cost_cents

        cost_str = f", {cost_cents:.4f}c" if cost_cents is not None else ""
        self.logger.debug(
            f"Response ({len(response)} chars)"
            + (f" from {model}" if model else "")
            + cost_str,
            extra=extra,
            stacklevel=2,
        )


def get_contextual_logger(name: str = "arena") -> ContextualLogger:
    return ContextualLogger(name)
