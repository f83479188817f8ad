import math
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

TRUNCATE_SUFFIX = "... (truncated)"


def _clip(text: str, max_length: int | None, suffix: str) -> str:
    if max_length and len(text) > max_length:
        return text[:max_length] + suffix
    return text


def sanitize_for_json(
    obj: Any,
    max_length: int | None = None,
    truncate_suffix: str = TRUNCATE_SUFFIX,
) -> Any:
    """Convert battle data into values ``json.dumps`` accepts as is.

    Enums become their values, timestamps ISO strings, and non-finite
    floats ``None``. Strings longer than ``max_length`` are clipped.
    """
    if obj is None or isinstance(obj, (bool, int)):
        return obj
    if isinstance(obj, float):
        return obj if math.isfinite(obj) else None
    if isinstance(obj, Enum):
        return sanitize_for_json(obj.value, max_length, truncate_suffix)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, str):
        # Lone surrogates from model output would break the encoder
        valid = obj.encode("utf-8", errors="replace").decode("utf-8")
        return _clip(valid, max_length, truncate_suffix)
    if isinstance(obj, Mapping):
        return {
            str(key): sanitize_for_json(value, max_length, truncate_suffix)
            for key, value in obj.items()
        }
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [sanitize_for_json(item, max_length, truncate_suffix) for item in obj]
    return _clip(str(obj), max_length, truncate_suffix)
