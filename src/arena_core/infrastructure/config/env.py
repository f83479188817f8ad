import os


def get_bool_env(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).lower() in {"1", "true", "yes"}


def get_int_env(key: str, default: str) -> int:
    return int(os.getenv(key, default))


def get_float_env(key: str, default: str) -> float:
    return float(os.getenv(key, default))


def get_str_env(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def get_comma_separated_env(key: str, default: str = "") -> list[str]:
    value = os.getenv(key, default)
    return [item.strip() for item in value.split(",") if item.strip()]
