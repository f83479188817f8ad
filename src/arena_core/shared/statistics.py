from collections.abc import Iterable


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def rounded_mean(values: Iterable[float], digits: int = 1) -> float:
    items = list(values)
    if not items:
        return 0.0
    return round(sum(items) / len(items), digits)
