"""Argument checks shared by the calculators.

Every check raises InvalidArgumentError; none of them clamp. Clamping is
only ever applied to derived outputs.
"""

import math

from budget_engine.domain.exceptions import InvalidArgumentError


def require_finite(name: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
    return value


def require_non_negative(name: str, value: float) -> float:
    require_finite(name, value)
    if value < 0:
        raise InvalidArgumentError(f"{name} must be >= 0, got {value!r}")
    return value


def require_positive(name: str, value: float) -> float:
    require_finite(name, value)
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be > 0, got {value!r}")
    return value


def require_int_range(name: str, value: int, low: int, high: int | None = None) -> int:
    """Integer in [low, high]; high=None means unbounded above"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < low or (high is not None and value > high):
        bounds = f"[{low}, {high}]" if high is not None else f">= {low}"
        raise InvalidArgumentError(f"{name} must be {bounds}, got {value}")
    return value
