"""Type conversion utilities for safely handling hand-authored catalog data.

This module is the single source of truth for safe type conversion.
All other modules should import from here instead of defining their own.
"""

import math
from typing import Any


def safe_float(val: Any, default: float = 0.0) -> float:
    """Safely convert a value to a finite float.

    Args:
        val: Value to convert (can be str, int, float, None, etc.)
        default: Value to return if conversion fails

    Returns:
        Converted float or default value

    Examples:
        >>> safe_float("3.14")
        3.14
        >>> safe_float(None)
        0.0
        >>> safe_float("nan", default=-1.0)
        -1.0
    """
    if val is None or val == "" or isinstance(val, bool):
        return default
    try:
        result = float(val)
    except (ValueError, TypeError):
        return default
    if not math.isfinite(result):
        return default
    return result


def non_negative(val: Any, default: float = 0.0) -> float:
    """Convert to a finite float, clamping negatives to zero."""
    return max(0.0, safe_float(val, default))


def round_half_up(val: float) -> int:
    """Round to the nearest whole number, halves away from zero for positives.

    Matches the rounding the UI uses for currency, unlike Python's
    banker's rounding.

        >>> round_half_up(2.5)
        3
        >>> round_half_up(2.4)
        2
    """
    if not math.isfinite(val):
        return 0
    return int(math.floor(val + 0.5))


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated string into stripped, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
