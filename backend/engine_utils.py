"""
Numeric and date helpers shared by the exposure engine modules.
"""

import math
from datetime import date, datetime, timezone
from typing import Any, Optional, Union


def to_finite_float(value: Any) -> Optional[float]:
    """Coerce a scalar input to a finite float, or None if that's not possible.

    Booleans are rejected so that a stray True never reads as 1.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def to_datetime(value: Union[datetime, date, str]) -> datetime:
    """Normalize a datetime, date or ISO-8601 string to an aware UTC datetime."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    elif not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
