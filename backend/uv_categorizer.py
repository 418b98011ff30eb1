"""
UV Categorizer

Maps a numeric UV index onto the WHO severity buckets used both for safe-time
lookups and for display:

    UV 0-2   Low        60 min base
    UV 3-5   Moderate   30 min base
    UV 6-7   High       15 min base
    UV 8-10  Very High   8 min base
    UV 11+   Extreme     3 min base

Fractional readings belong to the bucket whose integer range they sit in or
just above (5.5 is Moderate, 7.9 is High). Negative, NaN and non-numeric
readings return an "Unknown" category carrying the Low base time.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Tuple

from engine_utils import to_finite_float

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UVCategory:
    """Severity bucket for a UV reading."""
    level: str
    base_minutes: int
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# (lower bound inclusive, upper bound exclusive) -> category
UV_BUCKETS: List[Tuple[Tuple[float, float], UVCategory]] = [
    ((0, 3), UVCategory("Low", 60, "#4CAF50")),
    ((3, 6), UVCategory("Moderate", 30, "#FFB800")),
    ((6, 8), UVCategory("High", 15, "#FF9800")),
    ((8, 11), UVCategory("Very High", 8, "#FF5722")),
    ((11, float("inf")), UVCategory("Extreme", 3, "#9C27B0")),
]

# Low base time, unknown level
FALLBACK_CATEGORY = UVCategory("Unknown", 60, "#9E9E9E")


def categorize_uv(uv_index: Any) -> UVCategory:
    """
    Categorize a UV index reading.

    Args:
        uv_index: UV index (non-negative real, typically 0-20)

    Returns:
        UVCategory with level, base_minutes and display color. Never raises.
    """
    uv = to_finite_float(uv_index)
    if uv is None or uv < 0:
        logger.warning("Unrecognized UV index, using Low base time", extra={"uv_index": repr(uv_index)})
        return FALLBACK_CATEGORY

    for (low, high), category in UV_BUCKETS:
        if low <= uv < high:
            return category

    return FALLBACK_CATEGORY


def get_base_minutes(uv_index: Any) -> int:
    """Base safe-exposure minutes for a UV reading (Type III skin, no modifiers)."""
    return categorize_uv(uv_index).base_minutes


def get_uv_level(uv_index: Any) -> str:
    return categorize_uv(uv_index).level
