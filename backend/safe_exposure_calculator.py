"""
Safe Exposure Calculator

Estimates how many minutes of sun a person can safely take right now.

Pipeline:
1. Base minutes from the UV category
2. Fitzpatrick skin multiplier
3. Environment factor (cloud x1.3, sunscreen x1.5, multiplicative)
4. raw = base * skin * environment
5. + vitamin D adjustment minutes
6. x0.5 if the user is on a photosensitizing medication (applied after the
   vitamin D boost so it shortens that too)
7. Round half up, clamp to [2, 90] minutes

The calculation is pure and total: every input is coerced toward a safe
default instead of being rejected.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from engine_utils import to_finite_float, round_half_up, clamp
from skin_sensitivity import get_skin_multiplier
from uv_categorizer import categorize_uv

logger = logging.getLogger(__name__)

MIN_SAFE_MINUTES = 2
MAX_SAFE_MINUTES = 90

CLOUD_FACTOR = 1.3       # clouds cut UV by roughly 30%
SUNSCREEN_FACTOR = 1.5
PHOTOSENSITIVITY_FACTOR = 0.5

# UV index from which the optional guard drops positive vitamin D boosts
HIGH_UV_GUARD_THRESHOLD = 7


@dataclass(frozen=True)
class EnvironmentalModifiers:
    """Independent protection / sensitivity flags for a session."""
    is_cloudy: bool = False
    has_sunscreen: bool = False
    is_photosensitive: bool = False


@dataclass(frozen=True)
class SafeExposureBreakdown:
    """Every intermediate value of a safe-time calculation."""
    uv_index: Optional[float]  # None when the reading was unreadable
    uv_level: str
    base_minutes: int
    skin_type: Any
    skin_multiplier: float
    environment_factor: float
    raw_minutes: float
    vitamin_d_adjustment: float
    vitamin_d_applied: bool
    photosensitivity_factor: float
    unclamped_minutes: float
    minutes: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def get_environment_factor(is_cloudy: bool = False, has_sunscreen: bool = False) -> float:
    """Multiplicative protection from cloud cover and sunscreen."""
    factor = 1.0
    if is_cloudy:
        factor *= CLOUD_FACTOR
    if has_sunscreen:
        factor *= SUNSCREEN_FACTOR
    return factor


def calculate_safe_exposure(
    uv_index: Any,
    skin_type: Any,
    is_cloudy: bool = False,
    has_sunscreen: bool = False,
    vitamin_d_adjustment: Any = 0,
    is_photosensitive: bool = False,
    *,
    high_uv_guard: bool = False,
) -> SafeExposureBreakdown:
    """
    Run the safe-time pipeline and return the full breakdown.

    Args:
        uv_index: Current UV index
        skin_type: Fitzpatrick skin type (1-6)
        is_cloudy: Cloud cover present
        has_sunscreen: Sunscreen applied
        vitamin_d_adjustment: Minutes to add from the latest vitamin D status
        is_photosensitive: User takes a photosensitizing medication
        high_uv_guard: Ignore positive vitamin D boosts when UV >= 7

    Returns:
        SafeExposureBreakdown; .minutes is always an int in [2, 90]
    """
    category = categorize_uv(uv_index)
    skin_multiplier = get_skin_multiplier(skin_type)
    environment_factor = get_environment_factor(bool(is_cloudy), bool(has_sunscreen))

    raw_minutes = category.base_minutes * skin_multiplier * environment_factor

    adjustment = to_finite_float(vitamin_d_adjustment)
    if adjustment is None:
        if vitamin_d_adjustment not in (None, 0):
            logger.warning(
                "Ignoring unreadable vitamin D adjustment",
                extra={"vitamin_d_adjustment": repr(vitamin_d_adjustment)},
            )
        adjustment = 0.0

    vitamin_d_applied = True
    uv = to_finite_float(uv_index)
    if high_uv_guard and adjustment > 0 and uv is not None and uv >= HIGH_UV_GUARD_THRESHOLD:
        vitamin_d_applied = False

    total = raw_minutes + (adjustment if vitamin_d_applied else 0.0)

    photosensitivity_factor = PHOTOSENSITIVITY_FACTOR if is_photosensitive else 1.0
    total *= photosensitivity_factor

    minutes = int(clamp(round_half_up(total), MIN_SAFE_MINUTES, MAX_SAFE_MINUTES))

    return SafeExposureBreakdown(
        uv_index=uv,
        uv_level=category.level,
        base_minutes=category.base_minutes,
        skin_type=skin_type,
        skin_multiplier=skin_multiplier,
        environment_factor=environment_factor,
        raw_minutes=raw_minutes,
        vitamin_d_adjustment=adjustment,
        vitamin_d_applied=vitamin_d_applied,
        photosensitivity_factor=photosensitivity_factor,
        unclamped_minutes=total,
        minutes=minutes,
    )


def calculate_safe_time(
    uv_index: Any,
    skin_type: Any,
    is_cloudy: bool = False,
    has_sunscreen: bool = False,
    vitamin_d_adjustment: Any = 0,
    is_photosensitive: bool = False,
    *,
    high_uv_guard: bool = False,
) -> int:
    """Safe sun exposure time in whole minutes, always within [2, 90]."""
    return calculate_safe_exposure(
        uv_index,
        skin_type,
        is_cloudy,
        has_sunscreen,
        vitamin_d_adjustment,
        is_photosensitive,
        high_uv_guard=high_uv_guard,
    ).minutes


def calculate_safe_time_for(
    uv_index: Any,
    skin_type: Any,
    modifiers: EnvironmentalModifiers,
    vitamin_d_adjustment: Any = 0,
) -> int:
    """calculate_safe_time() taking an EnvironmentalModifiers record."""
    return calculate_safe_time(
        uv_index,
        skin_type,
        modifiers.is_cloudy,
        modifiers.has_sunscreen,
        vitamin_d_adjustment,
        modifiers.is_photosensitive,
    )
