"""
Exposure Score Calculator

Scores a completed sun session after the fact.

    raw_exposure = UV * minutes * skin_factor * protection_factor
    score        = raw_exposure / safe_dose_limit(skin_type) * 100

Protection reduces the effective dose (sunscreen 0.5, cloud 0.7, both 0.35).
The rounded score is banded into Low / Optimal / High / Excessive, each with
a recommendation that is stored alongside the session log.
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Tuple

from engine_utils import to_finite_float, round_half_up
from skin_sensitivity import get_exposure_skin_factor, get_safe_dose_limit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExposureRecommendation:
    message: str
    short_message: str
    priority: str


@dataclass(frozen=True)
class ExposureScore:
    """Post-session exposure score and classification."""
    score: int
    raw_exposure: int
    status: str
    recommendation: str
    short_recommendation: str
    color: str
    priority: str
    safe_limit: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Low is score < 40; the others are inclusive upper bounds
LOW_SCORE_LIMIT = 40
SCORE_BANDS: List[Tuple[float, str, str]] = [
    (80, "Optimal", "#4CAF50"),
    (120, "High", "#FF9800"),
    (float("inf"), "Excessive", "#F44336"),
]
LOW_BAND = ("Low", "#2196F3")

# Ceiling for a raw dose, far inside the Excessive band for every skin type
MAX_RAW_EXPOSURE = 1e9

RECOMMENDATIONS = {
    "Low": ExposureRecommendation(
        message="Consider getting a bit more sun exposure for Vitamin D production.",
        short_message="Consider more sun",
        priority="low",
    ),
    "Optimal": ExposureRecommendation(
        message="Great! You have reached an optimal level of sun exposure. Maintain this routine.",
        short_message="Good! Maintain routine.",
        priority="optimal",
    ),
    "High": ExposureRecommendation(
        message="Your exposure is high. Use protection (sunscreen/hat) if going out again.",
        short_message="Use protection if going out",
        priority="caution",
    ),
    "Excessive": ExposureRecommendation(
        message="Your sun exposure is excessive. Please reduce sun exposure to avoid skin damage.",
        short_message="Reduce exposure immediately",
        priority="warning",
    ),
}


def get_protection_factor(has_sunscreen: bool = False, is_cloudy: bool = False) -> float:
    """Fraction of the UV dose that reaches the skin."""
    if has_sunscreen and is_cloudy:
        return 0.35
    if has_sunscreen:
        return 0.5
    if is_cloudy:
        return 0.7
    return 1.0


def classify_score(score: Any) -> Tuple[str, str]:
    """Return (status, color) for a rounded exposure score."""
    value = to_finite_float(score) or 0.0
    if value < LOW_SCORE_LIMIT:
        return LOW_BAND
    for upper, status, color in SCORE_BANDS:
        if value <= upper:
            return status, color
    return SCORE_BANDS[-1][1], SCORE_BANDS[-1][2]


def get_exposure_recommendation(score: Any) -> ExposureRecommendation:
    status, _ = classify_score(score)
    return RECOMMENDATIONS[status]


def calculate_raw_exposure(
    duration: Any,
    uv_index: Any,
    skin_type: Any = 3,
    has_sunscreen: bool = False,
    is_cloudy: bool = False,
) -> float:
    """Unrounded dose in UV-minutes. Negative or unreadable UV/duration count as zero."""
    minutes = max(0.0, to_finite_float(duration) or 0.0)
    uv = max(0.0, to_finite_float(uv_index) or 0.0)
    return uv * minutes * get_exposure_skin_factor(skin_type) * get_protection_factor(has_sunscreen, is_cloudy)


def score_raw_exposure(raw_exposure: float, skin_type: Any = 3) -> ExposureScore:
    """Normalize a raw dose against the skin type's safe limit and classify it.

    NaN counts as no dose. Negative doses become 0 and huge or infinite ones
    are capped at MAX_RAW_EXPOSURE, so the score is always a finite int.
    """
    if math.isnan(raw_exposure):
        raw_exposure = 0.0
    raw_exposure = min(max(raw_exposure, 0.0), MAX_RAW_EXPOSURE)

    safe_limit = get_safe_dose_limit(skin_type)
    score = round_half_up(raw_exposure / safe_limit * 100)
    status, color = classify_score(score)
    recommendation = RECOMMENDATIONS[status]

    return ExposureScore(
        score=score,
        raw_exposure=round_half_up(raw_exposure),
        status=status,
        recommendation=recommendation.message,
        short_recommendation=recommendation.short_message,
        color=color,
        priority=recommendation.priority,
        safe_limit=safe_limit,
    )


def calculate_exposure_score(
    duration: Any,
    uv_index: Any = 5,
    skin_type: Any = 3,
    has_sunscreen: bool = False,
    is_cloudy: bool = False,
) -> ExposureScore:
    """
    Score a completed session.

    Args:
        duration: Minutes actually spent in the sun
        uv_index: UV index during the session
        skin_type: Fitzpatrick skin type (1-6)
        has_sunscreen: Sunscreen was applied
        is_cloudy: Cloud cover was present

    Returns:
        ExposureScore with score, raw exposure, status and recommendation
    """
    raw = calculate_raw_exposure(duration, uv_index, skin_type, has_sunscreen, is_cloudy)
    result = score_raw_exposure(raw, skin_type)
    logger.debug(
        "Exposure scored",
        extra={"raw_exposure": raw, "score": result.score, "status": result.status},
    )
    return result
