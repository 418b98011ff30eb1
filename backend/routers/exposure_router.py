"""
Sun Exposure Router - Safe-time and exposure-score calculations.

Endpoints:
- GET /uv/category - UV severity bucket for a reading
- GET /skin-types/{skin_type} - Fitzpatrick skin profile
- POST /exposure/safe-time - Safe exposure minutes with full breakdown
- POST /exposure/score - Post-session exposure score
"""

from fastapi import APIRouter, Query
from typing import Optional
from pydantic import BaseModel, Field

import config
from exposure_score_calculator import calculate_exposure_score
from safe_exposure_calculator import calculate_safe_exposure
from skin_sensitivity import get_skin_profile
from structured_logging import log_calculation
from uv_categorizer import categorize_uv

router = APIRouter(tags=["Sun Exposure"])


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class SafeTimeRequest(BaseModel):
    uv_index: float = Field(..., allow_inf_nan=False, description="Current UV index")
    skin_type: int = Field(..., description="Fitzpatrick skin type 1-6")
    is_cloudy: bool = False
    has_sunscreen: bool = False
    vitamin_d_adjustment: float = Field(0, allow_inf_nan=False, description="Minutes from the latest vitamin D status")
    is_photosensitive: bool = Field(False, description="Taking a photosensitizing medication")
    high_uv_guard: Optional[bool] = Field(None, description="Override HIGH_UV_VITAMIN_D_GUARD")


class ExposureScoreRequest(BaseModel):
    duration: float = Field(..., ge=0, allow_inf_nan=False, description="Minutes spent in the sun")
    uv_index: float = Field(5, allow_inf_nan=False)
    skin_type: int = 3
    has_sunscreen: bool = False
    is_cloudy: bool = False


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/uv/category")
def get_uv_category(uv_index: float = Query(..., allow_inf_nan=False, description="UV index reading")):
    """Categorize a UV index reading."""
    category = categorize_uv(uv_index)
    return {"uv_index": uv_index, **category.to_dict()}


@router.get("/skin-types/{skin_type}")
def get_skin_type(skin_type: int):
    """Describe a Fitzpatrick skin type. Unknown types report the baseline multiplier."""
    return get_skin_profile(skin_type).to_dict()


@router.post("/exposure/safe-time")
def post_safe_time(request: SafeTimeRequest):
    """Calculate safe sun exposure time in minutes."""
    guard = config.HIGH_UV_VITAMIN_D_GUARD if request.high_uv_guard is None else request.high_uv_guard

    breakdown = calculate_safe_exposure(
        request.uv_index,
        request.skin_type,
        request.is_cloudy,
        request.has_sunscreen,
        request.vitamin_d_adjustment,
        request.is_photosensitive,
        high_uv_guard=guard,
    )

    log_calculation(
        "safe_time",
        breakdown.minutes,
        uv_index=request.uv_index,
        skin_type=request.skin_type,
        is_photosensitive=request.is_photosensitive,
    )

    return {
        "minutes": breakdown.minutes,
        "seconds": breakdown.minutes * 60,
        "breakdown": breakdown.to_dict(),
    }


@router.post("/exposure/score")
def post_exposure_score(request: ExposureScoreRequest):
    """Score a completed sun session."""
    result = calculate_exposure_score(
        request.duration,
        request.uv_index,
        request.skin_type,
        request.has_sunscreen,
        request.is_cloudy,
    )
    log_calculation("exposure_score", result.score, duration=request.duration, uv_index=request.uv_index)
    return result.to_dict()
