"""
Sessions Router - Completed sun sessions and history summaries.

Endpoints:
- POST /sessions/complete - Build the log entry for a finished timer session
- POST /sessions/daily-score - Combined exposure score for a set of sessions
- POST /sessions/stats - Totals, streak and averages over a session history
"""

from fastapi import APIRouter
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from session_tracking import (
    build_session_log,
    calculate_daily_exposure_score,
    calculate_user_stats,
)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


class SessionComplete(BaseModel):
    duration: float = Field(..., ge=0, allow_inf_nan=False, description="Minutes spent in the sun")
    uv_index: float = Field(..., allow_inf_nan=False)
    skin_type: int = 3
    sunscreen: bool = False
    cloudy: bool = False
    date: Optional[datetime] = None


class SessionRecord(BaseModel):
    # accepts the camelCase records the mobile client stores
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    duration: float = Field(0, allow_inf_nan=False)
    uv_index: float = Field(0, allow_inf_nan=False)
    skin_type: Optional[int] = None
    sunscreen: bool = False
    cloudy: bool = False
    date: Optional[datetime] = None


class SessionHistory(BaseModel):
    sessions: List[SessionRecord] = []
    now: Optional[datetime] = None


@router.post("/complete", status_code=201)
def complete_session(request: SessionComplete):
    """Score a finished session and return its immutable log entry."""
    log = build_session_log(
        request.duration,
        request.uv_index,
        request.skin_type,
        request.sunscreen,
        request.cloudy,
        request.date,
    )
    return log.to_dict()


@router.post("/daily-score")
def daily_score(request: SessionHistory):
    sessions = [s.model_dump() for s in request.sessions]
    return calculate_daily_exposure_score(sessions).to_dict()


@router.post("/stats")
def session_stats(request: SessionHistory):
    sessions = [s.model_dump() for s in request.sessions]
    return calculate_user_stats(sessions, request.now).to_dict()
