"""
Session Tracking

Turns completed sun sessions into logs and summaries:
- SessionLog records created once when a timer session completes
- Daily exposure score summed across all of a day's sessions
- User statistics (totals, today, this month, streak, average per day)

Sessions may be SessionLog instances or plain mappings as stored by the
mobile client (camelCase keys, `exposureTime` as an alias for `duration`).
Calendar days are UTC days.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from engine_utils import round_half_up, to_datetime, to_finite_float, utcnow
from exposure_score_calculator import (
    ExposureRecommendation,
    calculate_exposure_score,
    calculate_raw_exposure,
    get_exposure_recommendation,
    score_raw_exposure,
)

logger = logging.getLogger(__name__)

DEFAULT_SKIN_TYPE = 3

# A single session cannot last longer than a day
MAX_SESSION_MINUTES = 24 * 60


@dataclass(frozen=True)
class SessionLog:
    """A completed exposure session. Never mutated after creation."""
    uv_index: float
    duration: float
    skin_type: int
    sunscreen: bool
    cloudy: bool
    exposure_score: int
    raw_exposure: int
    exposure_status: str
    recommendation: str
    date: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the keys the client stores."""
        return {
            "uvIndex": self.uv_index,
            "duration": self.duration,
            "skinType": self.skin_type,
            "sunscreen": self.sunscreen,
            "cloudy": self.cloudy,
            "exposureScore": self.exposure_score,
            "rawExposure": self.raw_exposure,
            "exposureStatus": self.exposure_status,
            "recommendation": self.recommendation,
            "date": self.date.isoformat(),
        }


@dataclass(frozen=True)
class DailyExposureScore:
    score: int
    raw_exposure: int
    status: str
    color: str
    total_minutes: float
    session_count: int
    recommendation: ExposureRecommendation

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UserStats:
    total_sessions: int
    total_minutes: float
    current_streak: int
    today_minutes: float
    monthly_total: float
    average_per_day: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


SessionLike = Union[SessionLog, Mapping[str, Any]]

# field -> accepted keys, first match wins
_FIELD_ALIASES = {
    "duration": ("duration", "exposureTime", "exposure_time"),
    "uv_index": ("uvIndex", "uv_index"),
    "skin_type": ("skinType", "skin_type"),
    "sunscreen": ("sunscreen", "hasSunscreen", "has_sunscreen"),
    "cloudy": ("cloudy", "isCloudy", "is_cloudy"),
    "date": ("date",),
}


def _field(session: SessionLike, name: str) -> Any:
    if isinstance(session, SessionLog):
        return getattr(session, name)
    for key in _FIELD_ALIASES[name]:
        value = session.get(key)
        if value:
            return value
    return None


def _minutes(session: SessionLike) -> float:
    minutes = to_finite_float(_field(session, "duration")) or 0.0
    return min(max(minutes, 0.0), MAX_SESSION_MINUTES)


def _session_day(session: SessionLike) -> Optional[date]:
    raw = _field(session, "date")
    if raw is None:
        return None
    try:
        return to_datetime(raw).date()
    except (TypeError, ValueError):
        logger.warning("Skipping session with unreadable date", extra={"session_date": repr(raw)})
        return None


def build_session_log(
    duration: Any,
    uv_index: Any,
    skin_type: Any,
    sunscreen: bool = False,
    cloudy: bool = False,
    date: Optional[Any] = None,
) -> SessionLog:
    """Score a finished session and freeze it into a SessionLog."""
    result = calculate_exposure_score(duration, uv_index, skin_type, sunscreen, cloudy)
    log = SessionLog(
        uv_index=uv_index,
        duration=duration,
        skin_type=skin_type,
        sunscreen=bool(sunscreen),
        cloudy=bool(cloudy),
        exposure_score=result.score,
        raw_exposure=result.raw_exposure,
        exposure_status=result.status,
        recommendation=result.recommendation,
        date=to_datetime(date) if date is not None else utcnow(),
    )
    logger.info(
        "Session completed",
        extra={"duration": duration, "exposure_score": log.exposure_score, "exposure_status": log.exposure_status},
    )
    return log


def calculate_daily_exposure_score(sessions: Optional[Sequence[SessionLike]]) -> DailyExposureScore:
    """
    Combined exposure score for a set of sessions (usually one day's).

    Raw exposure is recomputed per session with its own UV, skin type and
    modifiers, summed, then normalized against the first session's skin type.
    """
    if not sessions:
        empty = score_raw_exposure(0.0, DEFAULT_SKIN_TYPE)
        return DailyExposureScore(
            score=0,
            raw_exposure=0,
            status=empty.status,
            color=empty.color,
            total_minutes=0,
            session_count=0,
            recommendation=get_exposure_recommendation(0),
        )

    skin_type = _field(sessions[0], "skin_type") or DEFAULT_SKIN_TYPE
    total_raw = 0.0
    total_minutes = 0.0

    for session in sessions:
        minutes = _minutes(session)
        total_raw += calculate_raw_exposure(
            minutes,
            _field(session, "uv_index") or 0,
            _field(session, "skin_type") or skin_type,
            bool(_field(session, "sunscreen")),
            bool(_field(session, "cloudy")),
        )
        total_minutes += minutes

    result = score_raw_exposure(total_raw, skin_type)
    return DailyExposureScore(
        score=result.score,
        raw_exposure=result.raw_exposure,
        status=result.status,
        color=result.color,
        total_minutes=total_minutes,
        session_count=len(sessions),
        recommendation=get_exposure_recommendation(result.score),
    )


def _count_streak(session_days: set, today: date) -> int:
    # A streak is still alive if the last session was yesterday
    check = today if today in session_days else today - timedelta(days=1)
    streak = 0
    while check in session_days:
        streak += 1
        check -= timedelta(days=1)
    return streak


def calculate_user_stats(
    sessions: Optional[Iterable[SessionLike]],
    now: Optional[Any] = None,
) -> UserStats:
    """Aggregate a user's session history."""
    sessions = list(sessions or [])
    if not sessions:
        return UserStats(0, 0, 0, 0, 0, 0)

    today = (to_datetime(now) if now is not None else utcnow()).date()
    first_of_month = today.replace(day=1)

    total_minutes = 0.0
    today_minutes = 0.0
    monthly_total = 0.0
    session_days = set()

    for session in sessions:
        minutes = _minutes(session)
        total_minutes += minutes

        day = _session_day(session)
        if day is None:
            continue
        session_days.add(day)
        if day == today:
            today_minutes += minutes
        if day >= first_of_month:
            monthly_total += minutes

    average = round_half_up(total_minutes / len(session_days)) if session_days else 0

    return UserStats(
        total_sessions=len(sessions),
        total_minutes=total_minutes,
        current_streak=_count_streak(session_days, today),
        today_minutes=today_minutes,
        monthly_total=monthly_total,
        average_per_day=average,
    )


def sessions_on_day(sessions: Iterable[SessionLike], day: Any) -> List[SessionLike]:
    """Filter sessions down to a single UTC calendar day."""
    target = day if isinstance(day, date) and not isinstance(day, datetime) else to_datetime(day).date()
    return [s for s in sessions if _session_day(s) == target]
