"""
Vitamin D Reports

Rules around user-submitted vitamin D lab reports:
- A report is validated (10-100 ng/mL), classified, and never mutated
- Only one upload is allowed per rolling 30-day window
- The most recent report decides the safe-time adjustment; without any
  report the onboarding baseline value is used instead
"""

import logging
import math
from dataclasses import dataclass, asdict
from datetime import datetime, date as date_type
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from config import VITAMIN_D_REPORT_INTERVAL_DAYS
from engine_utils import to_datetime, utcnow
from exceptions import ReportRateLimitedError
from vitamin_d_classifier import VITAMIN_D_UNIT, get_vitamin_d_status, validate_vitamin_d_value

logger = logging.getLogger(__name__)

REPORT_INTERVAL_DAYS = VITAMIN_D_REPORT_INTERVAL_DAYS
SECONDS_PER_DAY = 24 * 60 * 60

DateLike = Union[datetime, date_type, str]


@dataclass(frozen=True)
class VitaminDReport:
    """A single immutable lab measurement."""
    value: float
    date: datetime
    status: str
    adjustment: int
    unit: str = VITAMIN_D_UNIT

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


def create_report(value: Any, date: Optional[DateLike] = None) -> VitaminDReport:
    """
    Validate and classify a new lab value.

    Raises:
        InvalidVitaminDValueError: value is not within 10-100 ng/mL
    """
    level = validate_vitamin_d_value(value)
    status = get_vitamin_d_status(level)
    report = VitaminDReport(
        value=level,
        date=to_datetime(date) if date is not None else utcnow(),
        status=status.status,
        adjustment=status.adjustment,
    )
    logger.info(
        "Vitamin D report created",
        extra={"vitamin_d_status": report.status, "adjustment": report.adjustment},
    )
    return report


def days_until_next_upload(
    last_report_date: Optional[DateLike],
    now: Optional[DateLike] = None,
    interval_days: int = REPORT_INTERVAL_DAYS,
) -> int:
    """Days left before another report may be uploaded (0 = allowed now)."""
    if last_report_date is None:
        return 0

    last = to_datetime(last_report_date)
    current = to_datetime(now) if now is not None else utcnow()

    elapsed_days = math.ceil(abs((current - last).total_seconds()) / SECONDS_PER_DAY)
    if elapsed_days < interval_days:
        return interval_days - elapsed_days
    return 0


def ensure_upload_allowed(
    last_report_date: Optional[DateLike],
    now: Optional[DateLike] = None,
) -> None:
    """Raise ReportRateLimitedError if the last upload is still inside the window."""
    remaining = days_until_next_upload(last_report_date, now)
    if remaining > 0:
        logger.info("Vitamin D upload rate limited", extra={"days_remaining": remaining})
        raise ReportRateLimitedError(remaining)


def _report_field(report: Union[VitaminDReport, Mapping[str, Any]], name: str) -> Any:
    if isinstance(report, Mapping):
        return report.get(name)
    return getattr(report, name, None)


def latest_report(
    reports: Iterable[Union[VitaminDReport, Mapping[str, Any]]]
) -> Optional[Union[VitaminDReport, Mapping[str, Any]]]:
    """The report with the most recent date, or None. Reports without a date are skipped."""
    dated = [r for r in reports if _report_field(r, "date") is not None]
    if not dated:
        return None
    return max(dated, key=lambda r: to_datetime(_report_field(r, "date")))


def resolve_vitamin_d_adjustment(
    reports: Iterable[Union[VitaminDReport, Mapping[str, Any]]] = (),
    baseline_value: Any = None,
) -> int:
    """
    Minutes to pass to calculate_safe_time() as the vitamin D adjustment.

    The newest report wins. Without reports the baseline lab value from
    onboarding is classified; with neither the adjustment is 0.
    """
    latest = latest_report(reports)
    if latest is not None:
        adjustment = _report_field(latest, "adjustment")
        if adjustment is None:
            # Stored report without a cached adjustment
            adjustment = get_vitamin_d_status(_report_field(latest, "value")).adjustment
        return int(adjustment)

    if baseline_value is not None:
        return get_vitamin_d_status(baseline_value).adjustment

    return 0
