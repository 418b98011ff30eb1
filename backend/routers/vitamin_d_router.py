"""
Vitamin D Router - Lab value classification and report rules.

Endpoints:
- GET /vitamin-d/status - Classify a 25(OH)D value
- POST /vitamin-d/reports - Validate and classify a new lab report
- POST /vitamin-d/adjustment - Resolve the current safe-time adjustment
- POST /vitamin-d/upload-eligibility - Days until the next upload is allowed
"""

from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from exceptions import InvalidVitaminDValueError, ReportRateLimitedError
from vitamin_d_classifier import get_vitamin_d_status
from vitamin_d_reports import (
    create_report,
    days_until_next_upload,
    ensure_upload_allowed,
    resolve_vitamin_d_adjustment,
)
from structured_logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/vitamin-d", tags=["Vitamin D"])


class ReportCreateRequest(BaseModel):
    value: float = Field(..., allow_inf_nan=False, description="25(OH)D level in ng/mL")
    date: Optional[datetime] = Field(None, description="Report date, defaults to now")
    last_report_date: Optional[datetime] = Field(None, description="Date of the user's previous report")


class StoredReport(BaseModel):
    value: Optional[float] = Field(None, allow_inf_nan=False)
    date: datetime
    adjustment: Optional[int] = None


class AdjustmentRequest(BaseModel):
    reports: List[StoredReport] = []
    baseline_value: Optional[float] = Field(None, allow_inf_nan=False, description="Vitamin D value from onboarding")


class EligibilityRequest(BaseModel):
    last_report_date: Optional[datetime] = None
    now: Optional[datetime] = None


@router.get("/status")
def get_status(value: float = Query(..., allow_inf_nan=False, description="25(OH)D level in ng/mL")):
    """Classify a vitamin D level."""
    return get_vitamin_d_status(value).to_dict()


@router.post("/reports", status_code=201)
def post_report(request: ReportCreateRequest):
    """Validate, rate-limit and classify a new vitamin D report."""
    try:
        ensure_upload_allowed(request.last_report_date, request.date)
        report = create_report(request.value, request.date)
    except InvalidVitaminDValueError as e:
        logger.warning("Rejected vitamin D report", extra={"vitamin_d": request.value})
        raise HTTPException(status_code=422, detail=str(e))
    except ReportRateLimitedError as e:
        raise HTTPException(
            status_code=429,
            detail={"message": str(e), "days_remaining": e.days_remaining},
        )

    status = get_vitamin_d_status(report.value)
    return {**report.to_dict(), "message": status.message}


@router.post("/adjustment")
def post_adjustment(request: AdjustmentRequest):
    """Safe-time adjustment from the newest report, falling back to the baseline value."""
    reports = [r.model_dump() for r in request.reports]
    adjustment = resolve_vitamin_d_adjustment(reports, request.baseline_value)
    return {
        "adjustment": adjustment,
        "source": "report" if reports else ("baseline" if request.baseline_value is not None else "none"),
    }


@router.post("/upload-eligibility")
def post_upload_eligibility(request: EligibilityRequest):
    """Check the one-report-per-30-days rule."""
    remaining = days_until_next_upload(request.last_report_date, request.now)
    return {"allowed": remaining == 0, "days_remaining": remaining}
