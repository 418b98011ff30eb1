"""
Vitamin D Status Classifier

Maps a 25(OH)D blood value (ng/mL) to a deficiency status and the number of
minutes to add to future safe-exposure calculations.

Clinical bands:
    < 20 ng/mL      Deficient      +20 min
    20 - < 30       Insufficient   +15 min
    30 - 50         Sufficient       0 min
    > 50            Optimal          0 min

Values outside the plausible 10-100 ng/mL lab domain are clamped into it and
flagged; the classifier never raises. Rejecting such values before they are
stored is the job of validate_vitamin_d_value().
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from engine_utils import to_finite_float, clamp
from exceptions import InvalidVitaminDValueError

logger = logging.getLogger(__name__)

VITAMIN_D_MIN = 10.0
VITAMIN_D_MAX = 100.0
VITAMIN_D_UNIT = "ng/mL"


@dataclass(frozen=True)
class VitaminDStatus:
    """Classification of a single vitamin D reading."""
    status: str
    adjustment: int  # minutes added to safe exposure
    message: str
    value: Optional[float] = None  # value after clamping into the lab domain
    in_range: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# (exclusive upper bound, status, adjustment, message), checked in order
VITAMIN_D_BANDS = [
    (20.0, "Deficient", 20, "Increase safe exposure by 20 mins."),
    (30.0, "Insufficient", 15, "Increase safe exposure by 15 mins."),
]
SUFFICIENT_UPPER = 50.0


def get_vitamin_d_status(value: Any) -> VitaminDStatus:
    """
    Classify a vitamin D lab value.

    Args:
        value: 25(OH)D level in ng/mL

    Returns:
        VitaminDStatus with status, adjustment minutes and message
    """
    level = to_finite_float(value)
    if level is None:
        logger.warning("Unreadable vitamin D value, no adjustment applied", extra={"vitamin_d": repr(value)})
        return VitaminDStatus(
            status="Unknown",
            adjustment=0,
            message="Vitamin D level could not be read. No adjustment applied.",
            value=None,
            in_range=False,
        )

    in_range = VITAMIN_D_MIN <= level <= VITAMIN_D_MAX
    if not in_range:
        logger.warning(
            "Vitamin D value outside lab domain, clamping",
            extra={"vitamin_d": level, "domain": [VITAMIN_D_MIN, VITAMIN_D_MAX]},
        )
        level = clamp(level, VITAMIN_D_MIN, VITAMIN_D_MAX)

    for upper, status, adjustment, message in VITAMIN_D_BANDS:
        if level < upper:
            return VitaminDStatus(status, adjustment, message, level, in_range)

    if level <= SUFFICIENT_UPPER:
        return VitaminDStatus("Sufficient", 0, "Maintain normal exposure.", level, in_range)
    return VitaminDStatus("Optimal", 0, "Levels are optimal. Maintain normal exposure.", level, in_range)


def validate_vitamin_d_value(value: Any) -> float:
    """Return the value as a float, or raise InvalidVitaminDValueError if it's outside 10-100 ng/mL."""
    level = to_finite_float(value)
    if level is None or not (VITAMIN_D_MIN <= level <= VITAMIN_D_MAX):
        raise InvalidVitaminDValueError(value, VITAMIN_D_MIN, VITAMIN_D_MAX)
    return level
