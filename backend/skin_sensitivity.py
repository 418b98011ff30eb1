"""
Skin Sensitivity Model

Fitzpatrick skin phototype lookups used by the exposure engine:
- Safe-time multiplier (darker skin tolerates proportionally longer exposure)
- Exposure-score skin factor and daily safe dose limit
- Human-readable descriptions

Unknown or out-of-range types fall back to the Type III baseline rather than
raising. Callers validate user input upstream.
"""

import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class FitzpatrickType(Enum):
    """Fitzpatrick Skin Phototypes"""
    TYPE_I = 1    # Very fair, always burns, never tans
    TYPE_II = 2   # Fair, usually burns, tans minimally
    TYPE_III = 3  # Medium, sometimes burns, tans gradually
    TYPE_IV = 4   # Olive, rarely burns, tans easily
    TYPE_V = 5    # Brown, very rarely burns, tans darkly
    TYPE_VI = 6   # Dark brown/black, never burns


BASELINE_SKIN_TYPE = FitzpatrickType.TYPE_III

# Safe-time multipliers, monotonically increasing with pigmentation
SKIN_MULTIPLIERS = {
    FitzpatrickType.TYPE_I: 0.5,
    FitzpatrickType.TYPE_II: 0.7,
    FitzpatrickType.TYPE_III: 1.0,
    FitzpatrickType.TYPE_IV: 1.5,
    FitzpatrickType.TYPE_V: 2.0,
    FitzpatrickType.TYPE_VI: 2.5,
}

# Erythemal weighting of a session dose, decreasing with pigmentation
EXPOSURE_SKIN_FACTORS = {
    FitzpatrickType.TYPE_I: 1.4,
    FitzpatrickType.TYPE_II: 1.2,
    FitzpatrickType.TYPE_III: 1.0,
    FitzpatrickType.TYPE_IV: 0.8,
    FitzpatrickType.TYPE_V: 0.6,
    FitzpatrickType.TYPE_VI: 0.5,
}

# Raw exposure (UV-minutes) that counts as a full day's dose
SAFE_DOSE_LIMITS = {
    FitzpatrickType.TYPE_I: 80,
    FitzpatrickType.TYPE_II: 100,
    FitzpatrickType.TYPE_III: 120,
    FitzpatrickType.TYPE_IV: 150,
    FitzpatrickType.TYPE_V: 180,
    FitzpatrickType.TYPE_VI: 220,
}

SKIN_TYPE_LABELS = {
    FitzpatrickType.TYPE_I: "Type I - Very Fair",
    FitzpatrickType.TYPE_II: "Type II - Fair",
    FitzpatrickType.TYPE_III: "Type III - Medium",
    FitzpatrickType.TYPE_IV: "Type IV - Olive",
    FitzpatrickType.TYPE_V: "Type V - Brown",
    FitzpatrickType.TYPE_VI: "Type VI - Dark Brown/Black",
}

SKIN_TYPE_TRAITS = {
    FitzpatrickType.TYPE_I: "Always burns, never tans",
    FitzpatrickType.TYPE_II: "Usually burns, tans minimally",
    FitzpatrickType.TYPE_III: "Sometimes burns, tans gradually",
    FitzpatrickType.TYPE_IV: "Rarely burns, tans easily",
    FitzpatrickType.TYPE_V: "Very rarely burns, tans darkly",
    FitzpatrickType.TYPE_VI: "Never burns, deeply pigmented",
}


@dataclass(frozen=True)
class SkinProfile:
    """Display-ready summary of a skin type."""
    skin_type: Any
    label: str
    multiplier: float
    description: str
    is_known: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_skin_type(skin_type: Any) -> Optional[FitzpatrickType]:
    """Resolve an integer-like skin type to a FitzpatrickType, or None if unknown."""
    if isinstance(skin_type, FitzpatrickType):
        return skin_type
    if isinstance(skin_type, bool):
        return None
    try:
        number = float(skin_type)
    except (TypeError, ValueError, OverflowError):
        return None
    if not number.is_integer():
        return None
    try:
        return FitzpatrickType(int(number))
    except ValueError:
        return None


def _lookup(table: Dict[FitzpatrickType, Any], skin_type: Any, default: Any) -> Any:
    resolved = parse_skin_type(skin_type)
    if resolved is None:
        logger.warning("Unknown skin type, using Type III baseline", extra={"skin_type": repr(skin_type)})
        return default
    return table[resolved]


def get_skin_multiplier(skin_type: Any) -> float:
    """Safe-time multiplier for a Fitzpatrick type (1.0 for unknown types)."""
    return _lookup(SKIN_MULTIPLIERS, skin_type, SKIN_MULTIPLIERS[BASELINE_SKIN_TYPE])


def get_exposure_skin_factor(skin_type: Any) -> float:
    return _lookup(EXPOSURE_SKIN_FACTORS, skin_type, EXPOSURE_SKIN_FACTORS[BASELINE_SKIN_TYPE])


def get_safe_dose_limit(skin_type: Any) -> int:
    return _lookup(SAFE_DOSE_LIMITS, skin_type, SAFE_DOSE_LIMITS[BASELINE_SKIN_TYPE])


def get_skin_type_description(skin_type: Any) -> str:
    """
    Describe a skin type, e.g. "Type I - Very Fair (Always burns, never tans)".

    Returns "Unknown" for anything outside types 1-6.
    """
    resolved = parse_skin_type(skin_type)
    if resolved is None:
        return "Unknown"
    return f"{SKIN_TYPE_LABELS[resolved]} ({SKIN_TYPE_TRAITS[resolved]})"


def get_skin_profile(skin_type: Any) -> SkinProfile:
    resolved = parse_skin_type(skin_type)
    return SkinProfile(
        skin_type=resolved.value if resolved else skin_type,
        label=SKIN_TYPE_LABELS[resolved] if resolved else "Unknown",
        multiplier=get_skin_multiplier(skin_type),
        description=get_skin_type_description(skin_type),
        is_known=resolved is not None,
    )
