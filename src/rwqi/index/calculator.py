"""
River Water Quality Index (RWQI) Calculator

Computes a composite 0-100 water quality score from a normalized sample.

Each parameter has its own response curve mapping a measured value to a
0-100 sub-index:
- DO: proportional to dissolved oxygen, saturating at the "excellent" level
- BOD: linear decline, reaching 0 at twice the "moderate" level
- pH: 100 inside the acceptable band, otherwise falls off around 7.5
- Coliforms: logarithmic decline with bacterial count

The composite is the weighted mean of the sub-indices that could be
computed, so missing parameters neither help nor hurt the score.

Design Principles:
- Config-driven thresholds and weights
- Deterministic and reproducible
- Auditable (sub-index breakdown returned with every score)
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from rwqi.config import Thresholds, WQConfig
from rwqi.normalize import NormalizedSample

# Type aliases
Category = Literal["Excellent", "Good", "Moderate", "Poor", "Bad"]

# Score floor for each category, checked highest first
CATEGORY_THRESHOLDS: Tuple[Tuple[float, Category], ...] = (
    (90.0, "Excellent"),
    (75.0, "Good"),
    (50.0, "Moderate"),
    (25.0, "Poor"),
)


class RWQIScore(BaseModel):
    """Composite index with its sub-index breakdown."""

    rwqi: Optional[float] = Field(None, ge=0.0, le=100.0, description="Composite score (0-100)")
    category: Optional[Category] = Field(None, description="Qualitative class")
    subindices: Dict[str, float] = Field(default_factory=dict, description="Per-parameter sub-indices")


def round_half_up(value: float, digits: int = 1) -> float:
    """Round to a number of decimals with halves going up (2.25 -> 2.3)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def do_curve(value: float, thresholds: Thresholds) -> float:
    return _clamp(value / thresholds.DO.excellent * 100)


def bod_curve(value: float, thresholds: Thresholds) -> float:
    return _clamp(100 * (1 - value / (2 * thresholds.BOD.moderate)))


def ph_curve(value: float, thresholds: Thresholds) -> float:
    if thresholds.pH.min <= value <= thresholds.pH.max:
        return 100.0
    return _clamp(100 - abs(value - 7.5) * 20)


def coliform_curve(value: float, thresholds: Thresholds) -> float:
    # Counts can't be negative; treat garbage below zero as a clean sample
    return _clamp(100 - math.log10(max(value, 0.0) + 1) * 20)


@dataclass(frozen=True)
class WaterQualityParameter:
    """A scored parameter and its response curve."""
    name: str
    curve: Callable[[float, Thresholds], float]

    def subindex(self, value: Optional[float], thresholds: Thresholds) -> Optional[float]:
        if value is None:
            return None
        return self.curve(value, thresholds)


PARAMETERS: Tuple[WaterQualityParameter, ...] = (
    WaterQualityParameter("DO", do_curve),
    WaterQualityParameter("BOD", bod_curve),
    WaterQualityParameter("pH", ph_curve),
    WaterQualityParameter("Coliforms", coliform_curve),
)


def classify_category(score: float) -> Category:
    """
    Map a composite score to a qualitative category.

    Examples:
        >>> classify_category(90.0)
        'Excellent'
        >>> classify_category(75.0)
        'Good'
        >>> classify_category(10.0)
        'Bad'
    """
    for floor, category in CATEGORY_THRESHOLDS:
        if score >= floor:
            return category
    return "Bad"


def compute_subindex(parameter: str, value: Optional[float], config: WQConfig) -> Optional[float]:
    """
    Sub-index for a single parameter by name.

    Raises:
        KeyError: If the parameter has no response curve
    """
    curves = {p.name: p for p in PARAMETERS}
    return curves[parameter].subindex(value, config.thresholds)


def compute_rwqi(sample: NormalizedSample, config: WQConfig) -> RWQIScore:
    """
    Compute the composite water quality index for a sample.

    Algorithm:
    1. Compute sub-indices for each parameter present in the sample
    2. Weighted mean of those sub-indices (weights from config)
    3. Round to one decimal and classify

    Reported sub-indices are rounded independently; the composite uses the
    unrounded values.

    Args:
        sample: Normalized sample
        config: Weights and thresholds

    Returns:
        RWQIScore. rwqi and category are None when no parameter contributes.

    Examples:
        >>> score = compute_rwqi(NormalizedSample(pH=7.0), WQConfig())
        >>> score.rwqi, score.category
        (100.0, 'Excellent')
    """
    subindices: Dict[str, float] = {}
    numerator = 0.0
    denominator = 0.0

    for parameter in PARAMETERS:
        si = parameter.subindex(getattr(sample, parameter.name), config.thresholds)
        if si is None:
            continue

        weight = config.weight(parameter.name)
        subindices[parameter.name] = round_half_up(si)
        numerator += si * weight
        denominator += weight

    if denominator == 0:
        return RWQIScore(rwqi=None, category=None, subindices=subindices)

    score = round_half_up(numerator / denominator)
    return RWQIScore(rwqi=score, category=classify_category(score), subindices=subindices)
