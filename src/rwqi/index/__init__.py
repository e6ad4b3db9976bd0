"""Water quality index module for RWQI - response curves and composite scoring."""

from .calculator import (
    Category,
    RWQIScore,
    WaterQualityParameter,
    PARAMETERS,
    CATEGORY_THRESHOLDS,
    classify_category,
    compute_subindex,
    compute_rwqi,
    round_half_up,
)

__all__ = [
    'Category',
    'RWQIScore',
    'WaterQualityParameter',
    'PARAMETERS',
    'CATEGORY_THRESHOLDS',
    'classify_category',
    'compute_subindex',
    'compute_rwqi',
    'round_half_up',
]
