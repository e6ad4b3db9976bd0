"""Normalization module for RWQI - canonical sample mapping and selection."""

from .records import (
    CANONICAL_PARAMETERS,
    FIELD_MAP,
    NormalizedSample,
    try_num,
    normalize_record,
    pick_best,
)

__all__ = [
    'CANONICAL_PARAMETERS',
    'FIELD_MAP',
    'NormalizedSample',
    'try_num',
    'normalize_record',
    'pick_best',
]
