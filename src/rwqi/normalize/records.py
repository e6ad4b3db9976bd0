"""
Record Normalization and Selection

Upstream catalogs publish water quality samples with inconsistent field
names and loosely formatted values ("7.2 mg/L", "<2", "NA"). This module
maps raw records onto a canonical sample shape and picks the most complete
sample from a batch.

Design Principles:
- Explicit field table (canonical field -> source names in priority order)
- Unparseable values become None, never zero
- Deterministic selection (ties go to the earliest record)
"""

import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# Canonical parameters that count towards completeness and scoring
CANONICAL_PARAMETERS: Tuple[str, ...] = ("DO", "BOD", "pH", "Coliforms")

# Canonical field -> acceptable upstream field names, first present wins
FIELD_MAP: Dict[str, Tuple[str, ...]] = {
    "DO": ("DO", "Dissolved Oxygen", "dissolved_oxygen"),
    "BOD": ("BOD", "Biochemical Oxygen Demand", "biochemical_oxygen_demand"),
    "pH": ("pH", "ph"),
    "Coliforms": ("total_coliform", "Total Coliform"),
    "timestamp": ("date", "timestamp"),
}

_NON_NUMERIC = re.compile(r"[^0-9.\-eE]")


class NormalizedSample(BaseModel):
    """Water quality sample in canonical form."""

    DO: Optional[float] = Field(None, description="Dissolved oxygen (mg/L)")
    BOD: Optional[float] = Field(None, description="Biochemical oxygen demand (mg/L)")
    pH: Optional[float] = Field(None, description="pH (standard units)")
    Coliforms: Optional[float] = Field(None, description="Total coliforms (MPN/100mL)")
    timestamp: Optional[str] = Field(None, description="Sample date as published upstream")

    def completeness(self) -> int:
        """Number of canonical parameters with a value."""
        return sum(1 for name in CANONICAL_PARAMETERS if getattr(self, name) is not None)


def try_num(value: Any) -> Optional[float]:
    """
    Coerce a loosely formatted value to a float.

    Strips everything except digits, sign, decimal point and exponent
    markers, then parses.

    Examples:
        >>> try_num("7.2 mg/L")
        7.2
        >>> try_num("1.5e3")
        1500.0
        >>> try_num("NA") is None
        True
    """
    if value is None:
        return None

    cleaned = _NON_NUMERIC.sub("", str(value))
    try:
        number = float(cleaned)
    except ValueError:
        return None

    return number if math.isfinite(number) else None


def _first_present(row: Mapping[str, Any], names: Iterable[str]) -> Any:
    for name in names:
        value = row.get(name)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def normalize_record(row: Mapping[str, Any]) -> NormalizedSample:
    """Map a raw upstream record onto the canonical sample shape."""
    values: Dict[str, Any] = {
        name: try_num(_first_present(row, FIELD_MAP[name]))
        for name in CANONICAL_PARAMETERS
    }

    timestamp = _first_present(row, FIELD_MAP["timestamp"])
    values["timestamp"] = str(timestamp) if timestamp is not None else None

    return NormalizedSample(**values)


def pick_best(records: List[Mapping[str, Any]]) -> Optional[NormalizedSample]:
    """
    Select the most complete sample from a batch of raw records.

    Completeness is the count of canonical parameters present. Only a
    strictly higher count replaces the current best, so ties go to the
    record seen first.

    Args:
        records: Raw upstream records

    Returns:
        Best normalized sample, or None for an empty batch
    """
    best: Optional[NormalizedSample] = None
    best_score = -1

    for row in records:
        if not isinstance(row, Mapping):
            logger.debug(f"Skipping non-mapping record: {row!r}")
            continue

        sample = normalize_record(row)
        score = sample.completeness()
        if score > best_score:
            best, best_score = sample, score

    if best is not None:
        logger.debug(f"Selected sample with {best_score}/{len(CANONICAL_PARAMETERS)} parameters")

    return best
