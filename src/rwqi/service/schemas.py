"""
RWQI Result Schema

Pydantic model for the lookup outcome returned to API clients.
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

from rwqi.normalize import NormalizedSample

ResultStatus = Literal["ok", "coming_soon", "error"]


class RWQIResult(BaseModel):
    """
    Outcome of a river lookup.

    "coming_soon" results carry only river and status; serialize with
    exclude_unset=True so absent fields stay absent while an explicit
    null rwqi on an "ok" result is kept.
    """

    river: str = Field(..., description="River display name")
    status: ResultStatus = Field(..., description="ok, coming_soon or error")
    rwqi: Optional[float] = Field(None, description="Composite index (0-100)")
    category: Optional[str] = Field(None, description="Excellent/Good/Moderate/Poor/Bad")
    subindices: Optional[Dict[str, float]] = Field(None, description="Per-parameter sub-indices")
    parameters: Optional[NormalizedSample] = Field(None, description="Sample the score was computed from")

    model_config = {"frozen": True}

    def to_response(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True)
