"""
API Response Schemas

Pydantic models for the auxiliary API responses. Lookup results use
rwqi.service.RWQIResult directly.
"""

from typing import Literal

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body for 4xx/5xx responses."""
    status: Literal["error"] = "error"
    message: str = Field(..., min_length=1, description="What went wrong")


class HealthResponse(BaseModel):
    """Service health and configuration summary."""
    status: Literal["healthy"] = "healthy"
    version: str
    rivers: int = Field(..., description="Rivers currently in the registry")
    cache_entries: int = Field(..., description="Entries held in the result cache")
    cache_ttl_seconds: float
    freshness_seconds: int = Field(..., description="Advisory staleness bound (not enforced)")
