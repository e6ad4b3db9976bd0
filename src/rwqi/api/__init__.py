"""RWQI API module - FastAPI application and schemas."""

from .main import create_app, router
from .schemas import ErrorResponse, HealthResponse

__all__ = [
    'create_app',
    'router',
    'ErrorResponse',
    'HealthResponse',
]
