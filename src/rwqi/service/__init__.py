"""RWQI service module - lookup pipeline, result schema and errors."""

from .errors import RWQIError, ValidationError, RiverNotFoundError
from .schemas import RWQIResult
from .pipeline import RWQIService, cache_key

__all__ = [
    'RWQIError',
    'ValidationError',
    'RiverNotFoundError',
    'RWQIResult',
    'RWQIService',
    'cache_key',
]
