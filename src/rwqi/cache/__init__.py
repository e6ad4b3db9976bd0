"""Cache module for RWQI - in-memory TTL store."""

from .store import CacheStore, CacheEntry, DEFAULT_TTL_SECONDS

__all__ = [
    'CacheStore',
    'CacheEntry',
    'DEFAULT_TTL_SECONDS',
]
