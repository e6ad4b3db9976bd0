"""
In-Memory Cache Store

Process-wide key/value store with per-entry expiry. Entries are created on
first computation for a river and dropped lazily when a read observes that
they have expired. There is no background sweep, no capacity bound and no
persistence across restarts.

The clock is injectable so expiry can be tested deterministically.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 600


@dataclass(frozen=True)
class CacheEntry:
    """Stored value and the instant (clock seconds) after which it is stale."""
    value: Any
    expires_at: float


class CacheStore:
    """TTL cache with lazy expiry on read."""

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            default_ttl: TTL in seconds applied when set() gets no explicit ttl
            clock: Monotonic time source in seconds
        """
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """
        Return the stored value, or None if absent or expired.

        An expired entry is removed as a side effect. An entry is still
        valid at exactly its expiry instant.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() > entry.expires_at:
            logger.debug(f"Cache entry expired: {key}")
            del self._entries[key]
            return None

        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store value under key, replacing any prior entry."""
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
