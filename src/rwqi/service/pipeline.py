"""
RWQI Lookup Pipeline

Sequences a single river lookup:

    query -> resolve river -> cache lookup -> [miss] tiered fetch
          -> select best sample -> compute index -> cache write -> result

Both "ok" and "coming_soon" outcomes are cached under the same TTL, keyed
by the resolved river id. Errors are raised and never cached.

Concurrent lookups for the same uncached river are not de-duplicated; each
runs the full retrieval chain.
"""

import logging
from typing import Optional

from rwqi.cache import CacheStore
from rwqi.config import Settings, WQConfig
from rwqi.datagov import DataGovClient, RecordFetcher
from rwqi.index import compute_rwqi
from rwqi.normalize import pick_best
from rwqi.rivers import River, RiverDirectory

from .errors import RiverNotFoundError, ValidationError
from .schemas import RWQIResult

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "rwqi::"


def cache_key(river: River) -> str:
    return f"{CACHE_KEY_PREFIX}{river.key}"


class RWQIService:
    """Resolves rivers and computes (or recalls) their water quality index."""

    def __init__(
        self,
        directory: RiverDirectory,
        fetcher: RecordFetcher,
        cache: CacheStore,
        wq_config: WQConfig,
    ):
        self.directory = directory
        self.fetcher = fetcher
        self.cache = cache
        self.wq_config = wq_config

    @classmethod
    def from_settings(cls, settings: Settings, cache: Optional[CacheStore] = None) -> "RWQIService":
        """Wire up the production pipeline from settings."""
        client = DataGovClient(
            api_key=settings.datagov_api_key,
            base_url=settings.datagov_base_url,
            timeout=settings.http_timeout_seconds,
        )
        return cls(
            directory=RiverDirectory(settings.rivers_file),
            fetcher=RecordFetcher(client, global_dataset_ids=settings.datagov_dataset_ids),
            cache=cache if cache is not None else CacheStore(default_ttl=settings.cache_ttl_seconds),
            wq_config=settings.wq_config,
        )

    async def aclose(self) -> None:
        await self.fetcher.client.aclose()

    async def lookup(self, query: Optional[str]) -> RWQIResult:
        """
        Compute the water quality index for a river name.

        Args:
            query: Free-text river name

        Returns:
            RWQIResult with status "ok" or "coming_soon"

        Raises:
            ValidationError: If the query is missing or blank
            RiverNotFoundError: If no registered river matches
        """
        q = (query or "").strip()
        if not q:
            raise ValidationError("river query required")

        river = self.directory.resolve(q)
        if river is None:
            raise RiverNotFoundError("unknown river")

        key = cache_key(river)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        logger.info(f"Cache miss for {key}, fetching upstream records")
        result = await self._compute(river)
        self.cache.set(key, result)
        return result

    async def _compute(self, river: River) -> RWQIResult:
        records = await self.fetcher.fetch_records(river)
        sample = pick_best(records) if records else None

        if sample is None:
            logger.info(f"No data available for {river.id}")
            return RWQIResult(river=river.name, status="coming_soon")

        score = compute_rwqi(sample, self.wq_config)
        logger.info(f"RWQI for {river.id}: {score.rwqi} ({score.category})")

        return RWQIResult(
            river=river.name,
            status="ok",
            rwqi=score.rwqi,
            category=score.category,
            subindices=score.subindices,
            parameters=sample,
        )
