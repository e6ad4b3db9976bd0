"""
Tiered Record Retrieval

Finds raw water quality records for a river by trying an ordered list of
retrieval strategies until one yields a non-empty record list:

1. The river's own dataset ids (registry order)
2. Globally configured fallback dataset ids
3. Catalog keyword search on the river name (as river_name, then station_name)

Strategies run strictly one after another. A failed call never aborts the
chain; it just counts as "no records" for that call.
"""

import logging
from typing import List, Optional, Protocol, Sequence

from rwqi.rivers import River

from .client import DataGovClient, Record

logger = logging.getLogger(__name__)


class RetrievalStrategy(Protocol):
    """One tier of the fallback chain."""

    name: str

    async def fetch(self, client: DataGovClient, river: River) -> Optional[List[Record]]:
        ...


class RiverDatasetStrategy:
    """Per-river dataset ids from the registry."""

    name = "river_datasets"

    async def fetch(self, client: DataGovClient, river: River) -> Optional[List[Record]]:
        return await _first_resource_with_records(client, river.dataset_ids)


class GlobalDatasetStrategy:
    """Dataset ids configured for every river."""

    name = "global_datasets"

    def __init__(self, dataset_ids: Sequence[str]):
        self.dataset_ids = list(dataset_ids)

    async def fetch(self, client: DataGovClient, river: River) -> Optional[List[Record]]:
        return await _first_resource_with_records(client, self.dataset_ids)


class CatalogSearchStrategy:
    """Keyword search on the river's display name."""

    name = "catalog_search"
    FILTER_FIELDS = ("river_name", "station_name")

    async def fetch(self, client: DataGovClient, river: River) -> Optional[List[Record]]:
        for field in self.FILTER_FIELDS:
            records = await client.search_catalog(field, river.name)
            if records:
                return records
        return None


async def _first_resource_with_records(
    client: DataGovClient,
    resource_ids: Sequence[str],
) -> Optional[List[Record]]:
    for resource_id in resource_ids:
        records = await client.fetch_by_resource(resource_id)
        if records:
            logger.info(f"Resource {resource_id} returned {len(records)} records")
            return records
    return None


class RecordFetcher:
    """Runs the retrieval strategies in order for a river."""

    def __init__(
        self,
        client: DataGovClient,
        global_dataset_ids: Sequence[str] = (),
        strategies: Optional[Sequence[RetrievalStrategy]] = None,
    ):
        """
        Args:
            client: Datastore client
            global_dataset_ids: Fallback dataset ids tried for every river
            strategies: Override the default chain (mainly for tests)
        """
        self.client = client
        if strategies is None:
            strategies = [RiverDatasetStrategy()]
            if global_dataset_ids:
                strategies.append(GlobalDatasetStrategy(global_dataset_ids))
            strategies.append(CatalogSearchStrategy())
        self.strategies = list(strategies)

    async def fetch_records(self, river: River) -> Optional[List[Record]]:
        """
        Return the first non-empty record list, or None if every tier is empty.
        """
        for strategy in self.strategies:
            records = await strategy.fetch(self.client, river)
            if records:
                logger.info(
                    f"Found {len(records)} records for {river.id} via {strategy.name}"
                )
                return records
            logger.info(f"No records for {river.id} via {strategy.name}")

        logger.warning(f"All retrieval strategies exhausted for {river.id}")
        return None
