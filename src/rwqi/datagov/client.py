"""
data.gov.in Datastore Client

Async client for the Open Government Data (OGD) platform datastore search
endpoint, which serves CPCB water quality monitoring records.

Two kinds of lookups are supported:
- Record search by resource id (a specific published dataset)
- Keyword search by river name or station name filter

Every call is bounded by a hard timeout. Failures of any kind (timeout,
network error, non-2xx status, unparseable body) are logged and reported
as None so callers can move on to the next lookup.

API Documentation: https://data.gov.in/apis
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

# Top-level keys the datastore has used for the record list
RECORD_KEYS = ("records", "data")

Record = Dict[str, Any]


class DataGovClient:
    """Client for the data.gov.in datastore search API."""

    BASE_URL = "https://data.gov.in/api/datastore/resource/search.json"
    TIMEOUT = 15  # seconds
    RESOURCE_LIMIT = 500
    CATALOG_LIMIT = 200

    def __init__(
        self,
        api_key: str = "",
        base_url: str = BASE_URL,
        timeout: float = TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the datastore client.

        Args:
            api_key: OGD API key, sent as `api-key` when non-empty
            base_url: Datastore search endpoint
            timeout: Upper bound on each call in seconds
            http_client: Shared AsyncClient (one is created if omitted)
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._owns_client = http_client is None
        self.http = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()

    def _params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        if self.api_key:
            params["api-key"] = self.api_key
        return params

    async def _get_json(self, params: Dict[str, Any]) -> Optional[Any]:
        """GET the search endpoint and decode JSON, or None on any failure."""
        try:
            response = await asyncio.wait_for(
                self.http.get(
                    self.base_url,
                    params=params,
                    headers={"Accept": "application/json"},
                ),
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()

        except asyncio.TimeoutError:
            logger.warning(f"Datastore request timed out after {self.timeout}s: {_describe(params)}")
            return None
        except httpx.HTTPStatusError as e:
            logger.warning(f"Datastore returned HTTP {e.response.status_code}: {_describe(params)}")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"Datastore request failed: {_describe(params)}: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Datastore returned invalid JSON: {_describe(params)}: {e}")
            return None
        except httpx.InvalidURL as e:
            logger.warning(f"Invalid datastore URL {self.base_url!r}: {e}")
            return None
        except RuntimeError as e:
            # Raised by a client that has already been closed
            logger.warning(f"Datastore client unavailable: {_describe(params)}: {e}")
            return None

    async def fetch_by_resource(self, resource_id: str) -> Optional[List[Record]]:
        """
        Fetch records for a published resource.

        Args:
            resource_id: Datastore resource (dataset) id

        Returns:
            Record list (possibly empty), or None if the call failed
        """
        if not resource_id:
            return None

        logger.debug(f"Fetching datastore resource {resource_id}")
        data = await self._get_json(self._params({
            "resource_id": resource_id,
            "limit": self.RESOURCE_LIMIT,
        }))
        return extract_records(data)

    async def search_catalog(self, field: str, value: str) -> Optional[List[Record]]:
        """
        Keyword search filtered on a single field.

        Args:
            field: Filter field (e.g. 'river_name', 'station_name')
            value: Value to match

        Returns:
            Record list (possibly empty), or None if the call failed
        """
        logger.debug(f"Searching datastore for {field}={value!r}")
        data = await self._get_json(self._params({
            f"filters[{field}]": value,
            "limit": self.CATALOG_LIMIT,
        }))
        return extract_records(data)


def extract_records(data: Any) -> Optional[List[Record]]:
    """Pull the record list out of a datastore response body."""
    if not isinstance(data, dict):
        return None

    for key in RECORD_KEYS:
        records = data.get(key)
        if isinstance(records, list):
            return records

    return None


def _describe(params: Dict[str, Any]) -> str:
    # Keep the API key out of logs
    return ", ".join(f"{k}={v}" for k, v in params.items() if k != "api-key")
