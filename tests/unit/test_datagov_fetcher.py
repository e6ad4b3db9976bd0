"""
Unit tests for the data.gov.in client and tiered record retrieval

The datastore is faked with httpx.MockTransport; no network access.

Tests verify:
1. Request parameters (resource id, filters, limit, api key)
2. Failures (HTTP errors, bad JSON, timeouts) become "no records"
3. Tier ordering and short-circuiting
"""

import asyncio
import sys
from pathlib import Path

import httpx
import pytest

# Add src to path
src_path = Path(__file__).parent.parent.parent / 'src'
sys.path.insert(0, str(src_path))

from rwqi.datagov import (
    CatalogSearchStrategy,
    DataGovClient,
    GlobalDatasetStrategy,
    RecordFetcher,
    RiverDatasetStrategy,
    extract_records,
)
from rwqi.rivers import River


class FakeDatastore:
    """Routes datastore requests to canned responses and records calls."""

    def __init__(self, resources=None, catalog=None):
        self.resources = resources or {}
        self.catalog = catalog or {}
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        params = dict(request.url.params)
        self.calls.append(params)

        if "resource_id" in params:
            resource = self.resources.get(params["resource_id"])
            if isinstance(resource, httpx.Response):
                return resource
            if resource is None:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json={"records": resource})

        for field in ("river_name", "station_name"):
            value = params.get(f"filters[{field}]")
            if value is not None:
                return httpx.Response(200, json={"records": self.catalog.get((field, value), [])})

        return httpx.Response(400)


def make_client(handler, api_key="", timeout=5.0):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DataGovClient(api_key=api_key, timeout=timeout, http_client=http)


@pytest.fixture
def river():
    return River(id="ganga", name="Ganga", dataset_ids=["r1", "r2"])


class TestExtractRecords:
    """Test record list extraction from response bodies."""

    def test_records_key(self):
        assert extract_records({"records": [{"a": 1}]}) == [{"a": 1}]

    def test_data_key(self):
        assert extract_records({"data": [{"a": 1}]}) == [{"a": 1}]

    def test_records_preferred(self):
        assert extract_records({"records": [{"a": 1}], "data": [{"b": 2}]}) == [{"a": 1}]

    def test_unexpected_shapes(self):
        assert extract_records(None) is None
        assert extract_records([]) is None
        assert extract_records({"records": "nope"}) is None
        assert extract_records({"total": 0}) is None


class TestDataGovClient:
    """Test individual datastore calls."""

    def test_resource_request_params(self):
        store = FakeDatastore(resources={"r1": [{"DO": "6"}]})
        client = make_client(store, api_key="secret")

        records = asyncio.run(client.fetch_by_resource("r1"))

        assert records == [{"DO": "6"}]
        assert store.calls == [{"resource_id": "r1", "limit": "500", "api-key": "secret"}]

    def test_no_api_key_param_when_unset(self):
        store = FakeDatastore(resources={"r1": []})
        asyncio.run(make_client(store).fetch_by_resource("r1"))
        assert "api-key" not in store.calls[0]

    def test_empty_resource_id_skips_call(self):
        store = FakeDatastore()
        assert asyncio.run(make_client(store).fetch_by_resource("")) is None
        assert store.calls == []

    def test_catalog_request_params(self):
        store = FakeDatastore(catalog={("station_name", "Ganga"): [{"pH": "7"}]})
        records = asyncio.run(make_client(store).search_catalog("station_name", "Ganga"))

        assert records == [{"pH": "7"}]
        assert store.calls == [{"filters[station_name]": "Ganga", "limit": "200"}]

    def test_http_error_is_none(self):
        store = FakeDatastore(resources={"r1": httpx.Response(503)})
        assert asyncio.run(make_client(store).fetch_by_resource("r1")) is None

    def test_invalid_json_is_none(self):
        store = FakeDatastore(resources={"r1": httpx.Response(200, content=b"<html>")})
        assert asyncio.run(make_client(store).fetch_by_resource("r1")) is None

    def test_network_error_is_none(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        assert asyncio.run(make_client(handler).fetch_by_resource("r1")) is None

    def test_timeout_is_none(self):
        async def handler(request):
            await asyncio.sleep(1)
            return httpx.Response(200, json={"records": [{"DO": "6"}]})

        client = make_client(handler, timeout=0.05)
        assert asyncio.run(client.fetch_by_resource("r1")) is None

    def test_invalid_url_is_none(self):
        def handler(request):
            raise httpx.InvalidURL("Invalid URL")

        assert asyncio.run(make_client(handler).fetch_by_resource("r1")) is None

    def test_closed_client_is_none(self):
        store = FakeDatastore(resources={"r1": [{"DO": "6"}]})
        client = make_client(store)

        async def fetch_after_close():
            await client.http.aclose()
            return await client.fetch_by_resource("r1")

        assert asyncio.run(fetch_after_close()) is None
        assert store.calls == []

    def test_failed_call_lets_chain_continue(self):
        def handler(request):
            if request.url.params.get("resource_id") == "bad":
                raise httpx.InvalidURL("Invalid URL")
            return httpx.Response(200, json={"records": [{"pH": "7"}]})

        river = River(id="ganga", name="Ganga", dataset_ids=["bad", "good"])
        records = asyncio.run(RecordFetcher(make_client(handler)).fetch_records(river))
        assert records == [{"pH": "7"}]


class TestRecordFetcher:
    """Test the tiered fallback chain."""

    def test_default_chain_without_global_ids(self):
        fetcher = RecordFetcher(make_client(FakeDatastore()))
        assert [s.name for s in fetcher.strategies] == ["river_datasets", "catalog_search"]

    def test_default_chain_with_global_ids(self):
        fetcher = RecordFetcher(make_client(FakeDatastore()), global_dataset_ids=["g1"])
        assert [s.name for s in fetcher.strategies] == [
            "river_datasets", "global_datasets", "catalog_search",
        ]

    def test_first_river_dataset_with_records_wins(self, river):
        store = FakeDatastore(resources={"r1": [], "r2": [{"DO": "5"}]})
        fetcher = RecordFetcher(make_client(store), global_dataset_ids=["g1"])

        records = asyncio.run(fetcher.fetch_records(river))

        assert records == [{"DO": "5"}]
        assert [c["resource_id"] for c in store.calls] == ["r1", "r2"]

    def test_failed_dataset_continues_chain(self, river):
        store = FakeDatastore(resources={"r1": httpx.Response(500), "r2": [{"DO": "5"}]})
        records = asyncio.run(RecordFetcher(make_client(store)).fetch_records(river))
        assert records == [{"DO": "5"}]

    def test_global_ids_after_river_ids(self, river):
        store = FakeDatastore(resources={"r1": [], "r2": [], "g1": [], "g2": [{"BOD": "3"}], "g3": [{"x": 1}]})
        fetcher = RecordFetcher(make_client(store), global_dataset_ids=["g1", "g2", "g3"])

        records = asyncio.run(fetcher.fetch_records(river))

        assert records == [{"BOD": "3"}]
        assert [c["resource_id"] for c in store.calls] == ["r1", "r2", "g1", "g2"]

    def test_catalog_search_river_name_then_station_name(self, river):
        store = FakeDatastore(catalog={("station_name", "Ganga"): [{"pH": "7.2"}]})
        records = asyncio.run(RecordFetcher(make_client(store)).fetch_records(river))

        assert records == [{"pH": "7.2"}]
        assert store.calls[-2] == {"filters[river_name]": "Ganga", "limit": "200"}
        assert store.calls[-1] == {"filters[station_name]": "Ganga", "limit": "200"}

    def test_catalog_search_stops_at_river_name(self, river):
        store = FakeDatastore(catalog={
            ("river_name", "Ganga"): [{"pH": "7.0"}],
            ("station_name", "Ganga"): [{"pH": "8.0"}],
        })
        records = asyncio.run(RecordFetcher(make_client(store)).fetch_records(river))

        assert records == [{"pH": "7.0"}]
        assert not any("filters[station_name]" in c for c in store.calls)

    def test_all_tiers_exhausted(self, river):
        store = FakeDatastore()
        fetcher = RecordFetcher(make_client(store), global_dataset_ids=["g1"])

        assert asyncio.run(fetcher.fetch_records(river)) is None
        # r1, r2, g1, river_name, station_name: each attempted exactly once
        assert len(store.calls) == 5

    def test_river_without_dataset_ids_goes_to_catalog(self):
        store = FakeDatastore(catalog={("river_name", "Krishna"): [{"DO": "7"}]})
        river = River(id="krishna", name="Krishna")

        records = asyncio.run(RecordFetcher(make_client(store)).fetch_records(river))

        assert records == [{"DO": "7"}]
        assert len(store.calls) == 1

    def test_custom_strategies(self, river):
        store = FakeDatastore(resources={"g1": [{"DO": "1"}]})
        fetcher = RecordFetcher(
            make_client(store),
            strategies=[GlobalDatasetStrategy(["g1"]), RiverDatasetStrategy(), CatalogSearchStrategy()],
        )
        assert asyncio.run(fetcher.fetch_records(river)) == [{"DO": "1"}]
        assert len(store.calls) == 1
