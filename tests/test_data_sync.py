"""
Tests for raw table retrieval and the catalog lifecycle around it.
"""
import random

import httpx
import pytest

from streamflow.services.catalog import CatalogService
from streamflow.services.data_sync import DataSyncService, RetrievalError
from streamflow.services.fallback import (
    ADVISORY_NETWORK_ERROR,
    ADVISORY_OFFLINE_BACKUP,
    FALLBACK_CHANNELS,
)

API = "https://api.test"


def mock_api(tables: dict, failing: set = frozenset(), status: int = 500):
    """Transport serving {name}.json from ``tables``; names in ``failing`` error out."""
    def handler(request: httpx.Request) -> httpx.Response:
        name = request.url.path.rsplit("/", 1)[-1].removesuffix(".json")
        if name in failing:
            return httpx.Response(status)
        if name not in tables:
            return httpx.Response(404)
        return httpx.Response(200, json=tables[name])
    return httpx.MockTransport(handler)


@pytest.fixture
def tables(sample_channels, sample_streams, sample_logos):
    return {"channels": sample_channels, "streams": sample_streams, "logos": sample_logos}


class TestDataSyncService:
    """All three tables or nothing."""

    @pytest.mark.asyncio
    async def test_fetch_all(self, tables):
        service = DataSyncService(base_url=API, transport=mock_api(tables))
        raw = await service.fetch_all()

        assert raw.channels == tables["channels"]
        assert raw.streams == tables["streams"]
        assert raw.logos == tables["logos"]

    @pytest.mark.asyncio
    async def test_single_endpoint(self, tables):
        service = DataSyncService(base_url=API + "/", transport=mock_api(tables))
        logos = await service.fetch_endpoint("logos")
        assert len(logos) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", ["channels", "streams", "logos"])
    async def test_any_failed_endpoint_fails_everything(self, tables, failing):
        service = DataSyncService(base_url=API, transport=mock_api(tables, {failing}))
        with pytest.raises(RetrievalError):
            await service.fetch_all()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = DataSyncService(base_url=API, transport=httpx.MockTransport(handler))
        with pytest.raises(RetrievalError):
            await service.fetch_all()

    @pytest.mark.asyncio
    async def test_non_list_payload(self, tables):
        tables["streams"] = {"error": "rate limited"}
        service = DataSyncService(base_url=API, transport=mock_api(tables))
        with pytest.raises(RetrievalError):
            await service.fetch_all()

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>not json</html>")

        service = DataSyncService(base_url=API, transport=httpx.MockTransport(handler))
        with pytest.raises(RetrievalError):
            await service.fetch_endpoint("channels")


class TestCatalogService:
    """Fallback policy and snapshot replacement."""

    @pytest.mark.asyncio
    async def test_load_builds_catalog(self, tables):
        service = CatalogService(
            DataSyncService(base_url=API, transport=mock_api(tables)),
            rng=random.Random(7),
        )
        snapshot = await service.load()

        assert snapshot.advisory is None
        assert not snapshot.is_fallback
        assert [ch.id for ch in snapshot.channels] == ["ESPN.us", "TSN.ca", "BBCOne.uk", "CNN.us"]
        assert service.channels == snapshot.channels
        # Fewer than five sports channels, so the featured pick draws from everything
        assert {ch.id for ch in snapshot.featured} == {ch.id for ch in snapshot.channels}

    @pytest.mark.asyncio
    async def test_retrieval_failure_uses_fallback(self, tables):
        service = CatalogService(DataSyncService(base_url=API, transport=mock_api(tables, {"streams"})))
        snapshot = await service.load()

        assert snapshot.is_fallback
        assert snapshot.advisory == ADVISORY_NETWORK_ERROR
        assert snapshot.channels == FALLBACK_CHANNELS
        assert snapshot.featured == FALLBACK_CHANNELS

    @pytest.mark.asyncio
    async def test_empty_catalog_uses_fallback(self, tables):
        tables["streams"] = []
        service = CatalogService(DataSyncService(base_url=API, transport=mock_api(tables)))
        snapshot = await service.load()

        assert snapshot.is_fallback
        assert snapshot.advisory == ADVISORY_OFFLINE_BACKUP
        assert [ch.id for ch in snapshot.channels] == ["nasa"]

    @pytest.mark.asyncio
    async def test_reload_replaces_snapshot(self, tables):
        sync = DataSyncService(base_url=API, transport=mock_api(tables, {"logos"}))
        service = CatalogService(sync)
        first = await service.load()
        assert first.is_fallback

        sync._transport = mock_api(tables)
        second = await service.reload()

        assert not second.is_fallback
        assert service.snapshot is second
        assert first.channels == FALLBACK_CHANNELS
