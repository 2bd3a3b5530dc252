"""
Data retrieval service.
Fetches the channels, streams and logos tables from the iptv-org API.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from streamflow.config import get_settings

logger = logging.getLogger(__name__)


class RetrievalError(Exception):
    """The raw tables could not be retrieved as a complete set."""


@dataclass(frozen=True)
class RawDataset:
    """The three raw tables, always retrieved together."""
    channels: list[dict] = field(default_factory=list)
    streams: list[dict] = field(default_factory=list)
    logos: list[dict] = field(default_factory=list)


class DataSyncService:
    """Service to fetch the raw tables from iptv-org API endpoints."""

    ENDPOINTS = {
        "channels": "/channels.json",
        "streams": "/streams.json",
        "logos": "/logos.json",
    }

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = get_settings()
        self.base_url = (base_url or self.settings.iptv_api_base).rstrip("/")
        self.timeout = timeout or self.settings.fetch_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def fetch_endpoint(self, name: str, client: Optional[httpx.AsyncClient] = None) -> list:
        """Fetch one table. Raises RetrievalError on any failure."""
        url = f"{self.base_url}{self.ENDPOINTS[name]}"
        logger.info(f"Fetching data from {url}")

        if client is None:
            async with self._client() as owned:
                return await self._get_json_list(owned, url, name)
        return await self._get_json_list(client, url, name)

    async def _get_json_list(self, client: httpx.AsyncClient, url: str, name: str) -> list:
        try:
            response = await client.get(url)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch {name}: {e}")
            raise RetrievalError(f"Failed to fetch {name}: {e}") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from {name}: {e}")
            raise RetrievalError(f"Invalid JSON from {name}") from e

        if not isinstance(data, list):
            logger.error(f"Unexpected payload from {name}: {type(data).__name__}")
            raise RetrievalError(f"Expected a list from {name}, got {type(data).__name__}")

        logger.info(f"Fetched {len(data)} items from {name}")
        return data

    async def fetch_all(self) -> RawDataset:
        """
        Fetch all three tables concurrently.

        The join needs every table, so one failing endpoint fails the whole
        retrieval.
        """
        async with self._client() as client:
            results = await asyncio.gather(
                self.fetch_endpoint("channels", client),
                self.fetch_endpoint("streams", client),
                self.fetch_endpoint("logos", client),
                return_exceptions=True,
            )

        for result in results:
            if isinstance(result, RetrievalError):
                raise result
            if isinstance(result, Exception):
                raise RetrievalError(f"Retrieval failed: {result}") from result
            if isinstance(result, BaseException):
                raise result

        channels, streams, logos = results
        return RawDataset(channels=channels, streams=streams, logos=logos)


# Singleton
_sync_service: Optional[DataSyncService] = None


def get_sync_service() -> DataSyncService:
    """Get or create sync service singleton."""
    global _sync_service
    if _sync_service is None:
        _sync_service = DataSyncService()
    return _sync_service
