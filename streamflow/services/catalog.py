"""
Catalog lifecycle.
Retrieves the raw tables, builds the catalog, falls back to the built-in list
when needed, and swaps the held snapshot in one step.
"""
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from streamflow.config import get_settings
from streamflow.models.channel import Channel
from streamflow.services.catalog_builder import build_catalog
from streamflow.services.data_sync import DataSyncService, RetrievalError, get_sync_service
from streamflow.services.fallback import (
    ADVISORY_NETWORK_ERROR,
    ADVISORY_OFFLINE_BACKUP,
    FALLBACK_CHANNELS,
)
from streamflow.services.featured import select_featured

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogSnapshot:
    """An immutable, fully built catalog."""
    channels: tuple[Channel, ...] = ()
    featured: tuple[Channel, ...] = ()
    advisory: Optional[str] = None
    is_fallback: bool = False
    loaded_at: datetime = field(default_factory=datetime.now)


class CatalogService:
    """Holds the current catalog snapshot and refreshes it on demand."""

    def __init__(
        self,
        sync_service: Optional[DataSyncService] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = get_settings()
        self.sync_service = sync_service or get_sync_service()
        self._rng = rng or random.Random()
        self._snapshot = CatalogSnapshot()

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def channels(self) -> tuple[Channel, ...]:
        return self._snapshot.channels

    async def load(self) -> CatalogSnapshot:
        """Retrieve and build a fresh catalog, replacing the current one."""
        try:
            raw = await self.sync_service.fetch_all()
        except RetrievalError as e:
            logger.error(f"Catalog retrieval failed, using fallback: {e}")
            return self._publish(self._fallback(ADVISORY_NETWORK_ERROR))

        channels = build_catalog(
            raw.streams,
            raw.channels,
            raw.logos,
            locale_name=self.settings.display_locale,
            placeholder_base=self.settings.placeholder_logo_base,
        )
        if not channels:
            logger.warning("Retrieval produced no playable channels, using fallback")
            return self._publish(self._fallback(ADVISORY_OFFLINE_BACKUP))

        featured = select_featured(channels, self.settings.featured_count, self._rng)
        return self._publish(CatalogSnapshot(channels=tuple(channels), featured=tuple(featured)))

    async def reload(self) -> CatalogSnapshot:
        """Start a new retrieval; the old catalog stays visible until it completes."""
        return await self.load()

    def _fallback(self, advisory: str) -> CatalogSnapshot:
        return CatalogSnapshot(
            channels=FALLBACK_CHANNELS,
            featured=FALLBACK_CHANNELS,
            advisory=advisory,
            is_fallback=True,
        )

    def _publish(self, snapshot: CatalogSnapshot) -> CatalogSnapshot:
        self._snapshot = snapshot
        logger.info(
            f"Catalog ready: {len(snapshot.channels)} channels"
            + (f" ({snapshot.advisory})" if snapshot.advisory else "")
        )
        return snapshot
