"""
SQLite-backed store for the user's favorite and hidden channel sets.
Each set is one key in a small key-value table, serialized as a JSON array.
"""
import json
import logging
from pathlib import Path
from typing import Iterable, Optional

import aiosqlite

from streamflow.config import get_settings

logger = logging.getLogger(__name__)


class PreferenceStore:
    """
    Owns the favorites and hidden sets.

    Loading never raises: missing, malformed or unreadable data counts as an
    empty set. Every toggle writes the whole set back before the new set is
    published, so a failed write leaves the in-memory sets untouched.
    """

    def __init__(
        self,
        db_path: Optional[str] = None,
        favorites_key: Optional[str] = None,
        hidden_key: Optional[str] = None,
    ):
        settings = get_settings()
        self.db_path = db_path or settings.database_path
        self.favorites_key = favorites_key or settings.favorites_key
        self.hidden_key = hidden_key or settings.hidden_key
        self._favorites: frozenset[str] = frozenset()
        self._hidden: frozenset[str] = frozenset()
        self._ensure_directory()

    def _ensure_directory(self):
        """Create data directory if it doesn't exist."""
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    async def initialize(self):
        """Create the key-value table if it doesn't exist."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("""
                CREATE TABLE IF NOT EXISTS preferences (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            await db.commit()

    @property
    def favorites(self) -> frozenset[str]:
        return self._favorites

    @property
    def hidden(self) -> frozenset[str]:
        return self._hidden

    def is_favorite(self, channel_id: str) -> bool:
        return channel_id in self._favorites

    def is_hidden(self, channel_id: str) -> bool:
        return channel_id in self._hidden

    # Raw key-value access
    async def get(self, key: str) -> Optional[str]:
        """Get a raw stored value."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("SELECT value FROM preferences WHERE key = ?", (key,))
            row = await cursor.fetchone()
            return row[0] if row else None

    async def set(self, key: str, value: str):
        """Store a raw value, replacing any previous one."""
        await self.set_many({key: value})

    async def set_many(self, values: dict[str, str]):
        """Store several raw values in one transaction."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.executemany(
                """INSERT OR REPLACE INTO preferences (key, value, updated_at)
                   VALUES (?, ?, CURRENT_TIMESTAMP)""",
                list(values.items())
            )
            await db.commit()

    async def load(self) -> None:
        """Read both sets from disk, treating anything unreadable as empty."""
        try:
            await self.initialize()
            raw_favorites = await self.get(self.favorites_key)
            raw_hidden = await self.get(self.hidden_key)
        except aiosqlite.Error as e:
            logger.error(f"Failed to load preferences from {self.db_path}: {e}")
            self._favorites = frozenset()
            self._hidden = frozenset()
            return

        self._favorites = self._parse(self.favorites_key, raw_favorites)
        self._hidden = self._parse(self.hidden_key, raw_hidden)
        logger.info(
            f"Loaded {len(self._favorites)} favorites and {len(self._hidden)} hidden channels"
        )

    @staticmethod
    def _parse(key: str, raw: Optional[str]) -> frozenset[str]:
        if raw is None:
            return frozenset()
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Malformed preference data for {key}, starting empty: {e}")
            return frozenset()
        if not isinstance(data, list):
            logger.warning(f"Preference data for {key} is not a list, starting empty")
            return frozenset()
        return frozenset(item for item in data if isinstance(item, str))

    async def _save(self, key: str, ids: frozenset[str]):
        await self.set(key, json.dumps(sorted(ids)))

    @staticmethod
    def _toggled(ids: frozenset[str], channel_id: str) -> frozenset[str]:
        if channel_id in ids:
            return ids - {channel_id}
        return ids | {channel_id}

    async def toggle_favorite(self, channel_id: str) -> bool:
        """Flip favorite status. Returns True when the channel is now a favorite."""
        updated = self._toggled(self._favorites, channel_id)
        await self._save(self.favorites_key, updated)
        self._favorites = updated
        return channel_id in updated

    async def toggle_hidden(self, channel_id: str) -> bool:
        """Flip hidden status. Returns True when the channel is now hidden."""
        updated = self._toggled(self._hidden, channel_id)
        await self._save(self.hidden_key, updated)
        self._hidden = updated
        return channel_id in updated

    async def export_data(self) -> dict:
        """Export both sets for backup."""
        return {
            "favorites": sorted(self._favorites),
            "hidden": sorted(self._hidden),
        }

    async def import_data(
        self,
        favorites: Iterable[str] = (),
        hidden: Iterable[str] = (),
    ) -> dict:
        """Merge ids from a backup into the stored sets."""
        merged_favorites = self._favorites | {i for i in favorites if isinstance(i, str)}
        merged_hidden = self._hidden | {i for i in hidden if isinstance(i, str)}

        await self.set_many({
            self.favorites_key: json.dumps(sorted(merged_favorites)),
            self.hidden_key: json.dumps(sorted(merged_hidden)),
        })
        self._favorites = merged_favorites
        self._hidden = merged_hidden

        return {"favorites": len(merged_favorites), "hidden": len(merged_hidden)}
