"""
Browsing session.
Tracks the live filter state and applies its transition rules, and routes
favorite/hide actions to the preference store.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from streamflow.config import get_settings
from streamflow.models.channel import Category, Channel
from streamflow.models.query import ALL, FilterState, QueryResult, SortKey
from streamflow.services.catalog import CatalogService
from streamflow.services.preferences import PreferenceStore
from streamflow.services.query_engine import page_window, query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingHide:
    """A hide request waiting for the user to confirm."""
    channel_id: str
    channel_name: str

    @property
    def title(self) -> str:
        return "Hide Channel?"

    @property
    def message(self) -> str:
        return (
            f'Are you sure you want to hide "{self.channel_name}"? It will be moved to '
            f"the Hidden category and won't appear in standard lists."
        )


class BrowseSession:
    """One user's view over the catalog."""

    def __init__(
        self,
        catalog: CatalogService,
        store: PreferenceStore,
        state: Optional[FilterState] = None,
        page_size: Optional[int] = None,
    ):
        self.catalog = catalog
        self.store = store
        self.state = state or FilterState()
        self.page_size = page_size or get_settings().page_size
        self.pending_hide: Optional[PendingHide] = None

    def _update(self, reset_page: bool = True, **changes):
        if reset_page:
            changes["current_page"] = 1
        self.state = FilterState(**{**self.state.model_dump(), **changes})

    # Filter transitions
    def select_category(self, category: Union[Category, str]):
        self._update(active_category=Category(category))

    def set_search(self, text: str):
        self._update(search_query=text or "")

    def select_region(self, region: str):
        """Changing region also clears the country, which may not belong to it."""
        self._update(selected_region=region or ALL, selected_country=ALL)

    def select_country(self, country: str):
        self._update(selected_country=country or ALL)

    def set_sort(self, sort_key: Union[SortKey, str]):
        self._update(sort_key=SortKey(sort_key))

    def go_to_page(self, page: int):
        self._update(reset_page=False, current_page=page)

    def reset_filters(self):
        """Clear region, country, sort and search; the category stays."""
        self._update(
            selected_region=ALL,
            selected_country=ALL,
            sort_key=SortKey.NAME_ASC,
            search_query="",
        )

    # Results
    def results(self) -> QueryResult:
        return query(
            self.catalog.channels,
            self.store.favorites,
            self.store.hidden,
            self.state,
            self.page_size,
        )

    def pagination(self, result: Optional[QueryResult] = None) -> list:
        result = result or self.results()
        return page_window(self.state.current_page, result.total_pages)

    # Preference actions; none of these touch the current page
    async def toggle_favorite(self, channel_id: str) -> bool:
        return await self.store.toggle_favorite(channel_id)

    async def request_toggle_hidden(self, channel: Channel) -> Optional[PendingHide]:
        """
        Un-hide immediately, or ask for confirmation before hiding.

        Returns the pending confirmation when one is needed, otherwise None.
        """
        if self.store.is_hidden(channel.id):
            await self.store.toggle_hidden(channel.id)
            return None

        self.pending_hide = PendingHide(channel_id=channel.id, channel_name=channel.name)
        return self.pending_hide

    async def confirm_hide(self) -> bool:
        """Apply the pending hide. Returns False when nothing was pending."""
        pending, self.pending_hide = self.pending_hide, None
        if pending is None:
            return False
        if not self.store.is_hidden(pending.channel_id):
            await self.store.toggle_hidden(pending.channel_id)
        logger.info(f"Hid channel {pending.channel_id}")
        return True

    def cancel_hide(self):
        self.pending_hide = None
