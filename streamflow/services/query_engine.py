"""
Query engine.
Turns the catalog plus the current filter state and preference sets into the
visible page of results and the facet options for the filter dropdowns.
"""
import math
from typing import Callable, Collection, Sequence, Union

from streamflow.models.channel import Category, Channel
from streamflow.models.query import ALL, CountryOption, Facets, FilterState, QueryResult, SortKey
from streamflow.services.taxonomy import collation_key

PAGE_SIZE = 40

ELLIPSIS = "..."

SORT_ORDERS: dict[SortKey, tuple[Callable[[Channel], tuple], bool]] = {
    SortKey.NAME_ASC: (lambda ch: collation_key(ch.name), False),
    SortKey.NAME_DESC: (lambda ch: collation_key(ch.name), True),
    SortKey.CATEGORY: (lambda ch: collation_key(ch.category.value), False),
    SortKey.COUNTRY: (lambda ch: collation_key(ch.country_name or ""), False),
}


def apply_visibility(
    catalog: Sequence[Channel], hidden: Collection[str], category: Category
) -> list[Channel]:
    """Hidden channels only appear in the Hidden view, and nowhere else."""
    if category == Category.HIDDEN:
        return [ch for ch in catalog if ch.id in hidden]
    return [ch for ch in catalog if ch.id not in hidden]


def compute_facets(visible: Sequence[Channel], selected_region: str) -> Facets:
    """
    Regions and countries offered for the current category context.

    Computed before the region/country/search filters so that changing one of
    those never removes the options used to change it back. A selected region
    narrows the country list to that region.
    """
    regions = set()
    countries: dict[str, str] = {}
    for ch in visible:
        if ch.region:
            regions.add(ch.region)
        if selected_region == ALL or ch.region == selected_region:
            if ch.country and ch.country_name:
                countries[ch.country] = ch.country_name

    return Facets(
        regions=sorted(regions),
        countries=[
            CountryOption(code=code, name=name)
            for code, name in sorted(countries.items(), key=lambda item: collation_key(item[1]))
        ],
    )


def filter_channels(
    visible: Sequence[Channel], favorites: Collection[str], state: FilterState
) -> list[Channel]:
    """Apply the category, region, country and search filters, then sort."""
    result = list(visible)

    category = state.active_category
    if category == Category.FAVORITES:
        result = [ch for ch in result if ch.id in favorites]
    elif not category.is_view_filter:
        result = [ch for ch in result if ch.category == category]

    if state.selected_region != ALL:
        result = [ch for ch in result if ch.region == state.selected_region]

    if state.selected_country != ALL:
        result = [ch for ch in result if ch.country == state.selected_country]

    if state.search_query:
        needle = state.search_query.lower()
        result = [
            ch for ch in result
            if needle in ch.name.lower() or (ch.sport_type and needle in ch.sport_type.lower())
        ]

    key, reverse = SORT_ORDERS.get(state.sort_key, SORT_ORDERS[SortKey.NAME_ASC])
    return sorted(result, key=key, reverse=reverse)


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(count / page_size)


def paginate(items: Sequence[Channel], page: int, page_size: int = PAGE_SIZE) -> list[Channel]:
    """Slice one 1-based page. Out-of-range pages come back empty."""
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def query(
    catalog: Sequence[Channel],
    favorites: Collection[str],
    hidden: Collection[str],
    state: FilterState,
    page_size: int = PAGE_SIZE,
) -> QueryResult:
    """Run the full filter pipeline for one page."""
    visible = apply_visibility(catalog, hidden, state.active_category)
    facets = compute_facets(visible, state.selected_region)
    matched = filter_channels(visible, favorites, state)

    return QueryResult(
        page=paginate(matched, state.current_page, page_size),
        total_results=len(matched),
        total_pages=total_pages(len(matched), page_size),
        current_page=state.current_page,
        facets=facets,
    )


def page_window(current: int, total: int, delta: int = 2) -> list[Union[int, str]]:
    """
    Page numbers for a paginator.

    The first and last pages are always listed, plus ``delta`` pages either
    side of the current one; elided runs show up as "...".
    For example page 6 of 20 gives [1, "...", 4, 5, 6, 7, 8, "...", 20].
    """
    if total <= 1:
        return []

    window: list[Union[int, str]] = list(
        range(max(2, current - delta), min(total - 1, current + delta) + 1)
    )
    if current - delta > 2:
        window.insert(0, ELLIPSIS)
    if current + delta < total - 1:
        window.append(ELLIPSIS)

    return [1, *window, total]
