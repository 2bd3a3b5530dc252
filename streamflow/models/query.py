"""
Filter state and query result models.
"""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from streamflow.models.channel import Category, Channel

# Sentinel for "no region/country constraint"
ALL = "All"


class SortKey(str, Enum):
    """User-selectable result orderings."""
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    CATEGORY = "category"
    COUNTRY = "country"


SORT_LABELS = {
    SortKey.NAME_ASC: "Name (A-Z)",
    SortKey.NAME_DESC: "Name (Z-A)",
    SortKey.CATEGORY: "Category",
    SortKey.COUNTRY: "Country",
}


class FilterState(BaseModel):
    """Live filter/sort/pagination state of a browsing session."""
    model_config = ConfigDict(frozen=True)

    active_category: Category = Category.ALL
    search_query: str = ""
    selected_region: str = ALL
    selected_country: str = ALL
    sort_key: SortKey = SortKey.NAME_ASC
    current_page: int = Field(default=1, ge=1)


class CountryOption(BaseModel):
    """Country facet entry."""
    model_config = ConfigDict(frozen=True)

    code: str
    name: str


class Facets(BaseModel):
    """Region and country values offered by the filter dropdowns."""
    model_config = ConfigDict(frozen=True)

    regions: list[str] = Field(default_factory=list)
    countries: list[CountryOption] = Field(default_factory=list)


class QueryResult(BaseModel):
    """One page of results plus the facets for the current context."""
    model_config = ConfigDict(frozen=True)

    page: list[Channel]
    total_results: int
    total_pages: int
    current_page: int
    facets: Facets
