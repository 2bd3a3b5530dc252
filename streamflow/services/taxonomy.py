"""
Classification tables for catalog building.

Category and sport detection are ordered rule tables: the first matching
rule wins, so precedence is the order of the table. Geography comes from a
fixed country -> continent map and a Babel locale for display names.
"""
import logging
import unicodedata
from functools import lru_cache
from typing import Optional

from babel import Locale, UnknownLocaleError

from streamflow.models.channel import Category

logger = logging.getLogger(__name__)

OTHER_REGIONS = "Other Regions"
OTHER_SPORTS = "Other Sports"

# iptv-org category tags -> client category, highest priority first
CATEGORY_RULES: tuple[tuple[Category, frozenset[str]], ...] = (
    (Category.SPORTS, frozenset({"sports"})),
    (Category.NEWS, frozenset({"news", "weather", "business"})),
    (Category.MOVIES, frozenset({"movies", "entertainment", "comedy", "classic"})),
    (Category.MUSIC, frozenset({"music"})),
    (Category.KIDS, frozenset({"kids", "animation", "family"})),
    (Category.DOCUMENTARY, frozenset({"documentary", "science", "education"})),
    (Category.LIFESTYLE, frozenset({"lifestyle", "cooking", "travel", "auto"})),
)

# Name keywords -> sport type. The API only tags "sports", so the name is all we have.
SPORT_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Football", ("soccer", "football", "league", "bundesliga", "liga")),
    ("Basketball", ("basket", "nba")),
    ("Racing", ("racing", "motor", "f1", "speed", "auto")),
    ("Combat", ("fight", "mma", "box", "wwe", "wrestling")),
    ("Tennis", ("tennis", "wta", "atp")),
    ("Golf", ("golf", "pga")),
    ("Cricket", ("cricket",)),
    ("General", ("sport",)),
)

_CONTINENTS = {
    "North America": "US CA MX CR PA DO GT HN JM PR",
    "South America": "AR BO BR CL CO EC PE PY UY VE",
    "Europe": (
        "GB UK DE FR IT ES PT NL BE SE NO DK FI RU UA PL CH AT CZ GR TR IE RO HU "
        "HR RS BG SK SI EE LV LT BY MD AL MK BA ME"
    ),
    "Asia": "CN JP KR IN ID TH VN MY PH SG PK BD HK TW SA AE IL IR IQ QA KW LB JO",
    "Oceania": "AU NZ FJ",
    "Africa": "ZA EG NG KE GH MA DZ SN TZ UG CM CI",
}

REGION_MAP: dict[str, str] = {
    code: region
    for region, codes in _CONTINENTS.items()
    for code in codes.split()
}


def classify_category(tags: list[str]) -> Category:
    """Map free-text iptv-org tags to exactly one stored category."""
    if not tags:
        return Category.OTHER
    tag_set = {t.strip().lower() for t in tags if t}
    for category, rule_tags in CATEGORY_RULES:
        if tag_set & rule_tags:
            return category
    return Category.OTHER


def detect_sport_type(name: str) -> str:
    """Guess the sport from a channel name."""
    lowered = name.lower()
    for sport, keywords in SPORT_RULES:
        if any(keyword in lowered for keyword in keywords):
            return sport
    return OTHER_SPORTS


def resolve_region(country_code: Optional[str]) -> str:
    """Continent grouping for a country code; never empty."""
    if not country_code:
        return OTHER_REGIONS
    return REGION_MAP.get(country_code.upper(), OTHER_REGIONS)


@lru_cache(maxsize=8)
def _territory_names(locale_name: str) -> dict:
    try:
        return dict(Locale.parse(locale_name).territories)
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(f"Unknown display locale {locale_name!r}, falling back to 'en': {e}")
        return dict(Locale.parse("en").territories)


def resolve_country_name(country_code: Optional[str], locale_name: str = "en") -> Optional[str]:
    """Display name for a country code, or the raw code when it can't be resolved."""
    if not country_code:
        return country_code
    return _territory_names(locale_name).get(country_code.upper(), country_code)


def collation_key(text: Optional[str]) -> tuple[str, str]:
    """Sort key that orders text case- and accent-insensitively.

    The unmodified string breaks ties so ordering stays total.
    """
    text = text or ""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), text)
