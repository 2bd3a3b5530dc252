"""
Catalog builder.
Joins the iptv-org channels, streams and logos tables into one deduplicated,
categorized and geographically annotated channel list.
"""
import logging
from typing import Iterable, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationError

from streamflow.models.channel import Category, Channel, RawChannel, RawLogo, RawStream
from streamflow.services.taxonomy import (
    classify_category,
    collation_key,
    detect_sport_type,
    resolve_country_name,
    resolve_region,
)

logger = logging.getLogger(__name__)

DEFAULT_PLACEHOLDER_BASE = "https://via.placeholder.com/150?text="

RecordT = TypeVar("RecordT", bound=BaseModel)


def _coerce(records: Iterable[Union[dict, BaseModel]], model: type[RecordT]) -> list[RecordT]:
    """Validate raw records, dropping the ones that don't fit the schema."""
    valid = []
    rejected = 0
    for record in records or []:
        if isinstance(record, model):
            valid.append(record)
            continue
        try:
            valid.append(model.model_validate(record))
        except ValidationError:
            rejected += 1
    if rejected:
        logger.debug(f"Skipped {rejected} malformed {model.__name__} records")
    return valid


def dedup_key(channel: RawChannel) -> str:
    """Identity of a logical channel: lowercased name plus country code."""
    return f"{channel.name.lower()}|{channel.country}"


def placeholder_logo(name: str, base: str = DEFAULT_PLACEHOLDER_BASE) -> str:
    return f"{base}{name[:1]}"


def catalog_order(channel: Channel) -> tuple:
    """Canonical catalog ordering: sports first, then by name."""
    return (channel.category != Category.SPORTS, collation_key(channel.name))


def build_catalog(
    streams: Iterable[Union[dict, RawStream]],
    channels: Iterable[Union[dict, RawChannel]],
    logos: Iterable[Union[dict, RawLogo]],
    locale_name: str = "en",
    placeholder_base: str = DEFAULT_PLACEHOLDER_BASE,
) -> list[Channel]:
    """
    Build the catalog from the three raw tables.

    Streams drive the join: a channel without a playable stream never shows
    up. The first stream seen for a (name, country) pair wins and later ones
    are dropped even when they point at a different channel id, so two
    distinct channels sharing a name and a country collapse into one entry.

    Args:
        streams: streams.json records, in source order
        channels: channels.json records
        logos: logos.json records
        locale_name: Locale used for country display names
        placeholder_base: URL prefix for generated placeholder logos

    Returns:
        Channels in catalog order (sports first, then by name)
    """
    channel_index: dict[str, RawChannel] = {
        ch.id: ch for ch in _coerce(channels, RawChannel)
    }
    logo_index: dict[str, str] = {
        logo.channel: logo.url for logo in _coerce(logos, RawLogo)
    }

    built: list[Channel] = []
    seen: set[str] = set()
    skipped = {"no_url": 0, "orphaned": 0, "duplicate": 0, "invalid": 0}

    for stream in _coerce(streams, RawStream):
        if not stream.url:
            skipped["no_url"] += 1
            continue

        info = channel_index.get(stream.channel) if stream.channel else None
        if info is None:
            skipped["orphaned"] += 1
            continue

        key = dedup_key(info)
        if key in seen:
            skipped["duplicate"] += 1
            continue

        entry = _materialize(stream, info, logo_index, locale_name, placeholder_base)
        if entry is None:
            skipped["invalid"] += 1
            continue

        seen.add(key)
        built.append(entry)

    built.sort(key=catalog_order)

    logger.info(f"Built catalog with {len(built)} channels")
    logger.debug(f"Catalog build skipped streams: {skipped}")
    return built


def _materialize(
    stream: RawStream,
    info: RawChannel,
    logo_index: dict[str, str],
    locale_name: str,
    placeholder_base: str,
) -> Optional[Channel]:
    category = classify_category(info.categories)
    sport_type = detect_sport_type(info.name) if category == Category.SPORTS else None

    try:
        return Channel(
            id=stream.channel,
            name=info.name,
            logo=logo_index.get(stream.channel) or placeholder_logo(info.name, placeholder_base),
            category=category,
            sport_type=sport_type,
            url=stream.url,
            country=info.country,
            country_name=resolve_country_name(info.country, locale_name),
            region=resolve_region(info.country),
            description=f"Network: {info.network}" if info.network else None,
        )
    except ValidationError as e:
        # Blank channel names can't be shown
        logger.debug(f"Dropping stream for {stream.channel}: {e}")
        return None
