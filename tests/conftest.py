"""
Pytest configuration and fixtures for StreamFlow tests.
"""
import pytest

from streamflow.models.channel import Category, Channel
from streamflow.services.taxonomy import resolve_region


@pytest.fixture
def make_channel():
    """Factory for catalog channels with sensible defaults."""
    def _make(id, name=None, category=Category.OTHER, country="US", country_name=None, **extra):
        return Channel(
            id=id,
            name=name or id,
            logo=extra.pop("logo", f"https://logos.example.com/{id}.png"),
            category=category,
            url=extra.pop("url", f"https://streams.example.com/{id}.m3u8"),
            country=country,
            country_name=country_name or country,
            region=extra.pop("region", resolve_region(country)),
            **extra,
        )
    return _make


@pytest.fixture
def sample_channels():
    """channels.json style records."""
    return [
        {"id": "ESPN.us", "name": "ESPN", "country": "US", "categories": ["sports"]},
        {"id": "CNN.us", "name": "CNN", "country": "US", "categories": ["news"], "network": "Warner Bros. Discovery"},
        {"id": "BBCOne.uk", "name": "BBC One", "country": "GB", "categories": ["general"]},
        {"id": "TSN.ca", "name": "TSN", "country": "CA", "categories": ["sports", "news"]},
        {"id": "Arte.fr", "name": "Arte", "country": "FR", "categories": ["documentary", "culture"]},
        {"id": "NoStream.us", "name": "No Stream", "country": "US", "categories": ["music"]},
    ]


@pytest.fixture
def sample_streams():
    """streams.json style records, in source order."""
    return [
        {"channel": "CNN.us", "url": "http://example.com/cnn.m3u8", "quality": "720p"},
        {"channel": "ESPN.us", "url": "http://example.com/espn.m3u8", "quality": "1080p"},
        {"channel": "ESPN.us", "url": "http://example.com/espn-backup.m3u8", "quality": "480p"},
        {"channel": "BBCOne.uk", "url": "http://example.com/bbc.m3u8", "quality": None},
        {"channel": "TSN.ca", "url": "http://example.com/tsn.m3u8", "quality": "720p"},
        {"channel": "Arte.fr", "url": "", "quality": "720p"},
        {"channel": "Ghost.xx", "url": "http://example.com/ghost.m3u8", "quality": "720p"},
        {"channel": None, "url": "http://example.com/unlinked.m3u8", "quality": None},
    ]


@pytest.fixture
def sample_logos():
    """logos.json style records."""
    return [
        {"channel": "ESPN.us", "url": "https://example.com/espn-old.png"},
        {"channel": "ESPN.us", "url": "https://example.com/espn.png"},
        {"channel": "CNN.us", "url": "https://example.com/cnn.png"},
    ]


@pytest.fixture
def prefs_db(tmp_path):
    """Path for a throwaway preference store database."""
    return str(tmp_path / "prefs.db")
