"""
Tests for the command-line client.
"""
import json

import httpx
import pytest

from streamflow import cli
from streamflow.services import catalog as catalog_module
from streamflow.services.data_sync import DataSyncService


@pytest.fixture
def offline_api(monkeypatch, sample_channels, sample_streams, sample_logos):
    """Serve the sample tables instead of hitting iptv-org."""
    tables = {"channels": sample_channels, "streams": sample_streams, "logos": sample_logos}

    def handler(request):
        name = request.url.path.rsplit("/", 1)[-1].removesuffix(".json")
        return httpx.Response(200, json=tables[name])

    service = DataSyncService(base_url="https://api.test", transport=httpx.MockTransport(handler))
    monkeypatch.setattr(catalog_module, "get_sync_service", lambda: service)
    return tables


@pytest.fixture
def down_api(monkeypatch):
    def handler(request):
        return httpx.Response(503)

    service = DataSyncService(base_url="https://api.test", transport=httpx.MockTransport(handler))
    monkeypatch.setattr(catalog_module, "get_sync_service", lambda: service)


class TestPreferenceCommands:
    """favorite/export don't need the network."""

    def test_favorite_toggle_and_export(self, prefs_db, capsys):
        assert cli.main(["--db", prefs_db, "favorite", "ESPN.us"]) == 0
        assert "added to favorites" in capsys.readouterr().out

        assert cli.main(["--db", prefs_db, "export"]) == 0
        exported = json.loads(capsys.readouterr().out)
        assert exported == {"favorites": ["ESPN.us"], "hidden": []}

        cli.main(["--db", prefs_db, "favorite", "ESPN.us"])
        assert "removed from favorites" in capsys.readouterr().out


class TestBrowseCommands:
    """browse/facets/hide run against a mocked API."""

    def test_browse_sports(self, offline_api, prefs_db, capsys):
        assert cli.main(["--db", prefs_db, "browse", "--category", "Sports"]) == 0
        out = capsys.readouterr().out

        assert "Sports: 2 results" in out
        assert "ESPN" in out and "TSN" in out
        assert "CNN" not in out

    def test_browse_no_results(self, offline_api, prefs_db, capsys):
        cli.main(["--db", prefs_db, "browse", "--search", "zzz"])
        assert "No channels found" in capsys.readouterr().out

    def test_facets(self, offline_api, prefs_db, capsys):
        cli.main(["--db", prefs_db, "facets", "--region", "Europe"])
        out = capsys.readouterr().out

        assert "Regions: Europe, North America" in out
        assert "GB  United Kingdom" in out
        assert "United States" not in out

    def test_hide_requires_confirmation(self, offline_api, prefs_db, capsys):
        cli.main(["--db", prefs_db, "hide", "CNN.us"])
        out = capsys.readouterr().out
        assert "Hide Channel?" in out
        assert "--yes" in out

        cli.main(["--db", prefs_db, "export"])
        assert json.loads(capsys.readouterr().out)["hidden"] == []

        cli.main(["--db", prefs_db, "hide", "CNN.us", "--yes"])
        assert "CNN.us: hidden" in capsys.readouterr().out

        cli.main(["--db", prefs_db, "browse"])
        assert "CNN" not in capsys.readouterr().out

        cli.main(["--db", prefs_db, "hide", "CNN.us"])
        assert "CNN.us: unhidden" in capsys.readouterr().out

    def test_hide_unknown_channel(self, offline_api, prefs_db, capsys):
        assert cli.main(["--db", prefs_db, "hide", "Nope.xx"]) == 1
        assert "Unknown channel" in capsys.readouterr().out

    def test_fallback_advisory(self, down_api, prefs_db, capsys):
        cli.main(["--db", prefs_db, "browse"])
        out = capsys.readouterr().out

        assert "Note: Network error." in out
        assert "NASA TV" in out
