"""
StreamFlow command-line client.

Browse the iptv-org live channel catalog from a terminal, and manage the
favorite and hidden channel lists.

Usage:
    streamflow browse --category Sports --region Europe --page 2
    streamflow facets --region Europe
    streamflow favorite BBCOne.uk
    streamflow hide BBCOne.uk --yes
    streamflow export
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from streamflow.config import get_settings
from streamflow.models.channel import Category, Channel
from streamflow.models.query import ALL, SortKey
from streamflow.services.catalog import CatalogService
from streamflow.services.preferences import PreferenceStore
from streamflow.services.session import BrowseSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streamflow",
        description="Browse live channels from the iptv-org catalog"
    )
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Preference store path (default: STREAMFLOW_DATABASE_PATH)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    browse = sub.add_parser("browse", help="List one page of channels")
    _add_filter_args(browse)
    browse.add_argument(
        "--sort",
        choices=[k.value for k in SortKey],
        default=SortKey.NAME_ASC.value,
        help="Result ordering (default: name_asc)"
    )
    browse.add_argument("--page", "-p", type=int, default=1, help="Page number (default: 1)")

    facets = sub.add_parser("facets", help="Show the regions and countries on offer")
    _add_filter_args(facets)

    favorite = sub.add_parser("favorite", help="Toggle a favorite channel")
    favorite.add_argument("channel_id")

    hide = sub.add_parser("hide", help="Toggle a hidden channel")
    hide.add_argument("channel_id")
    hide.add_argument("--yes", "-y", action="store_true", help="Confirm hiding a visible channel")

    sub.add_parser("export", help="Print favorites and hidden channels as JSON")
    return parser


def _add_filter_args(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--category", "-c",
        choices=[c.value for c in Category],
        default=Category.ALL.value,
        help="Category or view (default: All)"
    )
    parser.add_argument("--search", "-s", default="", help="Search channel names and sport types")
    parser.add_argument("--region", "-r", default=ALL, help="Region filter (default: All)")
    parser.add_argument("--country", default=ALL, help="Country code filter (default: All)")


def _apply_filters(session: BrowseSession, args: argparse.Namespace):
    session.select_category(args.category)
    session.set_search(args.search)
    session.select_region(args.region)
    session.select_country(args.country)
    if getattr(args, "sort", None):
        session.set_sort(args.sort)
    if getattr(args, "page", None):
        session.go_to_page(args.page)


def _format_channel(channel: Channel, store: PreferenceStore) -> str:
    marks = ("*" if store.is_favorite(channel.id) else " ") + ("h" if store.is_hidden(channel.id) else " ")
    detail = channel.category.value
    if channel.sport_type:
        detail += f"/{channel.sport_type}"
    location = channel.country_name or channel.country or "?"
    return f"{marks} {channel.name} [{detail}] {location} ({channel.region}) - {channel.id}"


def _find_channel(channels, channel_id: str) -> Optional[Channel]:
    return next((ch for ch in channels if ch.id == channel_id), None)


async def run_command(args: argparse.Namespace) -> int:
    store = PreferenceStore(db_path=args.db)
    await store.load()

    if args.command == "favorite":
        now_favorite = await store.toggle_favorite(args.channel_id)
        print(f"{args.channel_id}: {'added to' if now_favorite else 'removed from'} favorites")
        return 0

    if args.command == "export":
        print(json.dumps(await store.export_data(), indent=2))
        return 0

    catalog = CatalogService()
    snapshot = await catalog.load()
    if snapshot.advisory:
        print(f"Note: {snapshot.advisory}")

    session = BrowseSession(catalog, store)

    if args.command == "hide":
        return await _hide(session, snapshot.channels, args)

    _apply_filters(session, args)
    result = session.results()

    if args.command == "facets":
        print("Regions: " + ", ".join(result.facets.regions))
        print("Countries:")
        for option in result.facets.countries:
            print(f"  {option.code}  {option.name}")
        return 0

    title = "Trending Channels" if session.state.active_category == Category.ALL else session.state.active_category.value
    print(f"{title}: {result.total_results} results")
    if not result.page:
        print("No channels found. Try adjusting your filters or checking the Hidden section.")
        return 0

    for channel in result.page:
        print(_format_channel(channel, store))

    window = session.pagination(result)
    if window:
        pages = " ".join(f"[{p}]" if p == result.current_page else str(p) for p in window)
        print(f"Page {result.current_page}/{result.total_pages}: {pages}")
    return 0


async def _hide(session: BrowseSession, channels, args: argparse.Namespace) -> int:
    channel = _find_channel(channels, args.channel_id)
    if channel is None:
        if not session.store.is_hidden(args.channel_id):
            print(f"Unknown channel: {args.channel_id}")
            return 1
        # Not in this catalog but still hidden; allow un-hiding it
        await session.store.toggle_hidden(args.channel_id)
        print(f"{args.channel_id}: unhidden")
        return 0

    pending = await session.request_toggle_hidden(channel)
    if pending is None:
        print(f"{channel.id}: unhidden")
        return 0

    if not args.yes:
        session.cancel_hide()
        print(pending.title)
        print(pending.message)
        print("Re-run with --yes to confirm.")
        return 0

    await session.confirm_hide()
    print(f"{channel.id}: hidden")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose or settings.debug else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    return asyncio.run(run_command(args))


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
