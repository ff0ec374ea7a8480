"""CLI entry point: fetch or convert one HLTV page and print it as JSON.

Usage::

    hltv match 2346065                      # live fetch through Chrome
    hltv team 6665 --save-html              # also keep the raw page
    hltv results --stars 1 --year 2020 --team 6665
    hltv upcoming --top-tier
    hltv --html page.html.gz match 2346065  # offline, no browser
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from pydantic import BaseModel

from hltv.config import ClientConfig
from hltv.dom import parse_document
from hltv.exceptions import HLTVError
from hltv.http_client import HLTVClient
from hltv.logging_config import setup_logging
from hltv.models import EventTypeFilter, Map
from hltv.request import Request, get_match, get_team, results, upcoming
from hltv.storage import read_html_file

logger = logging.getLogger(__name__)

_EVENT_TYPES = {f.name.lower(): f for f in EventTypeFilter}


def _map_arg(value: str) -> Map:
    """Accept ``inferno``, ``Inferno`` or ``de_inferno``."""
    name = value.lower().removeprefix("de_")
    for map_ in Map:
        if map_ is not Map.UNKNOWN and map_.value.lower() == name:
            return map_
    raise argparse.ArgumentTypeError(f"unknown map {value!r}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the hltv CLI."""
    parser = argparse.ArgumentParser(
        prog="hltv",
        description="Convert HLTV pages into JSON records",
    )
    parser.add_argument(
        "--html",
        type=str,
        default=None,
        help="Convert a saved page (.html or .html.gz) instead of fetching",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default="data",
        help="Data directory for logs and snapshots (default: data)",
    )
    parser.add_argument(
        "--save-html",
        action="store_true",
        help="Save fetched pages under {data-dir}/snapshots/",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show DEBUG output on the console",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    match = sub.add_parser("match", help="Match detail page")
    match.add_argument("id", type=int, help="HLTV match ID")

    team = sub.add_parser("team", help="Team profile page")
    team.add_argument("id", type=int, help="HLTV team ID")

    res = sub.add_parser("results", help="Results listing")
    res.add_argument("--stars", type=int, default=0, help="Minimum stars 0-5")
    res.add_argument("--year", type=int, default=None, help="Calendar year")
    res.add_argument("--event", type=int, action="append", default=[], help="Event ID (repeatable)")
    res.add_argument("--player", type=int, action="append", default=[], help="Player ID (repeatable)")
    res.add_argument("--team", type=int, action="append", default=[], help="Team ID (repeatable)")
    res.add_argument("--map", type=_map_arg, action="append", default=[], help="Map, e.g. inferno (repeatable)")
    res.add_argument("--event-type", choices=sorted(_EVENT_TYPES), default="all")
    res.add_argument("--offset", type=int, default=0, help="Results to skip")

    up = sub.add_parser("upcoming", help="Upcoming matches listing")
    up.add_argument("--top-tier", action="store_true", help="Only top tier matches")
    up.add_argument("--event", type=int, action="append", default=[], help="Event ID (repeatable)")
    up.add_argument("--event-type", choices=sorted(_EVENT_TYPES), default="all")

    return parser


def build_request(args: argparse.Namespace) -> Request:
    """Translate parsed arguments into a Request."""
    if args.command == "match":
        return get_match(args.id)
    if args.command == "team":
        return get_team(args.id)
    if args.command == "upcoming":
        query = upcoming().events(args.event).event_type(_EVENT_TYPES[args.event_type])
        if args.top_tier:
            query = query.top_tier()
        return query.build()

    query = (
        results()
        .stars(args.stars)
        .events(args.event)
        .players(args.player)
        .teams(args.team)
        .maps(args.map)
        .event_type(_EVENT_TYPES[args.event_type])
        .offset(args.offset)
    )
    if args.year is not None:
        query = query.year(args.year)
    return query.build()


def to_json(records: Any) -> str:
    """Serialize a record or list of records."""
    if isinstance(records, BaseModel):
        data = records.model_dump(mode="json")
    else:
        data = [r.model_dump(mode="json") for r in records]
    return json.dumps(data, indent=2, ensure_ascii=False)


async def async_main(args: argparse.Namespace) -> Any:
    """Fetch and convert the requested page through a browser."""
    config = ClientConfig(data_dir=args.data_dir, save_html=args.save_html)
    request = build_request(args)
    async with HLTVClient(config) as client:
        records = await client.get(request)
        logger.debug("Client stats: %s", client.stats)
    return records


def main(argv: list[str] | None = None) -> int:
    """Sync entry point for the ``hltv`` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        data_dir=None if args.html else args.data_dir,
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    try:
        if args.html:
            request = build_request(args)
            logger.info("Converting %s as %s page", args.html, request.kind)
            records = request.convert(parse_document(read_html_file(args.html)))
        else:
            records = asyncio.run(async_main(args))
    except HLTVError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except (OSError, EOFError, UnicodeDecodeError) as exc:
        # Unreadable, truncated or non-UTF-8 input, or an unwritable data dir
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(to_json(records))
    return 0


if __name__ == "__main__":
    sys.exit(main())
