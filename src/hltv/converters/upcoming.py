"""Upcoming matches listing converter.

Provides:
- convert_upcoming: pure function extracting UpcomingMatch entries
- parse_upcoming: same, starting from raw HTML

Containers without a match link, event description or timestamp are
skipped with a warning. Teams are optional: fixtures whose participants
are not decided yet carry no team attributes and show the event
description in a ``matchInfoEmpty`` box instead.
"""

import logging

from bs4 import BeautifulSoup
from pydantic import ValidationError

from hltv.converters.common import id_from_href, require, unix_ms_to_datetime
from hltv.dom import parse_document
from hltv.exceptions import AttributeMissing, ConversionError, StructureNotFound
from hltv.models import Team, UpcomingMatch
from hltv.rich import RichNode
from hltv.rules import format_from_code

logger = logging.getLogger(__name__)


def parse_upcoming(html: str) -> list[UpcomingMatch]:
    """Parse raw upcoming matches HTML. See convert_upcoming."""
    return convert_upcoming(parse_document(html))


def convert_upcoming(document: BeautifulSoup) -> list[UpcomingMatch]:
    """Convert an HLTV upcoming matches page into UpcomingMatch entries.

    Args:
        document: Parsed ``/matches`` page.

    Returns:
        Entries in page order; empty list if there are none.
    """
    matches: list[UpcomingMatch] = []
    for container in RichNode.root(document).find_all("upcomingMatch"):
        try:
            matches.append(_convert_entry(container))
        except (ConversionError, ValidationError) as exc:
            logger.warning("Skipping upcoming entry: %s", exc)
    logger.debug("Converted %d upcoming entries", len(matches))
    return matches


def _convert_entry(container: RichNode) -> UpcomingMatch:
    link = require(container.find("match"), "match link")
    match_id = id_from_href(link.attr("href"), "matches")

    unix_ms = container.attr_as("data-zonedgrouping-entry-unix", int)
    if unix_ms is None:
        raise AttributeMissing(
            f"Match {match_id}: missing 'data-zonedgrouping-entry-unix' attribute"
        )

    return UpcomingMatch(
        id=match_id,
        stars=_extract_stars(container, match_id),
        team1=_extract_team(container, "team1"),
        team2=_extract_team(container, "team2"),
        event_name=_extract_event_name(link, match_id),
        format=format_from_code(container.find("matchMeta").text()),
        date=unix_ms_to_datetime(unix_ms),
    )


def _extract_stars(container: RichNode, match_id: int) -> int:
    """Star rating; 0 when missing or malformed."""
    try:
        stars = container.attr_as("stars", int)
    except ConversionError as exc:
        logger.warning("Match %d: ignoring star rating: %s", match_id, exc)
        return 0
    if stars is None or stars < 0:
        return 0
    return stars


def _extract_team(container: RichNode, slot: str) -> Team | None:
    """Team in ``slot`` ("team1"/"team2"), None if undecided.

    The ID lives on the container attribute of the same name, the name and
    logo inside the slot element.
    """
    team_id = container.attr_as(slot, int)
    name = container.find(slot).find("matchTeamName").text()
    if team_id is None or not name:
        return None
    logo = container.find(slot).find("matchTeamLogo")
    return Team(id=team_id, name=name, logo_url=logo.attr("src") or "")


def _extract_event_name(link: RichNode, match_id: int) -> str:
    name = link.find("matchEvent").find("matchEventName").text()
    if name:
        return name
    # Undecided fixtures describe the event in a different box
    empty = link.find("matchInfoEmpty")
    name = empty.find("line-clamp-3").text() or empty.text()
    if name:
        return name
    raise StructureNotFound(f"Match {match_id}: no event description found")
