"""Team profile page converter.

Provides:
- convert_team_page: pure function from a parsed document to TeamPage
- parse_team_page: same, starting from raw HTML
"""

import logging

from bs4 import BeautifulSoup

from hltv.converters.common import (
    canonical_id,
    id_from_href,
    require,
    require_attr,
    require_text,
)
from hltv.dom import parse_document
from hltv.exceptions import AttributeMissing
from hltv.models import Player, TeamPage
from hltv.rich import RichNode

logger = logging.getLogger(__name__)


def parse_team_page(html: str) -> TeamPage:
    """Parse raw team page HTML. See convert_team_page."""
    return convert_team_page(parse_document(html))


def convert_team_page(document: BeautifulSoup) -> TeamPage:
    """Convert a parsed HLTV team profile page into a TeamPage.

    Roster entries are identity data: a player link without a title or a
    numeric ID fails the conversion. Logo and ranking are optional.

    Raises:
        StructureNotFound: If the canonical team link, the profile block or
            the team name is missing.
        AttributeMissing: If a roster link lacks its href or title.
        ValueParseFailure: If a team or player ID is not numeric.
    """
    doc = RichNode.root(document)
    team_id = canonical_id(doc, "team")
    profile = require(doc.find("teamProfile"), "teamProfile container")

    page = TeamPage(
        id=team_id,
        name=require_text(profile.find("profile-team-name"), "team name"),
        ranking=_extract_ranking(profile, team_id),
        players=_extract_players(profile),
        logo_url=profile.find("teamlogo").attr("src") or "",
    )
    logger.debug("Team %d (%s): %d players", page.id, page.name, len(page.players))
    return page


def _extract_ranking(profile: RichNode, team_id: int) -> int | None:
    """World ranking shown as "#3"; None when unranked ("-") or malformed."""
    text = profile.find("profile-team-stat").find("right").text()
    if not text or text == "-":
        return None
    digits = text.lstrip("#")
    if not (text.startswith("#") and digits.isdigit() and int(digits) > 0):
        logger.warning("Team %d: ignoring unexpected ranking %r", team_id, text)
        return None
    return int(digits)


def _extract_players(profile: RichNode) -> list[Player]:
    players: list[Player] = []
    for entry in profile.find("bodyshot-team").find_all("col-custom"):
        href = require_attr(entry, "href", "roster entry")
        nickname = require_attr(entry, "title", "roster entry").strip()
        if not nickname:
            raise AttributeMissing(f"Empty 'title' on roster entry {href!r}")
        players.append(Player(id=id_from_href(href, "player"), nickname=nickname))
    return players
