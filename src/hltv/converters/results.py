"""Results listing converter.

Provides:
- convert_results: pure function extracting MatchResult entries
- parse_results: same, starting from raw HTML

Each ``.result-con`` container is converted independently. A container
missing a required field (match link, team names, score, event) is
skipped with a warning instead of failing the whole page.
"""

import logging

from bs4 import BeautifulSoup
from pydantic import ValidationError

from hltv.converters.common import id_from_href, require, require_text
from hltv.dom import parse_document
from hltv.exceptions import ConversionError, ValueParseFailure
from hltv.models import MatchResult, MatchScore, WhichTeam
from hltv.rich import RichNode
from hltv.rules import format_from_code, normalize_series_score

logger = logging.getLogger(__name__)

_SCORE_CLASSES = ("score-won", "score-lost", "score-tie")


def parse_results(html: str) -> list[MatchResult]:
    """Parse raw results listing HTML. See convert_results."""
    return convert_results(parse_document(html))


def convert_results(document: BeautifulSoup) -> list[MatchResult]:
    """Convert an HLTV results listing into MatchResult entries.

    Args:
        document: Parsed results page.

    Returns:
        Entries in page order. Empty list if the page has no result
        containers (e.g. a non-results page or an empty filter).
    """
    results: list[MatchResult] = []
    for container in RichNode.root(document).find_all("result-con"):
        try:
            results.append(_convert_entry(container))
        except (ConversionError, ValidationError) as exc:
            logger.warning("Skipping result entry: %s", exc)
    logger.debug("Converted %d result entries", len(results))
    return results


def _convert_entry(container: RichNode) -> MatchResult:
    link = require(container.find("a-reset"), "a-reset match link")
    match_id = id_from_href(link.attr("href"), "matches")

    team1 = require(container.find("team1").find("team"), "team1 name")
    team2 = require(container.find("team2").find("team"), "team2 name")
    fmt = format_from_code(container.find("map-text").text())

    return MatchResult(
        id=match_id,
        winner=_which_team(team1, team2),
        team1_name=require_text(team1, "team1 name"),
        team2_name=require_text(team2, "team2 name"),
        score=_extract_score(container),
        event=require_text(container.find("event-name"), "event name"),
        format=fmt,
    )


def _which_team(team1: RichNode, team2: RichNode) -> WhichTeam:
    if team1.has_class("team-won"):
        return WhichTeam.FIRST
    if team2.has_class("team-won"):
        return WhichTeam.SECOND
    return WhichTeam.NONE


def _extract_score(container: RichNode) -> MatchScore:
    """Team1 and team2 counters in display order, bo1 rounds collapsed."""
    cell = require(container.find("result-score"), "result-score")
    spans = [
        span
        for span in cell.find_tags("span")
        if any(span.has_class(cls) for cls in _SCORE_CLASSES)
    ]
    if len(spans) != 2:
        raise ValueParseFailure(f"Expected 2 score counters, found {len(spans)}")
    return normalize_series_score(spans[0].text_as(int), spans[1].text_as(int))
