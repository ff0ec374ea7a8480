"""Match detail page converter.

Provides:
- convert_match_page: pure function from a parsed document to MatchPage
- parse_match_page: same, starting from raw HTML

A match page has more states than the listings: teams may be undecided,
the match may be upcoming, live or over, and maps may be unplayed. The
required/optional split is:

- required (error aborts the conversion): match ID, event, date, format
- optional (degrades to None/empty): teams, series score, alternate
  logo, per-player statistics and individual stats rows
"""

import logging
from datetime import datetime

from bs4 import BeautifulSoup
from pydantic import ValidationError

from hltv.converters.common import (
    canonical_id,
    id_from_href,
    parse_float,
    require,
    require_attr,
    require_text,
    unix_ms_to_datetime,
)
from hltv.dom import parse_document, tag_is
from hltv.exceptions import (
    AttributeMissing,
    ConversionError,
    UnrecognizedSchemaVariant,
    ValueParseFailure,
)
from hltv.models import (
    Event,
    Map,
    MapScore,
    MatchFormat,
    MatchPage,
    MatchScore,
    Performance,
    Player,
    Stats,
    Team,
)
from hltv.rich import RichNode
from hltv.rules import (
    format_from_map_count,
    is_placeholder,
    normalize_series_score,
    status_from_text,
)

logger = logging.getLogger(__name__)

# Classes of the series counter inside a team gradient, in lookup order
_COUNTER_CLASSES = ("won", "lost", "tie")


def parse_match_page(html: str) -> MatchPage:
    """Parse raw match page HTML. See convert_match_page."""
    return convert_match_page(parse_document(html))


def convert_match_page(document: BeautifulSoup) -> MatchPage:
    """Convert a parsed HLTV match page into a MatchPage.

    Pure function: the document is only read.

    Args:
        document: Parsed match detail page.

    Returns:
        MatchPage with all extractable fields.

    Raises:
        StructureNotFound: If the canonical match link, the match container,
            the event or the date element is missing.
        AttributeMissing: If the event link lacks its href or title.
        ValueParseFailure: If an ID, timestamp, counter or round score is
            present but malformed.
        UnrecognizedSchemaVariant: If the map holder count is not 1/3/5/7,
            or the series score exceeds the wins the format allows.
    """
    doc = RichNode.root(document)
    match_id = canonical_id(doc, "matches")
    root = require(doc.find("match-page"), "match-page container")
    fmt = format_from_map_count(len(root.find("maps").find_all("mapholder")))

    try:
        page = MatchPage(
            id=match_id,
            status=status_from_text(root.find("countdown").text()),
            team1=_extract_team(root, "team1-gradient"),
            team2=_extract_team(root, "team2-gradient"),
            event=_extract_event(root),
            date=_extract_date(root),
            format=fmt,
            score=_extract_score(root, fmt),
            maps=_extract_maps(root),
            stats=_extract_stats(root),
        )
    except ValidationError as exc:
        raise ValueParseFailure(f"Match {match_id}: invalid field values: {exc}") from exc

    logger.debug(
        "Match %d: %s, %s, %d maps, %d stat rows",
        page.id, page.status.value, page.format.name, len(page.maps), len(page.stats),
    )
    return page


def _extract_team(root: RichNode, gradient_class: str) -> Team | None:
    """Team shown in ``gradient_class``; None for undecided (TBD) slots."""
    gradient = root.find(gradient_class)
    name = gradient.find("teamName").text()
    link = gradient.find_where(tag_is("a"))
    if not name or not link.exists:
        return None

    team_id = id_from_href(link.attr("href"), "team")

    # Teams with a night-mode logo render both variants
    day_logo = gradient.find("day-only")
    logo = day_logo if day_logo.exists else gradient.find("logo")
    return Team(
        id=team_id,
        name=name,
        logo_url=logo.attr("src") or "",
        alt_logo_url=gradient.find("night-only").attr("src"),
    )


def _extract_event(root: RichNode) -> Event:
    link = root.find("timeAndEvent").find("event").child(0)
    href = require_attr(link, "href", "event link")
    title = link.attr("title")
    if not title:
        raise AttributeMissing("Missing 'title' attribute on event link")
    return Event(id=id_from_href(href, "events"), name=title)


def _extract_date(root: RichNode) -> datetime:
    date_el = require(root.find("timeAndEvent").find("date"), "date element")
    unix_ms = date_el.attr_as("data-unix", int)
    if unix_ms is None:
        raise AttributeMissing("Missing 'data-unix' attribute on date element")
    return unix_ms_to_datetime(unix_ms)


def _extract_counter(gradient: RichNode) -> int | None:
    for cls in _COUNTER_CLASSES:
        counter = gradient.find(cls)
        if counter.exists:
            return counter.text_as(int)
    return None


def _extract_score(root: RichNode, fmt: MatchFormat) -> MatchScore | None:
    """Series score from the header counters; None before the match starts.

    Raises:
        UnrecognizedSchemaVariant: If a team has more map wins than ``fmt``
            allows. Bo1s are exempt: a live bo1 shows rounds below the
            collapse threshold (7-5).
    """
    team1 = _extract_counter(root.find("team1-gradient"))
    team2 = _extract_counter(root.find("team2-gradient"))
    if team1 is None or team2 is None:
        return None
    score = normalize_series_score(team1, team2)
    needed = fmt.wins_needed
    if fmt is not MatchFormat.BO1 and max(score.team1_maps, score.team2_maps) > needed:
        raise UnrecognizedSchemaVariant(
            f"Series score {score.team1_maps}-{score.team2_maps} exceeds "
            f"the {needed} map wins of a {fmt.name}"
        )
    return score


def _extract_maps(root: RichNode) -> list[MapScore]:
    """Scores of every decided and played map, in display order."""
    maps: list[MapScore] = []
    for i, holder in enumerate(root.find("maps").find_all("mapholder"), start=1):
        name = holder.find("mapname").text()
        left = holder.find("results-left").find("results-team-score")
        right = holder.find("results-right").find("results-team-score")

        if is_placeholder(name) or is_placeholder(left.text()) or is_placeholder(right.text()):
            logger.debug("Map %d (%s) not played yet, skipping", i, name)
            continue

        map_ = Map.from_name(name)
        if map_ is Map.UNKNOWN:
            logger.warning("Unrecognized map name %r", name)
        maps.append(
            MapScore(
                map=map_,
                team1_rounds=left.text_as(int),
                team2_rounds=right.text_as(int),
            )
        )
    return maps


def _extract_stats(root: RichNode) -> list[Performance]:
    """Per-player totals over all maps.

    Only the first stats tab (all maps) is read. Pages that do not show
    exactly two team tables yield an empty list.
    """
    content = root.find("matchstats").find("stats-content")
    tables = content.find_all("totalstats")
    if len(tables) != 2:
        logger.debug("Found %d stats tables, expected 2; no stats", len(tables))
        return []

    performances: list[Performance] = []
    for table in tables:
        for row in table.find_tags("tr"):
            if row.has_class("header-row"):
                continue
            performance = _extract_performance(row)
            if performance is not None:
                performances.append(performance)
    return performances


def _extract_performance(row: RichNode) -> Performance | None:
    """One stats row; None (and a warning) if any field cannot be read."""
    try:
        cell = require(row.find("players"), "players cell")
        link = cell.find_where(tag_is("a"))
        player_id = id_from_href(link.attr("href"), "player")
        nickname = cell.find("player-nick").text() or link.text()
        if not nickname:
            raise ValueParseFailure(f"Empty nickname for player {player_id}")

        kills, deaths = _split_kd(require_text(row.find("kd"), "K-D cell"))
        stats = Stats(
            kills=kills,
            deaths=deaths,
            adr=_stat(row, "adr"),
            kast=_stat(row, "kast"),
            rating=_stat(row, "rating"),
        )
    except (ConversionError, ValidationError) as exc:
        logger.warning("Skipping stats row: %s", exc)
        return None
    return Performance(player=Player(id=player_id, nickname=nickname), stats=stats)


def _split_kd(text: str) -> tuple[int, int]:
    """Split a combined "67-53" cell into kills and deaths."""
    kills, sep, deaths = text.partition("-")
    try:
        if not sep:
            raise ValueError("no delimiter")
        return int(kills.strip()), int(deaths.strip())
    except ValueError as exc:
        raise ValueParseFailure(f"Malformed K-D value {text!r}") from exc


def _stat(row: RichNode, cls: str) -> float:
    return require(row.find(cls), f"{cls} cell").text_as(parse_float)
