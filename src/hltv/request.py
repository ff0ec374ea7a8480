"""URL builders for the four HLTV page kinds.

Each builder yields a Request pairing the page URL with the converter that
understands it, so a fetcher can go from request to record without knowing
about page layouts::

    request = results().stars(1).year(2020).team(6665).build()
    matches = await client.get(request)

Builders are immutable: every method returns a new builder.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Callable, Iterable
from urllib.parse import urlencode

from bs4 import BeautifulSoup

from hltv.config import HLTV_BASE_URL
from hltv.converters import (
    convert_match_page,
    convert_results,
    convert_team_page,
    convert_upcoming,
)
from hltv.models import EventTypeFilter, Map


@dataclass(frozen=True)
class Request:
    """A page to fetch and how to turn it into records.

    Attributes:
        url: Absolute page URL.
        kind: Page kind, also the snapshot directory name.
        convert: Pure converter for the parsed page.
        ready_selector: CSS selector present once the page has rendered.
    """

    url: str
    kind: str
    convert: Callable[[BeautifulSoup], Any]
    ready_selector: str


def get_match(match_id: int) -> Request:
    """Request for a match detail page. HLTV ignores the URL slug."""
    return Request(
        url=f"{HLTV_BASE_URL}/matches/{match_id}/-",
        kind="match",
        convert=convert_match_page,
        ready_selector=".match-page",
    )


def get_team(team_id: int) -> Request:
    """Request for a team profile page."""
    return Request(
        url=f"{HLTV_BASE_URL}/team/{team_id}/-",
        kind="team",
        convert=convert_team_page,
        ready_selector=".teamProfile",
    )


@dataclass(frozen=True)
class UpcomingQuery:
    """Filters for the upcoming matches listing (``/matches``)."""

    _top_tier: bool = False
    _events: tuple[int, ...] = ()
    _event_type: EventTypeFilter = EventTypeFilter.ALL

    def top_tier(self) -> "UpcomingQuery":
        """Only top tier matches. Overrides every other filter."""
        return replace(self, _top_tier=True)

    def events(self, event_ids: Iterable[int]) -> "UpcomingQuery":
        return replace(self, _events=tuple(event_ids))

    def event_type(self, event_type: EventTypeFilter) -> "UpcomingQuery":
        return replace(self, _event_type=event_type)

    def query_string(self) -> str:
        if self._top_tier:
            return urlencode({"predefinedFilter": "top_tier"})
        params: list[tuple[str, Any]] = [("eventType", self._event_type.value)]
        params += [("event", ev) for ev in self._events]
        return urlencode(params)

    def build(self) -> Request:
        return Request(
            url=f"{HLTV_BASE_URL}/matches?{self.query_string()}",
            kind="upcoming",
            convert=convert_upcoming,
            ready_selector=".upcomingMatch",
        )


@dataclass(frozen=True)
class ResultsQuery:
    """Filters for the results listing (``/results``).

    A date range is only sent when both ends are set. Repeated filters
    (events, players, teams, maps) match any of the given values.
    """

    _stars: int = 0
    _start: date | None = None
    _end: date | None = None
    _events: tuple[int, ...] = ()
    _players: tuple[int, ...] = ()
    _teams: tuple[int, ...] = ()
    _maps: tuple[Map, ...] = ()
    _event_type: EventTypeFilter = EventTypeFilter.ALL
    _offset: int = 0

    def stars(self, stars: int) -> "ResultsQuery":
        """Minimum star rating, 0-5."""
        if not 0 <= stars <= 5:
            raise ValueError(f"stars must be between 0 and 5, got {stars}")
        return replace(self, _stars=stars)

    def year(self, year: int) -> "ResultsQuery":
        """Results of one calendar year."""
        return replace(self, _start=date(year, 1, 1), _end=date(year, 12, 31))

    def start(self, start: date) -> "ResultsQuery":
        """Start of the date range. Only used together with end()."""
        return replace(self, _start=start)

    def end(self, end: date) -> "ResultsQuery":
        """End of the date range. Only used together with start()."""
        return replace(self, _end=end)

    def events(self, event_ids: Iterable[int]) -> "ResultsQuery":
        return replace(self, _events=tuple(event_ids))

    def players(self, player_ids: Iterable[int]) -> "ResultsQuery":
        return replace(self, _players=tuple(player_ids))

    def team(self, team_id: int) -> "ResultsQuery":
        return replace(self, _teams=(team_id,))

    def teams(self, team_ids: Iterable[int]) -> "ResultsQuery":
        return replace(self, _teams=tuple(team_ids))

    def map(self, map_: Map) -> "ResultsQuery":
        return replace(self, _maps=(map_,))

    def maps(self, maps: Iterable[Map]) -> "ResultsQuery":
        return replace(self, _maps=tuple(maps))

    def event_type(self, event_type: EventTypeFilter) -> "ResultsQuery":
        return replace(self, _event_type=event_type)

    def offset(self, offset: int) -> "ResultsQuery":
        """Skip the first ``offset`` results (HLTV pages by 100)."""
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        return replace(self, _offset=offset)

    def query_string(self) -> str:
        params: list[tuple[str, Any]] = [
            ("stars", self._stars),
            ("matchType", self._event_type.value),
        ]
        if self._start is not None and self._end is not None:
            params.append(("startDate", self._start.isoformat()))
            params.append(("endDate", self._end.isoformat()))
        params += [("event", ev) for ev in self._events]
        params += [("player", pl) for pl in self._players]
        params += [("team", team) for team in self._teams]
        params += [("map", m.code) for m in self._maps]
        if self._offset:
            params.append(("offset", self._offset))
        return urlencode(params)

    def build(self) -> Request:
        return Request(
            url=f"{HLTV_BASE_URL}/results?{self.query_string()}",
            kind="results",
            convert=convert_results,
            ready_selector=".results-holder",
        )


def upcoming() -> UpcomingQuery:
    """Start an upcoming matches query with no filters."""
    return UpcomingQuery()


def results() -> ResultsQuery:
    """Start a results query with no filters."""
    return ResultsQuery()
