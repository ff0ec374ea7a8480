"""Page converters: pure functions from a parsed HLTV page to domain records.

Re-exports every converter for convenient import::

    from hltv.converters import convert_match_page, parse_results, ...

CONVERTERS maps a page kind to the function turning a parsed document of
that kind into its record(s). The kinds double as snapshot directory names.
"""

from typing import Any, Callable

from bs4 import BeautifulSoup

from .match_page import convert_match_page, parse_match_page
from .results import convert_results, parse_results
from .team_page import convert_team_page, parse_team_page
from .upcoming import convert_upcoming, parse_upcoming

CONVERTERS: dict[str, Callable[[BeautifulSoup], Any]] = {
    "match": convert_match_page,
    "team": convert_team_page,
    "results": convert_results,
    "upcoming": convert_upcoming,
}

__all__ = [
    "CONVERTERS",
    "convert_match_page",
    "convert_results",
    "convert_team_page",
    "convert_upcoming",
    "parse_match_page",
    "parse_results",
    "parse_team_page",
    "parse_upcoming",
]
