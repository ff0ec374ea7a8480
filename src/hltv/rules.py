"""Layout-specific business rules, kept apart from tree traversal.

These tables were reverse-engineered from how HLTV renders its pages and
are expected to change when the site does. Nothing here touches the DOM.
"""

import re

from hltv.exceptions import UnrecognizedSchemaVariant
from hltv.models import MatchFormat, MatchScore, MatchStatus

# Number of map holders on a match page -> format
MAP_COUNT_FORMATS: dict[int, MatchFormat] = {
    1: MatchFormat.BO1,
    3: MatchFormat.BO3,
    5: MatchFormat.BO5,
    7: MatchFormat.BO7,
}

# Exact countdown texts; anything else (timers, dates) means upcoming
STATUS_TEXTS: dict[str, MatchStatus] = {
    "Match over": MatchStatus.FINISHED,
    "LIVE": MatchStatus.LIVE,
}

# Map name / round counter shown for maps that are not decided or played
PLACEHOLDER_TOKENS = frozenset({"TBA", "-"})

# A bo1 shows its round score where a series shows maps won. No series
# reaches 9 map wins, so a larger leading counter must be a round score.
BO1_ROUND_THRESHOLD = 8

_FORMAT_CODE = re.compile(r"^bo(\d+)$", re.IGNORECASE)


def format_from_map_count(count: int) -> MatchFormat:
    """Infer the format from the number of map holders on a match page.

    Raises:
        UnrecognizedSchemaVariant: If ``count`` is not 1, 3, 5 or 7.
    """
    try:
        return MAP_COUNT_FORMATS[count]
    except KeyError:
        raise UnrecognizedSchemaVariant(
            f"Unexpected number of map holders: {count}"
        ) from None


def format_from_code(code: str | None) -> MatchFormat:
    """Parse a listing format code such as ``bo3``; Bo1 for anything else.

    Bo1 entries on the listings show the map name (or ``def`` for
    forfeits) in place of a code, hence the default.
    """
    if not code:
        return MatchFormat.BO1
    m = _FORMAT_CODE.match(code.strip())
    if not m:
        return MatchFormat.BO1
    try:
        return MatchFormat(int(m.group(1)))
    except ValueError:
        return MatchFormat.BO1


def status_from_text(text: str | None) -> MatchStatus:
    """Classify the countdown text of a match page."""
    if text is None:
        return MatchStatus.UPCOMING
    return STATUS_TEXTS.get(text.strip(), MatchStatus.UPCOMING)


def is_placeholder(text: str | None) -> bool:
    return text is None or text.strip() in PLACEHOLDER_TOKENS


def normalize_series_score(team1: int, team2: int) -> MatchScore:
    """Turn the two header counters into a maps-won score.

    If either counter exceeds BO1_ROUND_THRESHOLD and leads, the numbers
    are a bo1 round score and collapse to 1-0 or 0-1. A lopsided map
    result of a longer series (16-2) would be collapsed the same way.
    """
    if team1 > BO1_ROUND_THRESHOLD and team1 > team2:
        return MatchScore(team1_maps=1, team2_maps=0)
    if team2 > BO1_ROUND_THRESHOLD and team2 > team1:
        return MatchScore(team1_maps=0, team2_maps=1)
    return MatchScore(team1_maps=team1, team2_maps=team2)
