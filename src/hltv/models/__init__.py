"""Domain records produced by the page converters.

Re-exports all model classes for convenient import::

    from hltv.models import MatchPage, Team, MatchFormat, ...
"""

from .enums import EventTypeFilter, Map, MatchFormat, MatchStatus, WhichTeam
from .listing import MatchResult, UpcomingMatch
from .match import Event, MapScore, MatchPage, MatchScore, Performance, Stats
from .team import Player, Team, TeamPage

__all__ = [
    "EventTypeFilter",
    "Map",
    "MatchFormat",
    "MatchStatus",
    "WhichTeam",
    "Event",
    "MapScore",
    "MatchPage",
    "MatchScore",
    "Performance",
    "Stats",
    "Player",
    "Team",
    "TeamPage",
    "MatchResult",
    "UpcomingMatch",
]
