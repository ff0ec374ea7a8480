"""Enumerated variants shared by the HLTV domain records."""

from enum import Enum


class MatchFormat(Enum):
    """Best-of-N format. The value is the maximum number of maps played."""

    BO1 = 1
    BO3 = 3
    BO5 = 5
    BO7 = 7

    @property
    def wins_needed(self) -> int:
        """Maps a team must win to take the series (bo3 -> 2)."""
        return (self.value + 1) // 2


class MatchStatus(str, Enum):
    """Current status of a match."""

    UPCOMING = "upcoming"
    LIVE = "live"
    FINISHED = "finished"


class WhichTeam(str, Enum):
    """Refers to the first or second team in HLTV display order."""

    FIRST = "first"
    SECOND = "second"
    NONE = "none"


class EventTypeFilter(str, Enum):
    """Event type filter used by the results and upcoming listings."""

    ALL = "All"
    LAN = "Lan"
    ONLINE = "Online"


class Map(str, Enum):
    """Counter-Strike maps listed on HLTV, keyed by their display name."""

    UNKNOWN = "Unknown"
    CACHE = "Cache"
    SEASON = "Season"
    DUST2 = "Dust2"
    MIRAGE = "Mirage"
    INFERNO = "Inferno"
    NUKE = "Nuke"
    TRAIN = "Train"
    COBBLESTONE = "Cobblestone"
    OVERPASS = "Overpass"
    TUSCAN = "Tuscan"
    VERTIGO = "Vertigo"
    ANCIENT = "Ancient"
    ANUBIS = "Anubis"

    @classmethod
    def from_name(cls, name: str | None) -> "Map":
        """Map a display name ("Dust2") to a Map, UNKNOWN when unrecognized."""
        if not name:
            return cls.UNKNOWN
        try:
            return cls(name.strip())
        except ValueError:
            return cls.UNKNOWN

    @property
    def code(self) -> str:
        """Map code used in HLTV query strings, e.g. ``de_inferno``."""
        if self is Map.UNKNOWN:
            return "n/a"
        return f"de_{self.value.lower()}"
