"""Pydantic v2 models for the match detail page.

MatchPage validates the series score against the match format.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Self

from .enums import Map, MatchFormat, MatchStatus
from .team import Player, Team


class Event(BaseModel):
    """Event a match belongs to."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)  # from /events/{id}/ in the event link
    name: str = Field(min_length=1)


class Stats(BaseModel):
    """Performance metrics of one player over all maps of a match."""

    model_config = ConfigDict(frozen=True)

    kills: int = Field(ge=0)
    deaths: int = Field(ge=0)
    adr: float = Field(ge=0.0)  # average damage per round
    kast: float = Field(ge=0.0, le=100.0)  # percentage, '%' stripped
    rating: float = Field(ge=0.0)


class Performance(BaseModel):
    """A player paired with their stats line."""

    model_config = ConfigDict(frozen=True)

    player: Player
    stats: Stats


class MapScore(BaseModel):
    """Result of a single map, e.g. 16-14."""

    model_config = ConfigDict(frozen=True)

    map: Map
    team1_rounds: int = Field(ge=0)
    team2_rounds: int = Field(ge=0)


class MatchScore(BaseModel):
    """Number of maps won by each team, e.g. 2-1. Bo1s are 1-0 or 0-1."""

    model_config = ConfigDict(frozen=True)

    team1_maps: int = Field(ge=0)
    team2_maps: int = Field(ge=0)


class MatchPage(BaseModel):
    """Everything extracted from an HLTV match detail page."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)
    status: MatchStatus
    team1: Team | None = None  # None until the fixture is decided
    team2: Team | None = None
    event: Event
    date: datetime  # scheduled start, UTC
    format: MatchFormat
    score: MatchScore | None = None  # None before the match starts
    # Played maps only; placeholders (TBA, unplayed) are never included.
    maps: tuple[MapScore, ...] = ()
    stats: tuple[Performance, ...] = ()

    @model_validator(mode="after")
    def check_score_within_format(self) -> Self:
        """Neither team can win more maps than the format requires.

        Bo1s are skipped: a live bo1 header shows rounds (e.g. 7-5) below
        the threshold that collapses it to a map score.
        """
        if self.score is not None and self.format is not MatchFormat.BO1:
            needed = self.format.wins_needed
            if self.score.team1_maps > needed or self.score.team2_maps > needed:
                raise ValueError(
                    f"Score {self.score.team1_maps}-{self.score.team2_maps} "
                    f"exceeds max wins ({needed}) for {self.format.name}"
                )
        return self
