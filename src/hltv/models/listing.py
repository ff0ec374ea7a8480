"""Pydantic v2 models for entries of the results and upcoming listings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import MatchFormat, WhichTeam
from .match import MatchScore
from .team import Team


class MatchResult(BaseModel):
    """A concluded match from the results listing.

    The listing carries team names only, no team IDs.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)
    winner: WhichTeam
    team1_name: str = Field(min_length=1)
    team2_name: str = Field(min_length=1)
    score: MatchScore
    event: str = Field(min_length=1)
    format: MatchFormat


class UpcomingMatch(BaseModel):
    """A scheduled match from the upcoming-matches listing."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)
    stars: int = Field(default=0, ge=0)  # HLTV prestige rating, 0-5
    team1: Team | None = None
    team2: Team | None = None
    event_name: str = Field(min_length=1)
    format: MatchFormat
    date: datetime
