"""Pydantic v2 models for teams, players and the team profile page."""

from pydantic import BaseModel, ConfigDict, Field


class Player(BaseModel):
    """Basic player information."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)  # from /player/{id}/ in the profile link
    nickname: str = Field(min_length=1)


class Team(BaseModel):
    """Basic information about a team."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)  # from /team/{id}/ in the team link
    name: str = Field(min_length=1)
    logo_url: str = ""
    alt_logo_url: str | None = None  # "night mode" logo, only some teams


class TeamPage(BaseModel):
    """Data found on a team's profile page."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)
    name: str = Field(min_length=1)
    ranking: int | None = Field(default=None, ge=1)  # None when unranked
    # Can be fewer than five, or six for teams carrying a substitute.
    players: tuple[Player, ...] = ()
    logo_url: str = ""
