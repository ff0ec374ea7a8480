"""Tests for the team profile page converter."""

from pathlib import Path

import pytest

from hltv.converters import parse_team_page
from hltv.exceptions import AttributeMissing, StructureNotFound, ValueParseFailure
from hltv.models import Player

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


def load_fixture(filename: str) -> str:
    """Load an HTML fixture, skipping the test if it is missing."""
    path = FIXTURES_DIR / filename
    if not path.exists():
        pytest.skip(f"Fixture HTML not found: {path}")
    return path.read_text(encoding="utf-8")


def _team_html(roster: str = "", ranking: str = "#1", team_id: str = "1") -> str:
    return f"""
    <html><head><link rel="canonical" href="https://www.hltv.org/team/{team_id}/x"></head>
    <body><div class="teamProfile">
      <h1 class="profile-team-name">Team</h1>
      <div class="bodyshot-team">{roster}</div>
      <div class="profile-team-stat"><b>World ranking</b><span class="right">{ranking}</span></div>
    </div></body></html>
    """


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
class TestFivePlayerTeam:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.page = parse_team_page(load_fixture("team_five.html"))

    def test_identity(self):
        assert self.page.id == 6665
        assert self.page.name == "Astralis"
        assert self.page.logo_url == "https://img-cdn.hltv.org/teamlogo/astralis.svg"

    def test_ranking(self):
        assert self.page.ranking == 3

    def test_roster(self):
        assert self.page.players == (
            Player(id=7398, nickname="dupreeh"),
            Player(id=7592, nickname="device"),
            Player(id=4954, nickname="Xyp9x"),
            Player(id=9032, nickname="Magisk"),
            Player(id=7412, nickname="gla1ve"),
        )


class TestSixPlayerTeam:

    def test_six_players_valid(self):
        page = parse_team_page(load_fixture("team_six.html"))
        assert page.id == 9565
        assert page.ranking == 5
        assert len(page.players) == 6
        assert page.players[-1] == Player(id=14176, nickname="misutaaa")


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------
class TestTeamPageEdgeCases:

    def test_unranked(self):
        assert parse_team_page(_team_html(ranking="-")).ranking is None

    @pytest.mark.parametrize("ranking", ["#x", "#0", "3"])
    def test_malformed_ranking_ignored(self, ranking):
        assert parse_team_page(_team_html(ranking=ranking)).ranking is None

    def test_small_roster_and_no_logo(self):
        roster = '<a class="col-custom" href="/player/5/x" title="solo"></a>'
        page = parse_team_page(_team_html(roster))
        assert page.players == (Player(id=5, nickname="solo"),)
        assert page.logo_url == ""

    def test_roster_entry_without_title_fails(self):
        roster = '<a class="col-custom" href="/player/5/x"></a>'
        with pytest.raises(AttributeMissing):
            parse_team_page(_team_html(roster))

    def test_roster_entry_with_bad_id_fails(self):
        roster = '<a class="col-custom" href="/player/five/x" title="solo"></a>'
        with pytest.raises(ValueParseFailure):
            parse_team_page(_team_html(roster))

    def test_non_numeric_team_id(self):
        with pytest.raises(ValueParseFailure):
            parse_team_page(_team_html(team_id="astralis"))

    def test_not_a_team_page(self):
        with pytest.raises(StructureNotFound):
            parse_team_page(load_fixture("match_finished_bo3.html"))
