"""Unit tests for standings and upcoming schedule lookups."""

from datetime import date

import pytest

from fanbot_core.sports import (
    Game,
    MergedSchedule,
    ScheduleFragment,
    StandingEntry,
    Team,
    current_standing,
    find_team_key,
    merge_schedule,
    upcoming_schedule,
)


def division(league: str, name: str, *teams: str):
    return [StandingEntry(league=league, division=name, team_name=team) for team in teams]


@pytest.fixture
def small_standings():
    return (
        division("AL", "East", "A", "B", "C", "D", "E")
        + division("AL", "Central", "F", "G", "H", "I", "J")
    )


class TestCurrentStanding:
    """Tests for current_standing."""

    @pytest.mark.parametrize(
        "team,place",
        [("A", "first"), ("B", "second"), ("C", "third"), ("D", "fourth"), ("E", "last")],
    )
    def test_places_within_division(self, small_standings, team, place):
        """Test positional rank inside a five team division."""
        assert current_standing(team, small_standings) == place

    def test_rank_restarts_per_division(self, small_standings):
        """Test the first team of the second division is first."""
        assert current_standing("F", small_standings) == "first"
        assert current_standing("H", small_standings) == "third"

    def test_unknown_team(self, small_standings):
        """Test a team that is not listed."""
        assert current_standing("Z", small_standings) == "unknown"

    def test_missing_inputs(self, small_standings):
        """Test empty team names and standings."""
        assert current_standing("", small_standings) == "unknown"
        assert current_standing("A", []) == "unknown"
        assert current_standing("A", None) == "unknown"

    def test_sixth_place_overflow(self):
        """Test a sixth team in a division reports unknown."""
        standings = division("NL", "West", "A", "B", "C", "D", "E", "F")

        assert current_standing("F", standings) == "unknown"
        assert current_standing("E", standings) == "last"

    def test_matches_name_inside_utterance(self, standings):
        """Test substring matching of the stored name in what the user said."""
        assert current_standing("the Boston Red Sox", standings) == "first"
        assert current_standing("Yankees", standings) == "second"
        assert current_standing("Giants", standings) == "last"

    def test_league_and_division_both_form_the_key(self):
        """Test same division name in two leagues is two divisions."""
        standings = division("AL", "East", "A", "B") + division("NL", "East", "C", "D")

        assert current_standing("C", standings) == "first"
        assert current_standing("D", standings) == "second"


class TestFindTeamKey:
    """Tests for find_team_key."""

    def test_name_match(self, teams):
        """Test resolving a spoken team name to its key."""
        assert find_team_key("Boston Red Sox", teams) == "BOS"
        assert find_team_key("Cubs", teams) == "CHC"

    def test_no_match(self, teams):
        """Test unresolvable names yield an empty key."""
        assert find_team_key("Montreal Expos", teams) == ""
        assert find_team_key("", teams) == ""
        assert find_team_key("Cubs", None) == ""


class TestUpcomingSchedule:
    """Tests for upcoming_schedule."""

    @pytest.fixture
    def reference(self):
        return date(2017, 9, 28)

    @pytest.fixture
    def lookup_teams(self):
        return [
            Team(key="BOS", name="Red Sox", city="Boston"),
            Team(key="NYY", name="Yankees", city="New York"),
        ]

    def week(self, reference, days, away="NYY", home="BOS"):
        fragments = []
        for offset in days:
            day = date.fromordinal(reference.toordinal() + offset).isoformat()
            games = (Game(date=day[5:10], time="19:10", home_team_key=home, away_team_key=away),)
            fragments.append(ScheduleFragment(day=day, games=games))
        return merge_schedule(fragments, reference)

    def test_caps_at_five_games(self, reference, lookup_teams):
        """Test a full week of games lists only five."""
        schedule = self.week(reference, range(1, 8))

        text = upcoming_schedule("Red Sox", lookup_teams, schedule, reference)

        lines = text.splitlines()
        assert lines[0] == "Upcoming schedule for the Red Sox:"
        assert len(lines) == 6
        assert lines[1] == "09-29 19:10 vs. NYY"
        assert lines[5] == "10-03 19:10 vs. NYY"
        assert text.endswith("\n")

    def test_end_of_season(self, reference, lookup_teams):
        """Test only three remaining games are listed."""
        schedule = self.week(reference, [1, 2, 3])

        text = upcoming_schedule("Red Sox", lookup_teams, schedule, reference)

        assert text.splitlines()[1:] == [
            "09-29 19:10 vs. NYY",
            "09-30 19:10 vs. NYY",
            "10-01 19:10 vs. NYY",
        ]

    def test_away_games(self, reference, lookup_teams):
        """Test games are described from the requested team's side."""
        schedule = self.week(reference, [2])

        text = upcoming_schedule("Yankees", lookup_teams, schedule, reference)

        assert text == "Upcoming schedule for the Yankees:\n09-30 19:10 @ BOS\n"

    def test_one_game_per_day(self, reference, lookup_teams):
        """Test a doubleheader contributes its first game only."""
        day = "2017-09-29"
        games = (
            Game(date="09-29", time="13:05", home_team_key="BOS", away_team_key="NYY"),
            Game(date="09-29", time="19:10", home_team_key="BOS", away_team_key="NYY"),
        )
        schedule = merge_schedule([ScheduleFragment(day=day, games=games)], reference)

        text = upcoming_schedule("Red Sox", lookup_teams, schedule, reference)

        assert text.splitlines()[1:] == ["09-29 13:05 vs. NYY"]

    def test_no_data(self, reference, lookup_teams):
        """Test unknown teams and missing schedules."""
        schedule = self.week(reference, [1])

        assert upcoming_schedule("Expos", lookup_teams, schedule, reference) == (
            "No schedule data found for Expos"
        )
        assert upcoming_schedule("Red Sox", lookup_teams, None, reference) == (
            "No schedule data found for Red Sox"
        )

    def test_no_games_in_window(self, reference, lookup_teams):
        """Test a known team without games yields only the header."""
        text = upcoming_schedule("Red Sox", lookup_teams, MergedSchedule(), reference)

        assert text == "Upcoming schedule for the Red Sox:\n"

    def test_fixture_snapshot(self, teams, reference, raw_schedule):
        """Test the saved snapshot yields the final three regular season games."""
        fragments = [ScheduleFragment.from_provider(day) for day in raw_schedule]
        schedule = merge_schedule(fragments, reference)

        text = upcoming_schedule("Red Sox", teams, schedule, reference)

        assert text == (
            "Upcoming schedule for the Red Sox:\n"
            "09-29 19:10 vs. HOU\n"
            "09-30 19:10 vs. HOU\n"
            "10-01 15:05 vs. HOU\n"
        )
