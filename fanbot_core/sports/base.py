"""
Sports Data - Base Types

Teams, standings, games and per-day schedule fragments as returned by the
sports-data provider, plus the errors raised while loading them.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..errors import FanbotError


# =============================================================================
# Constants
# =============================================================================

SCHEDULE_WINDOW_DAYS = 7

# Positions within a division, in provider order.
DIVISION_PLACES: Tuple[str, ...] = ("first", "second", "third", "fourth", "last")

UNKNOWN_PLACE = "unknown"


class Feed(str, Enum):
    """Independent data feeds gated by the readiness barrier."""

    TEAMS = "teams"
    STANDINGS = "standings"
    SCHEDULE = "schedule"


def month_day(value: str) -> str:
    """Extract MM-DD from a provider ISO date/datetime string (YYYY-MM-DD...)."""
    return value[5:10]


def window_days(reference: date, days: int = SCHEDULE_WINDOW_DAYS) -> List[date]:
    """Calendar days of the schedule window, starting the day after reference."""
    return [reference + timedelta(days=offset) for offset in range(1, days + 1)]


# =============================================================================
# Data Model
# =============================================================================


@dataclass(frozen=True)
class Team:
    """A team from the provider's team list."""

    key: str
    name: str
    city: str = ""

    @classmethod
    def from_provider(cls, data: Dict[str, Any]) -> "Team":
        return cls(
            key=data["Key"],
            name=data["Name"],
            city=data.get("City") or "",
        )


@dataclass(frozen=True)
class StandingEntry:
    """
    One row of the season standings.

    Rank within the division is positional: entries for a division are
    contiguous and ordered top to bottom in the provider response.
    """

    league: str
    division: str
    team_name: str
    team_key: str = ""
    wins: int = 0
    losses: int = 0

    @property
    def division_key(self) -> str:
        return self.league + self.division

    @classmethod
    def from_provider(cls, data: Dict[str, Any]) -> "StandingEntry":
        return cls(
            league=data["League"],
            division=data["Division"],
            team_name=data["Name"],
            team_key=data.get("Key") or "",
            wins=data.get("Wins") or 0,
            losses=data.get("Losses") or 0,
        )


@dataclass(frozen=True, order=True)
class Game:
    """A scheduled game. date is MM-DD, time is HH:MM (or TBD)."""

    date: str
    time: str
    home_team_key: str
    away_team_key: str

    def involves(self, team_key: str) -> bool:
        return team_key in (self.home_team_key, self.away_team_key)

    def describe_for(self, team_key: str) -> str:
        """Format the game from one team's point of view."""
        if self.away_team_key == team_key:
            return f"{self.date} {self.time} @ {self.home_team_key}"
        return f"{self.date} {self.time} vs. {self.away_team_key}"

    @classmethod
    def from_provider(cls, data: Dict[str, Any]) -> "Game":
        day = data.get("Day") or ""
        start = data.get("DateTime") or ""
        return cls(
            date=month_day(start or day),
            time=start[11:16] if start else "TBD",
            home_team_key=data["HomeTeam"],
            away_team_key=data["AwayTeam"],
        )


@dataclass(frozen=True)
class ScheduleFragment:
    """One calendar day's games, keyed by the provider date string."""

    day: str
    games: Tuple[Game, ...] = ()

    @property
    def month_day(self) -> str:
        return month_day(self.day)

    def __len__(self) -> int:
        return len(self.games)

    @classmethod
    def from_provider(cls, games: List[Dict[str, Any]], day: str = "") -> "ScheduleFragment":
        """Build a fragment from a games-by-date response (a list of games)."""
        if games:
            day = games[0].get("Day") or day
        return cls(day=day, games=tuple(Game.from_provider(g) for g in games))


@dataclass
class MergedSchedule:
    """Date-ordered games spanning the schedule window."""

    games: List[Game] = field(default_factory=list)
    days: List[str] = field(default_factory=list)

    def __iter__(self) -> Iterator[Game]:
        return iter(self.games)

    def __len__(self) -> int:
        return len(self.games)

    def games_on(self, day: str) -> List[Game]:
        """Games on a MM-DD day, in merged order."""
        return [game for game in self.games if game.date == day]


# =============================================================================
# Exceptions
# =============================================================================


class SportsDataError(FanbotError):
    """Base exception for sports data operations."""


class ProviderError(SportsDataError):
    """The sports-data provider request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, code="PROVIDER_ERROR", **kwargs)
        self.status_code = status_code


class FatalLoadError(SportsDataError):
    """A required feed could not be retrieved; no conversation may start."""

    def __init__(self, message: str, feed: Optional[Feed] = None, **kwargs):
        super().__init__(message, code="FATAL_LOAD", **kwargs)
        self.feed = feed


class TransientFetchFailure(SportsDataError):
    """A single schedule day could not be retrieved."""

    def __init__(self, message: str, day: Optional[date] = None, **kwargs):
        super().__init__(message, code="TRANSIENT_FETCH", **kwargs)
        self.day = day


__all__ = [
    "SCHEDULE_WINDOW_DAYS",
    "DIVISION_PLACES",
    "UNKNOWN_PLACE",
    "Feed",
    "month_day",
    "window_days",
    "Team",
    "StandingEntry",
    "Game",
    "ScheduleFragment",
    "MergedSchedule",
    "SportsDataError",
    "ProviderError",
    "FatalLoadError",
    "TransientFetchFailure",
]
