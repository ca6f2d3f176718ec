"""
Sports Data Module

Loading and querying of MLB data for the conversation:
- Provider clients (live API and frozen fixture snapshot)
- Readiness barrier and concurrent data aggregation
- Schedule merging of out-of-order day fragments
- Standing and upcoming-schedule lookups
"""

from .aggregator import DataAggregator, ReadinessBarrier
from .base import (
    DIVISION_PLACES,
    SCHEDULE_WINDOW_DAYS,
    UNKNOWN_PLACE,
    FatalLoadError,
    Feed,
    Game,
    MergedSchedule,
    ProviderError,
    ScheduleFragment,
    SportsDataError,
    StandingEntry,
    Team,
    TransientFetchFailure,
)
from .client import FixtureSportsData, SportsDataClient, SportsDataProvider, provider_date
from .lookups import current_standing, find_team_key, upcoming_schedule
from .merger import merge_schedule

__all__ = [
    "DIVISION_PLACES",
    "SCHEDULE_WINDOW_DAYS",
    "UNKNOWN_PLACE",
    "Feed",
    "Team",
    "StandingEntry",
    "Game",
    "ScheduleFragment",
    "MergedSchedule",
    "SportsDataError",
    "ProviderError",
    "FatalLoadError",
    "TransientFetchFailure",
    "SportsDataProvider",
    "SportsDataClient",
    "FixtureSportsData",
    "provider_date",
    "ReadinessBarrier",
    "DataAggregator",
    "merge_schedule",
    "current_standing",
    "find_team_key",
    "upcoming_schedule",
]
