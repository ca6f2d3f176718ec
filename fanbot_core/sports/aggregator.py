"""
Data aggregation with a readiness barrier.

Team list, standings and a seven-day schedule window are loaded
concurrently. The conversation may only begin once all three are in place;
ReadinessBarrier is the awaitable gate for that.
"""

import asyncio
from datetime import date
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

import structlog

from .base import (
    SCHEDULE_WINDOW_DAYS,
    FatalLoadError,
    Feed,
    ProviderError,
    ScheduleFragment,
    StandingEntry,
    Team,
    TransientFetchFailure,
    window_days,
)
from .client import SportsDataProvider
from .merger import merge_schedule

if TYPE_CHECKING:
    from ..session import SessionState

logger = structlog.get_logger(__name__)


# =============================================================================
# Readiness Barrier
# =============================================================================


class ReadinessBarrier:
    """
    Gate on three independent feeds plus a schedule-day counter.

    Every state change and the all-ready check happen in one synchronous
    step, so interleaved completions on the event loop can neither
    double-count nor fire the ready callback twice.
    """

    def __init__(
        self,
        target_days: int = SCHEDULE_WINDOW_DAYS,
        on_ready: Optional[Callable[[], None]] = None,
    ):
        self.target_days = target_days
        self._flags: Dict[Feed, bool] = {feed: False for feed in Feed}
        self._days_collected = 0
        self._late_days = 0
        self._ready = asyncio.Event()
        self._on_ready = on_ready
        self._fired = False

    @property
    def days_collected(self) -> int:
        return self._days_collected

    @property
    def is_ready(self) -> bool:
        return self._fired

    def is_feed_ready(self, feed: Feed) -> bool:
        return self._flags[feed]

    def record_day(self) -> int:
        """Count one finished schedule-day request (success or failure)."""
        if self._days_collected >= self.target_days:
            self._late_days += 1
            logger.warning("schedule_day_after_window_complete", late=self._late_days)
            return self._days_collected
        self._days_collected += 1
        return self._days_collected

    def mark_ready(self, feed: Feed) -> None:
        """Flip one feed's flag and re-check the barrier."""
        if feed is Feed.SCHEDULE and self._days_collected < self.target_days:
            raise ValueError(
                f"Schedule cannot be ready after {self._days_collected} "
                f"of {self.target_days} days"
            )
        self._flags[feed] = True
        logger.info("feed_ready", feed=feed.value)
        self._check()

    def _check(self) -> None:
        if self._fired or not all(self._flags.values()):
            return
        self._fired = True
        self._ready.set()
        logger.info("all_feeds_ready")
        if self._on_ready:
            self._on_ready()

    async def wait(self) -> None:
        """Block until every feed is ready."""
        await self._ready.wait()


# =============================================================================
# Data Aggregator
# =============================================================================


class DataAggregator:
    """Loads teams, standings and the schedule window into a session."""

    def __init__(self, provider: SportsDataProvider, session: "SessionState"):
        self.provider = provider
        self.session = session

    @property
    def barrier(self) -> ReadinessBarrier:
        return self.session.barrier

    async def load_all(self) -> None:
        """
        Load all three feeds concurrently.

        Raises:
            FatalLoadError: If the team list, the standings, or the schedule
                window as a whole could not be loaded
        """
        results = await asyncio.gather(
            self._load_teams(),
            self._load_standings(),
            self._load_schedule(),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, FatalLoadError):
                raise result
            if isinstance(result, BaseException):
                raise FatalLoadError(f"Unexpected load failure: {result}") from result

    async def _load_teams(self) -> None:
        try:
            raw = await self.provider.fetch_teams()
            teams = [Team.from_provider(item) for item in raw]
        except (ProviderError, KeyError, TypeError) as e:
            logger.error("teams_load_failed", error=str(e))
            raise FatalLoadError("Error loading MLB team info", feed=Feed.TEAMS) from e

        self.session.teams = teams
        logger.info("teams_retrieved", count=len(teams))
        self.barrier.mark_ready(Feed.TEAMS)

    async def _load_standings(self) -> None:
        try:
            raw = await self.provider.fetch_standings()
            standings = [StandingEntry.from_provider(item) for item in raw]
        except (ProviderError, KeyError, TypeError) as e:
            logger.error("standings_load_failed", error=str(e))
            raise FatalLoadError("Error loading MLB standings", feed=Feed.STANDINGS) from e

        self.session.standings = standings
        logger.info("standings_retrieved", count=len(standings))
        self.barrier.mark_ready(Feed.STANDINGS)

    async def _load_schedule(self) -> None:
        reference = self.session.reference_date
        days = window_days(reference, self.barrier.target_days)

        # All day requests go out at once and complete in any order.
        results = await asyncio.gather(*(self._fetch_day(day) for day in days))
        fragments: List[ScheduleFragment] = [f for f in results if f is not None]

        self.session.schedule = merge_schedule(fragments, reference, len(days))
        logger.info(
            "schedule_retrieved",
            days_requested=len(days),
            days_with_games=len(fragments),
            games=len(self.session.schedule),
        )
        self.barrier.mark_ready(Feed.SCHEDULE)

    async def _fetch_day(self, day: date) -> Optional[ScheduleFragment]:
        try:
            raw = await self.provider.fetch_games_by_date(day)
            fragment = ScheduleFragment.from_provider(raw, day=day.isoformat())
        except (ProviderError, KeyError, TypeError) as e:
            failure = TransientFetchFailure(
                f"Unable to retrieve schedule for {day.isoformat()}",
                day=day,
                details={"error": str(e)},
            )
            logger.warning("schedule_day_failed", **failure.to_dict())
            return None
        finally:
            self.barrier.record_day()

        if len(fragment) == 0:
            logger.info("schedule_day_retrieved", day=day.isoformat(), games=0, note="NO GAMES FOUND")
            return None

        logger.info("schedule_day_retrieved", day=fragment.day[:10], games=len(fragment))
        return fragment
