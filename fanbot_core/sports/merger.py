"""
Schedule merging.

Each schedule day is requested separately and the responses arrive in
arbitrary order, so the week is rebuilt by walking the known day sequence
and picking the matching fragment for each day.
"""

from datetime import date
from typing import Iterable

import structlog

from .base import SCHEDULE_WINDOW_DAYS, MergedSchedule, ScheduleFragment, window_days

logger = structlog.get_logger(__name__)


def merge_schedule(
    fragments: Iterable[ScheduleFragment],
    reference: date,
    days: int = SCHEDULE_WINDOW_DAYS,
) -> MergedSchedule:
    """
    Merge per-day fragments into one date-ordered schedule.

    Days are compared on month-day only. The first fragment found for a day
    wins; a day with no fragment contributes nothing. Games keep the order
    they had inside their fragment.

    Args:
        fragments: Fragments in any order (empty fragments are ignored)
        reference: "Now"; the window starts the day after
        days: Window length

    Returns:
        MergedSchedule covering the matched days
    """
    # Stable candidate order so duplicate days resolve the same way
    # regardless of arrival order.
    candidates = sorted(
        (fragment for fragment in fragments if len(fragment) > 0),
        key=lambda fragment: (fragment.day, fragment.games),
    )

    merged = MergedSchedule()
    for day in window_days(reference, days):
        key = day.isoformat()[5:10]
        for fragment in candidates:
            if fragment.month_day == key:
                merged.games.extend(fragment.games)
                merged.days.append(key)
                break

    logger.debug(
        "schedule_merged",
        fragments=len(candidates),
        days=len(merged.days),
        games=len(merged.games),
    )
    return merged
