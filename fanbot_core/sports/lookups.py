"""
Team lookups used during the conversation: current division standing and
the next few scheduled games.

Team names are matched by substring against what the user said, so
"the boston red sox" matches the provider name "Red Sox".
"""

from datetime import date
from typing import Optional, Sequence

import structlog

from .base import (
    DIVISION_PLACES,
    SCHEDULE_WINDOW_DAYS,
    UNKNOWN_PLACE,
    MergedSchedule,
    StandingEntry,
    Team,
    window_days,
)

logger = structlog.get_logger(__name__)

MAX_UPCOMING_GAMES = 5


def current_standing(team: str, standings: Optional[Sequence[StandingEntry]]) -> str:
    """
    Get the division place ("first" .. "last") of the named team.

    Returns "unknown" when no team matches, and also when the matching team
    sits below the fifth named place of its division.
    """
    if not team or not standings:
        return UNKNOWN_PLACE

    division = ""
    position = 0
    for entry in standings:
        if entry.division_key != division:
            division = entry.division_key
            position = 0
        else:
            position += 1

        if entry.team_name and entry.team_name in team:
            if position >= len(DIVISION_PLACES):
                logger.warning(
                    "division_rank_overflow",
                    team=entry.team_name,
                    division=division,
                    position=position + 1,
                )
                return UNKNOWN_PLACE
            return DIVISION_PLACES[position]

    return UNKNOWN_PLACE


def find_team_key(team: str, teams: Optional[Sequence[Team]]) -> str:
    """Short code of the first team whose name appears in team, or ""."""
    if not team:
        return ""
    for candidate in teams or ():
        if candidate.name and candidate.name in team:
            return candidate.key
    return ""


def upcoming_schedule(
    team: str,
    teams: Optional[Sequence[Team]],
    schedule: Optional[MergedSchedule],
    reference: date,
    max_games: int = MAX_UPCOMING_GAMES,
    max_days: int = SCHEDULE_WINDOW_DAYS,
) -> str:
    """
    Get the team's upcoming games as a multi-line string.

    At most one game is taken per day. The walk stops after max_games games
    or max_days days, whichever comes first (end of season).
    """
    team_key = find_team_key(team, teams)
    if not team_key or schedule is None:
        return f"No schedule data found for {team}"

    lines = [f"Upcoming schedule for the {team}:"]
    for day in window_days(reference, max_days):
        key = day.isoformat()[5:10]
        game = next(
            (g for g in schedule.games_on(key) if g.involves(team_key)),
            None,
        )
        if game is None:
            continue
        lines.append(game.describe_for(team_key))
        if len(lines) - 1 >= max_games:
            break

    text = "\n".join(lines) + "\n"
    logger.debug("upcoming_schedule", team=team, team_key=team_key, games=len(lines) - 1)
    return text
