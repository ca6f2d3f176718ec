"""Shared pytest fixtures for testing."""

import asyncio
import json
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from unittest.mock import AsyncMock, MagicMock

import pytest

from fanbot_core.config import DEFAULT_FIXTURE_DIR
from fanbot_core.conversation import ConversationContext, DialogEngine, DialogReply, ToneAnalyzer, ToneScore
from fanbot_core.notifications import HeadlineSource, SMSDeliveryError, SMSGateway
from fanbot_core.session import SessionState
from fanbot_core.sports import ProviderError, SportsDataProvider, StandingEntry, Team
from fanbot_core.voice import Speaker

OFF_SEASON_DATE = date(2017, 9, 28)


# =============================================================================
# Test Doubles
# =============================================================================


class InMemorySportsData(SportsDataProvider):
    """Provider serving canned feeds, with optional failures and delays."""

    def __init__(
        self,
        teams: Optional[List[Dict[str, Any]]] = None,
        standings: Optional[List[Dict[str, Any]]] = None,
        games_by_day: Optional[Dict[date, List[Dict[str, Any]]]] = None,
        fail_teams: bool = False,
        fail_standings: bool = False,
        fail_days: Optional[List[date]] = None,
        delays: Optional[Dict[date, float]] = None,
    ):
        self.teams = teams or []
        self.standings = standings or []
        self.games_by_day = games_by_day or {}
        self.fail_teams = fail_teams
        self.fail_standings = fail_standings
        self.fail_days = fail_days or []
        self.delays = delays or {}
        self.requested_days: List[date] = []
        self.completed_days: List[date] = []

    async def fetch_teams(self) -> List[Dict[str, Any]]:
        await asyncio.sleep(0)
        if self.fail_teams:
            raise ProviderError("teams unavailable", status_code=503)
        return self.teams

    async def fetch_standings(self) -> List[Dict[str, Any]]:
        await asyncio.sleep(0)
        if self.fail_standings:
            raise ProviderError("standings unavailable", status_code=503)
        return self.standings

    async def fetch_games_by_date(self, day: date) -> List[Dict[str, Any]]:
        self.requested_days.append(day)
        await asyncio.sleep(self.delays.get(day, 0))
        self.completed_days.append(day)
        if day in self.fail_days:
            raise ProviderError(f"no data for {day}", status_code=500)
        return self.games_by_day.get(day, [])


class ScriptedDialogEngine(DialogEngine):
    """
    Dialog engine returning scripted replies.

    Each script entry is either a (context_updates, text) tuple or a callable
    taking (utterance, context dict) and returning one.
    """

    def __init__(self, script: List[Union[tuple, Callable]]):
        self.script = list(script)
        self.calls: List[Dict[str, Any]] = []

    async def send(self, utterance: str, context: ConversationContext) -> DialogReply:
        sent = context.to_dict()
        self.calls.append({"utterance": utterance, "context": sent})
        step = self.script.pop(0) if self.script else ({}, "")
        if callable(step):
            step = step(utterance, sent)
        updates, text = step
        sent.update(updates)
        return DialogReply(context=ConversationContext(sent), text=text)


class StaticToneAnalyzer(ToneAnalyzer):
    def __init__(self, tones: List[ToneScore]):
        self.tones = tones
        self.texts: List[str] = []

    async def analyze(self, text: str) -> List[ToneScore]:
        self.texts.append(text)
        return self.tones


class RecordingSMSGateway(SMSGateway):
    def __init__(self, fail_bodies: Optional[List[str]] = None):
        self.sent: List[Dict[str, str]] = []
        self.fail_bodies = fail_bodies or []

    async def send(self, to: str, body: str) -> str:
        if body in self.fail_bodies:
            raise SMSDeliveryError("carrier rejected message")
        self.sent.append({"to": to, "body": body})
        return f"SM{len(self.sent):032d}"


class StaticHeadlineSource(HeadlineSource):
    def __init__(self, headlines: List[str]):
        self.headlines = headlines
        self.queries: List[str] = []

    async def search(self, query: str, count: int) -> List[str]:
        self.queries.append(query)
        return self.headlines[:count]


# =============================================================================
# Data Fixtures
# =============================================================================


def _load_fixture(name: str) -> Any:
    with (Path(DEFAULT_FIXTURE_DIR) / name).open(encoding="utf-8") as fh:
        return json.load(fh)


@pytest.fixture
def reference_date() -> date:
    return OFF_SEASON_DATE


@pytest.fixture
def raw_teams() -> List[Dict[str, Any]]:
    return _load_fixture("mlb-teams.json")


@pytest.fixture
def raw_standings() -> List[Dict[str, Any]]:
    return _load_fixture("mlb-standings.json")


@pytest.fixture
def raw_schedule() -> List[List[Dict[str, Any]]]:
    return _load_fixture("mlb-schedule.json")


@pytest.fixture
def teams(raw_teams) -> List[Team]:
    return [Team.from_provider(item) for item in raw_teams]


@pytest.fixture
def standings(raw_standings) -> List[StandingEntry]:
    return [StandingEntry.from_provider(item) for item in raw_standings]


def make_game(day: str, away: str, home: str, time: str = "19:05") -> Dict[str, Any]:
    """Provider game record for YYYY-MM-DD day."""
    return {
        "Day": f"{day}T00:00:00",
        "DateTime": f"{day}T{time}:00",
        "AwayTeam": away,
        "HomeTeam": home,
    }


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def session(reference_date) -> SessionState:
    return SessionState.create(reference_date)


@pytest.fixture
def speaker() -> MagicMock:
    mock = MagicMock(spec=Speaker)
    mock.speak = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def sms_gateway() -> RecordingSMSGateway:
    return RecordingSMSGateway()


@pytest.fixture
def headline_source() -> StaticHeadlineSource:
    return StaticHeadlineSource([
        "Red Sox clinch AL East - https://news.example.com/1",
        "Red Sox clinch AL East - https://news.example.com/1",
        "Sale sets strikeout record - https://news.example.com/2",
        "Pomeranz to start Game 2 - https://news.example.com/3",
    ])


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def game():
    """Factory for provider game records."""
    return make_game


@pytest.fixture
def sports_data():
    """Factory for in-memory sports data providers."""
    return InMemorySportsData


@pytest.fixture
def dialog_engine():
    """Factory for scripted dialog engines."""
    return ScriptedDialogEngine


@pytest.fixture
def tone_analyzer():
    """Factory for fixed-result tone analyzers."""
    return StaticToneAnalyzer
