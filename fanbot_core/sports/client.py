"""
Sports-data provider clients.

SportsDataClient talks to the FantasyData MLB v2 JSON API. FixtureSportsData
serves the same three feeds from saved JSON files so the assistant can run
against a frozen historical snapshot.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import structlog

from .base import ProviderError

logger = structlog.get_logger(__name__)

MONTH_NAMES = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)


def provider_date(day: date, season: Optional[int] = None) -> str:
    """Format a day for the games-by-date path, e.g. 2017-SEP-29."""
    return f"{season or day.year}-{MONTH_NAMES[day.month - 1]}-{day.day:02d}"


class SportsDataProvider(ABC):
    """Read-only access to the three provider feeds (raw JSON)."""

    @abstractmethod
    async def fetch_teams(self) -> List[Dict[str, Any]]:
        """List of teams."""

    @abstractmethod
    async def fetch_standings(self) -> List[Dict[str, Any]]:
        """Current season standings, grouped by league and division."""

    @abstractmethod
    async def fetch_games_by_date(self, day: date) -> List[Dict[str, Any]]:
        """Games scheduled on one day (possibly empty)."""

    async def close(self) -> None:
        pass


class SportsDataClient(SportsDataProvider):
    """
    Async FantasyData MLB client.

    Authentication is a static subscription key sent with every request.
    """

    def __init__(
        self,
        subscription_key: str,
        season: int,
        base_url: str = "https://api.fantasydata.net/mlb/v2/JSON",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.subscription_key = subscription_key
        self.season = season
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Ocp-Apim-Subscription-Key": self.subscription_key},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def _get(self, path: str) -> List[Dict[str, Any]]:
        client = await self._get_client()
        try:
            response = await client.get(path)
        except httpx.HTTPError as e:
            raise ProviderError(
                f"Request to {path} failed: {e}",
                details={"path": path},
            ) from e

        if response.status_code != 200:
            raise ProviderError(
                f"Provider returned {response.status_code} for {path}",
                status_code=response.status_code,
                details={"path": path, "body": response.text[:200]},
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from {path}", details={"path": path}) from e

    async def fetch_teams(self) -> List[Dict[str, Any]]:
        return await self._get("/teams")

    async def fetch_standings(self) -> List[Dict[str, Any]]:
        return await self._get(f"/Standings/{self.season}")

    async def fetch_games_by_date(self, day: date) -> List[Dict[str, Any]]:
        return await self._get(f"/GamesByDate/{provider_date(day, self.season)}")

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


class FixtureSportsData(SportsDataProvider):
    """
    Frozen snapshot of the three feeds.

    Expects mlb-teams.json, mlb-standings.json and mlb-schedule.json in the
    fixture directory; the schedule file is a list of per-day game lists.
    """

    TEAMS_FILE = "mlb-teams.json"
    STANDINGS_FILE = "mlb-standings.json"
    SCHEDULE_FILE = "mlb-schedule.json"

    def __init__(self, fixture_dir: Path):
        self.fixture_dir = Path(fixture_dir)

    def _read(self, name: str) -> Any:
        path = self.fixture_dir / name
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, ValueError) as e:
            raise ProviderError(f"Unable to read fixture {path}: {e}") from e

    async def fetch_teams(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._read, self.TEAMS_FILE)

    async def fetch_standings(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._read, self.STANDINGS_FILE)

    async def fetch_games_by_date(self, day: date) -> List[Dict[str, Any]]:
        days = await asyncio.to_thread(self._read, self.SCHEDULE_FILE)
        key = day.isoformat()
        for games in days:
            if games and (games[0].get("Day") or "")[:10] == key:
                return games
        return []
