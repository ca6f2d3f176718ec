"""
News headlines for a team, from a Watson Discovery news collection.
"""

from typing import Iterable, List, Optional

import httpx
import structlog

from .base import HeadlineSource, HeadlineSourceError

logger = structlog.get_logger(__name__)


def dedupe_headlines(headlines: Iterable[str], limit: int) -> List[str]:
    """First `limit` distinct headlines (exact match), in order."""
    unique: List[str] = []
    for headline in headlines:
        if len(unique) >= limit:
            break
        if headline and headline not in unique:
            unique.append(headline)
    return unique


class DiscoveryHeadlineSource(HeadlineSource):
    """Queries a Discovery (v1) collection; each headline is "title - url"."""

    def __init__(
        self,
        api_key: str,
        environment_id: str,
        collection_id: str,
        url: str = "https://gateway.watsonplatform.net/discovery/api",
        version: str = "2018-03-05",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.environment_id = environment_id
        self.collection_id = collection_id
        self.url = url.rstrip("/")
        self.version = version
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.url,
                auth=("apikey", self.api_key),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def search(self, query: str, count: int) -> List[str]:
        client = await self._get_client()
        path = f"/v1/environments/{self.environment_id}/collections/{self.collection_id}/query"
        try:
            response = await client.get(
                path,
                params={"version": self.version, "query": query, "count": count},
            )
        except httpx.HTTPError as e:
            raise HeadlineSourceError("Failed to reach Discovery", details={"error": str(e)}) from e

        if response.status_code != 200:
            raise HeadlineSourceError(
                f"Discovery error: {response.status_code}",
                details={"body": response.text[:200]},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise HeadlineSourceError("Invalid JSON from Discovery") from e

        results = (data.get("results") or []) if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise HeadlineSourceError("Unexpected Discovery response", details={"body": response.text[:200]})

        return [
            f"{item.get('title', '')} - {item.get('url', '')}"
            for item in results
            if isinstance(item, dict) and item.get("title")
        ]

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
