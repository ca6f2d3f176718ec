"""
Sentiment analysis.

The user's feeling about their team is sent to a tone analyzer and the
strongest emotion tone becomes the context's emotion value.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import httpx
import structlog

from .base import ToneAnalysisError

logger = structlog.get_logger(__name__)

DEFAULT_EMOTION = "default"
DEFAULT_TONE_THRESHOLD = 0.01


@dataclass(frozen=True)
class ToneScore:
    """One scored tone category."""

    tone_id: str
    score: float


def dominant_tone(
    tones: Sequence[ToneScore],
    threshold: float = DEFAULT_TONE_THRESHOLD,
) -> ToneScore:
    """
    Pick the highest scoring tone.

    A tone must score strictly above threshold; otherwise the result is
    ("default", threshold). Ties keep the first tone seen.
    """
    best = ToneScore(tone_id=DEFAULT_EMOTION, score=threshold)
    for tone in tones:
        if tone.score > best.score:
            best = tone
    return best


class ToneAnalyzer(ABC):
    """Sentiment analysis interface."""

    @abstractmethod
    async def analyze(self, text: str) -> List[ToneScore]:
        """Return scored emotion tones for text."""

    async def detect_emotion(self, text: str, threshold: float = DEFAULT_TONE_THRESHOLD) -> str:
        """Dominant emotion of text, or "default"."""
        return dominant_tone(await self.analyze(text), threshold).tone_id

    async def close(self) -> None:
        pass


class WatsonToneAnalyzer(ToneAnalyzer):
    """Watson Tone Analyzer (v3) client; reads the emotion tone category."""

    def __init__(
        self,
        api_key: str,
        url: str = "https://gateway.watsonplatform.net/tone-analyzer/api",
        version: str = "2017-09-21",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
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

    async def analyze(self, text: str) -> List[ToneScore]:
        client = await self._get_client()
        try:
            response = await client.post(
                "/v3/tone",
                params={"version": self.version, "sentences": "false"},
                json={"text": text or ""},
            )
        except httpx.HTTPError as e:
            raise ToneAnalysisError("Failed to reach tone analyzer", details={"error": str(e)}) from e

        if response.status_code != 200:
            raise ToneAnalysisError(
                f"Tone analyzer error: {response.status_code}",
                details={"body": response.text[:200]},
            )

        try:
            return parse_tones(response.json())
        except (ValueError, KeyError, TypeError, IndexError, AttributeError) as e:
            raise ToneAnalysisError("Unexpected tone analyzer response") from e

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None


def parse_tones(data: Dict[str, Any]) -> List[ToneScore]:
    """Tones of the first (emotion) category of a document_tone response."""
    categories = data["document_tone"].get("tone_categories") or []
    if categories:
        tones = categories[0].get("tones") or []
    else:
        # 2017-09-21 responses list tones directly.
        tones = data["document_tone"].get("tones") or []
    return [ToneScore(tone_id=t["tone_id"], score=float(t["score"])) for t in tones]
