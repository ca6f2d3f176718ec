"""
Text-to-speech provider.
"""

import io
import wave
from typing import Optional

import httpx
import structlog

from .base import SpeechSynthesizer, SynthesisError, SynthesisResult

logger = structlog.get_logger(__name__)


def wav_duration(audio_data: bytes) -> float:
    """Duration in seconds from a WAV header."""
    try:
        with wave.open(io.BytesIO(audio_data), "rb") as wav_file:
            frames = wav_file.getnframes()
            rate = wav_file.getframerate()
            frame_size = wav_file.getsampwidth() * wav_file.getnchannels()
    except (wave.Error, EOFError) as e:
        raise SynthesisError("Synthesized audio is not a valid WAV file") from e

    # Streamed WAV headers may carry a bogus frame count; fall back to size.
    if frames <= 0 or frames * frame_size > len(audio_data):
        frames = max(len(audio_data) - 44, 0) // max(frame_size, 1)

    return frames / float(rate) if rate else 0.0


class WatsonTextToSpeech(SpeechSynthesizer):
    """Watson Text to Speech (v1) synthesizer producing WAV audio."""

    def __init__(
        self,
        api_key: str,
        voice: str = "en-US_MichaelVoice",
        url: str = "https://stream.watsonplatform.net/text-to-speech/api",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.voice = voice
        self.url = url.rstrip("/")
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

    async def synthesize(self, text: str) -> SynthesisResult:
        client = await self._get_client()
        try:
            response = await client.post(
                "/v1/synthesize",
                params={"voice": self.voice},
                headers={"Accept": "audio/wav"},
                json={"text": text},
            )
        except httpx.HTTPError as e:
            raise SynthesisError("Failed to reach text-to-speech", details={"error": str(e)}) from e

        if response.status_code != 200:
            raise SynthesisError(
                f"Text-to-speech error: {response.status_code}",
                details={"body": response.text[:200]},
            )

        audio = response.content
        return SynthesisResult(text=text, audio_data=audio, duration_seconds=wav_duration(audio))

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
