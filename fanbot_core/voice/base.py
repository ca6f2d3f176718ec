"""
Voice - Base Types and Interfaces

Speech collaborators used by the conversation loop: a push-based stream of
transcribed utterances, a microphone gate that is closed while the
assistant talks, speech synthesis and audio playback.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import structlog

from ..errors import FanbotError

logger = structlog.get_logger(__name__)


# =============================================================================
# Utterance Stream
# =============================================================================


class UtteranceStream:
    """
    Unbounded FIFO of recognized utterances.

    Producers push as speech is recognized; the conversation loop consumes
    one utterance at a time, so utterances recognized while a reply chain
    is still running wait their turn.
    """

    _CLOSED = object()

    def __init__(self) -> None:
        self._queue: "asyncio.Queue[object]" = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def push(self, text: str) -> bool:
        """Queue one utterance. Blank text is ignored."""
        if self._closed:
            return False
        text = (text or "").strip()
        if not text:
            return False
        self._queue.put_nowait(text)
        return True

    def close(self) -> None:
        """End the stream once queued utterances are consumed."""
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(self._CLOSED)

    def __aiter__(self) -> AsyncIterator[str]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        while True:
            item = await self._queue.get()
            if item is self._CLOSED:
                return
            yield item  # type: ignore[misc]


# =============================================================================
# Microphone Gate
# =============================================================================


class MicrophoneGate:
    """Closed while the assistant is speaking; reopens after a timed pause."""

    def __init__(self) -> None:
        self._open = asyncio.Event()
        self._open.set()
        self._resume_handle: Optional[asyncio.TimerHandle] = None

    @property
    def is_open(self) -> bool:
        return self._open.is_set()

    def pause_for(self, seconds: float) -> None:
        """Close the gate and reopen it after seconds."""
        loop = asyncio.get_running_loop()
        if self._resume_handle is not None:
            self._resume_handle.cancel()
        self._open.clear()
        logger.info("microphone_paused", seconds=round(seconds, 2))
        self._resume_handle = loop.call_later(max(seconds, 0.0), self.resume)

    def resume(self) -> None:
        self._resume_handle = None
        if not self._open.is_set():
            self._open.set()
            logger.info("microphone_resumed")

    async def wait_open(self) -> None:
        await self._open.wait()


# =============================================================================
# Synthesis and Playback
# =============================================================================


@dataclass
class SynthesisResult:
    """Synthesized speech clip."""

    text: str
    audio_data: bytes
    duration_seconds: float
    content_type: str = "audio/wav"


class SpeechSynthesizer(ABC):
    """Text-to-speech interface."""

    @abstractmethod
    async def synthesize(self, text: str) -> SynthesisResult:
        """Convert text to audio."""

    async def close(self) -> None:
        pass


class AudioPlayer(ABC):
    """Plays a synthesized clip."""

    @abstractmethod
    async def play(self, clip: SynthesisResult) -> None:
        """Start playback of clip."""


# =============================================================================
# Exceptions
# =============================================================================


class VoiceError(FanbotError):
    """Base exception for voice operations."""


class SynthesisError(VoiceError):
    """Error during text-to-speech."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="TTS_ERROR", **kwargs)


class PlaybackError(VoiceError):
    """Error while playing audio."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="PLAYBACK_ERROR", **kwargs)
