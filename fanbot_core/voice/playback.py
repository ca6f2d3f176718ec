"""
Audio playback and the speaker that ties synthesis, playback and the
microphone gate together.
"""

import asyncio
import os
import shlex
import tempfile
from typing import Optional

import structlog

from .base import (
    AudioPlayer,
    MicrophoneGate,
    PlaybackError,
    SpeechSynthesizer,
    SynthesisResult,
    VoiceError,
)

logger = structlog.get_logger(__name__)

DEFAULT_GUARD_SECONDS = 0.2


class CommandAudioPlayer(AudioPlayer):
    """Plays WAV clips through an external command such as aplay or afplay."""

    def __init__(self, command: str = "aplay"):
        self.command = shlex.split(command)

    async def play(self, clip: SynthesisResult) -> None:
        fd, path = tempfile.mkstemp(suffix=".wav", prefix="fanbot_")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(clip.audio_data)
            process = await asyncio.create_subprocess_exec(
                *self.command,
                path,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()
        except OSError as e:
            raise PlaybackError(f"Unable to run {self.command[0]}: {e}") from e
        finally:
            if os.path.exists(path):
                os.unlink(path)

        if process.returncode != 0:
            raise PlaybackError(
                f"{self.command[0]} exited with {process.returncode}",
                details={"stderr": stderr.decode(errors="replace")[:200]},
            )


class Speaker:
    """
    Says things out loud.

    The microphone gate is closed for the clip duration plus a short guard
    so the assistant does not transcribe itself. Playback runs in the
    background; speak() returns once the clip is ready and playing.
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        player: AudioPlayer,
        gate: Optional[MicrophoneGate] = None,
        guard_seconds: float = DEFAULT_GUARD_SECONDS,
    ):
        self.synthesizer = synthesizer
        self.player = player
        self.gate = gate or MicrophoneGate()
        self.guard_seconds = guard_seconds
        self._playback: Optional[asyncio.Task] = None

    async def speak(self, text: str) -> Optional[SynthesisResult]:
        if not text:
            return None

        clip = await self.synthesizer.synthesize(text)

        # Clips never overlap; the pause for this clip starts once the
        # previous one has finished.
        if self._playback is not None and not self._playback.done():
            await self._playback

        self.gate.pause_for(clip.duration_seconds + self.guard_seconds)
        self._playback = asyncio.create_task(self._play(clip))
        return clip

    async def _play(self, clip: SynthesisResult) -> None:
        try:
            await self.player.play(clip)
        except VoiceError as e:
            logger.error("playback_failed", **e.to_dict())

    async def drain(self) -> None:
        """Wait for the current clip to finish playing."""
        if self._playback is not None:
            await self._playback
