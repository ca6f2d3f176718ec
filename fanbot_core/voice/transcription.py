"""
Transcription sources feeding the utterance stream.
"""

import asyncio
import sys
from typing import Optional, TextIO

import structlog

from .base import MicrophoneGate, UtteranceStream

logger = structlog.get_logger(__name__)


class ConsoleTranscriber:
    """
    Treats each line of a text stream as one recognized utterance.

    Lines are only read while the microphone gate is open, mirroring a
    microphone that is paused during playback.
    """

    def __init__(
        self,
        stream: UtteranceStream,
        gate: Optional[MicrophoneGate] = None,
        source: Optional[TextIO] = None,
    ):
        self.stream = stream
        self.gate = gate or MicrophoneGate()
        self.source = source or sys.stdin

    async def run(self) -> None:
        """Read until end of input, then close the stream."""
        try:
            while not self.stream.closed:
                await self.gate.wait_open()
                line = await asyncio.to_thread(self.source.readline)
                if line == "":
                    break
                self.stream.push(line)
        finally:
            logger.info("transcription_ended")
            self.stream.close()
