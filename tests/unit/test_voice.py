"""Unit tests for the voice collaborators."""

import asyncio
import io
import wave
from unittest.mock import MagicMock

import pytest

from fanbot_core.voice import (
    AudioPlayer,
    ConsoleTranscriber,
    MicrophoneGate,
    PlaybackError,
    Speaker,
    SpeechSynthesizer,
    SynthesisError,
    SynthesisResult,
    UtteranceStream,
    wav_duration,
)


def make_wav(seconds: float, rate: int = 8000) -> bytes:
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(rate)
        wav_file.writeframes(b"\x00\x00" * int(seconds * rate))
    return buffer.getvalue()


class FixedSynthesizer(SpeechSynthesizer):
    def __init__(self, duration: float):
        self.duration = duration
        self.texts = []

    async def synthesize(self, text: str) -> SynthesisResult:
        self.texts.append(text)
        return SynthesisResult(text=text, audio_data=b"", duration_seconds=self.duration)


class RecordingPlayer(AudioPlayer):
    def __init__(self, fail: bool = False):
        self.played = []
        self.fail = fail

    async def play(self, clip: SynthesisResult) -> None:
        await asyncio.sleep(0)
        if self.fail:
            raise PlaybackError("aplay exited with 1")
        self.played.append(clip.text)


async def collect(stream: UtteranceStream):
    return [item async for item in stream]


class TestUtteranceStream:
    """Tests for UtteranceStream."""

    @pytest.mark.asyncio
    async def test_fifo_order(self):
        """Test utterances are consumed in the order they were recognized."""
        stream = UtteranceStream()
        stream.push("Red Sox")
        stream.push("  I feel great  ")
        stream.close()

        assert await collect(stream) == ["Red Sox", "I feel great"]

    @pytest.mark.asyncio
    async def test_blank_ignored(self):
        """Test silence is not an utterance."""
        stream = UtteranceStream()

        assert not stream.push("   ")
        assert not stream.push("")
        assert stream.pending == 0

    @pytest.mark.asyncio
    async def test_push_after_close(self):
        """Test a closed stream rejects new utterances."""
        stream = UtteranceStream()
        stream.close()

        assert stream.closed
        assert not stream.push("hello")
        assert await collect(stream) == []


class TestMicrophoneGate:
    """Tests for MicrophoneGate."""

    @pytest.mark.asyncio
    async def test_pause_and_resume(self):
        """Test the gate reopens after the pause."""
        gate = MicrophoneGate()
        assert gate.is_open

        gate.pause_for(0.01)
        assert not gate.is_open

        await asyncio.wait_for(gate.wait_open(), timeout=1)
        assert gate.is_open

    @pytest.mark.asyncio
    async def test_new_pause_replaces_old(self):
        """Test a second pause extends the closed period."""
        gate = MicrophoneGate()

        gate.pause_for(0.01)
        gate.pause_for(10)
        await asyncio.sleep(0.03)

        assert not gate.is_open
        gate.resume()
        assert gate.is_open


class TestSpeaker:
    """Tests for Speaker."""

    @pytest.mark.asyncio
    async def test_pause_covers_clip_plus_guard(self):
        """Test the microphone is paused for the clip duration plus 0.2 seconds."""
        gate = MagicMock(spec=MicrophoneGate)
        player = RecordingPlayer()
        speaker = Speaker(FixedSynthesizer(1.5), player, gate=gate)

        clip = await speaker.speak("Hi there, I am awake.")
        await speaker.drain()

        gate.pause_for.assert_called_once()
        assert gate.pause_for.call_args.args[0] == pytest.approx(1.7)
        assert clip.text == "Hi there, I am awake."
        assert player.played == ["Hi there, I am awake."]

    @pytest.mark.asyncio
    async def test_empty_text(self):
        """Test nothing is synthesized for an empty reply."""
        synthesizer = FixedSynthesizer(1.0)
        speaker = Speaker(synthesizer, RecordingPlayer(), gate=MagicMock(spec=MicrophoneGate))

        assert await speaker.speak("") is None
        assert synthesizer.texts == []

    @pytest.mark.asyncio
    async def test_clips_play_in_order(self):
        """Test consecutive replies do not overlap."""
        player = RecordingPlayer()
        speaker = Speaker(FixedSynthesizer(0.0), player, gate=MagicMock(spec=MicrophoneGate))

        await speaker.speak("one")
        await speaker.speak("two")
        await speaker.drain()

        assert player.played == ["one", "two"]

    @pytest.mark.asyncio
    async def test_playback_failure_logged(self):
        """Test a failing player does not break the speaker."""
        speaker = Speaker(FixedSynthesizer(0.0), RecordingPlayer(fail=True), gate=MagicMock(spec=MicrophoneGate))

        await speaker.speak("hello")
        await speaker.drain()


class TestWavDuration:
    """Tests for wav_duration."""

    def test_duration(self):
        """Test the duration is read from the header."""
        assert wav_duration(make_wav(1.0)) == pytest.approx(1.0)
        assert wav_duration(make_wav(0.25, rate=22050)) == pytest.approx(0.25, abs=1e-3)

    def test_not_a_wav(self):
        """Test garbage audio raises SynthesisError."""
        with pytest.raises(SynthesisError):
            wav_duration(b"not audio")


class TestConsoleTranscriber:
    """Tests for ConsoleTranscriber."""

    @pytest.mark.asyncio
    async def test_lines_become_utterances(self):
        """Test each non-blank line is pushed and end of input closes the stream."""
        stream = UtteranceStream()
        source = io.StringIO("Red Sox\n\nsix one seven\n")

        await ConsoleTranscriber(stream, source=source).run()

        assert stream.closed
        assert await collect(stream) == ["Red Sox", "six one seven"]


class TimedPlayer(AudioPlayer):
    """Plays for the clip duration and samples the gate halfway through."""

    def __init__(self, gate: MicrophoneGate):
        self.gate = gate
        self.gate_open_mid_clip = []

    async def play(self, clip: SynthesisResult) -> None:
        await asyncio.sleep(clip.duration_seconds / 2)
        self.gate_open_mid_clip.append((clip.text, self.gate.is_open))
        await asyncio.sleep(clip.duration_seconds / 2)


class VariableSynthesizer(SpeechSynthesizer):
    def __init__(self, durations):
        self.durations = durations

    async def synthesize(self, text: str) -> SynthesisResult:
        return SynthesisResult(text=text, audio_data=b"", duration_seconds=self.durations[text])


class TestSpeakerGate:
    """Tests for the microphone pause across consecutive replies."""

    @pytest.mark.asyncio
    async def test_gate_closed_through_both_clips(self):
        """Test a short reply after a long one keeps the microphone paused."""
        gate = MicrophoneGate()
        player = TimedPlayer(gate)
        speaker = Speaker(VariableSynthesizer({"long": 0.5, "short": 0.1}), player, gate=gate)

        await speaker.speak("long")
        await speaker.speak("short")
        await speaker.drain()

        assert player.gate_open_mid_clip == [("long", False), ("short", False)]
        assert not gate.is_open

        await asyncio.wait_for(gate.wait_open(), timeout=1)
