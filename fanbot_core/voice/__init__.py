"""
Voice Module

Speech input and output around the conversation loop:
- UtteranceStream: queued transcriptions
- MicrophoneGate: paused while the assistant speaks
- Speaker: synthesis plus playback with the microphone guard
"""

from .base import (
    AudioPlayer,
    MicrophoneGate,
    PlaybackError,
    SpeechSynthesizer,
    SynthesisError,
    SynthesisResult,
    UtteranceStream,
    VoiceError,
)
from .playback import CommandAudioPlayer, Speaker
from .synthesis import WatsonTextToSpeech, wav_duration
from .transcription import ConsoleTranscriber

__all__ = [
    "AudioPlayer",
    "MicrophoneGate",
    "PlaybackError",
    "SpeechSynthesizer",
    "SynthesisError",
    "SynthesisResult",
    "UtteranceStream",
    "VoiceError",
    "CommandAudioPlayer",
    "Speaker",
    "WatsonTextToSpeech",
    "wav_duration",
    "ConsoleTranscriber",
]
