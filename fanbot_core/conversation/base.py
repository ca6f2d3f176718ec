"""
Conversation - Base Types

The dialog engine owns the conversation context. Fanbot only reads and
writes a handful of known keys and forwards everything else untouched.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import FanbotError


# =============================================================================
# Enums
# =============================================================================


class DialogStage(str, Enum):
    """Dialog stage reported by the engine's dialog stack."""

    VALIDATE_TEAM = "Validate Team"
    VALIDATE_EMOTION = "Validate Emotion"
    SEND_NOTIFICATION = "Text Team Info"
    NONE = "none"


class TextStatus(str, Enum):
    """Outcome of the last notification attempt (context key text_sent)."""

    SUCCESS = "success"
    FAILURE = "failure"


# =============================================================================
# Conversation Context
# =============================================================================


class ConversationContext:
    """
    Key/value bag returned by the dialog engine on every round trip.

    Known keys: my_team, standings, emotion, phoneno, text_sent and the
    read-only system.dialog_stack. All other keys pass through unmodified.
    """

    KNOWN_KEYS = ("my_team", "standings", "emotion", "phoneno", "text_sent")

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(data) if data else {}

    def _get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def _set(self, key: str, value: Optional[str]) -> None:
        self._data[key] = value

    @property
    def my_team(self) -> Optional[str]:
        return self._get("my_team")

    @my_team.setter
    def my_team(self, value: Optional[str]) -> None:
        self._set("my_team", value)

    @property
    def standings(self) -> Optional[str]:
        return self._get("standings")

    @standings.setter
    def standings(self, value: Optional[str]) -> None:
        self._set("standings", value)

    @property
    def emotion(self) -> Optional[str]:
        return self._get("emotion")

    @emotion.setter
    def emotion(self, value: Optional[str]) -> None:
        self._set("emotion", value)

    @property
    def phoneno(self) -> Optional[str]:
        return self._get("phoneno")

    @phoneno.setter
    def phoneno(self, value: Optional[str]) -> None:
        self._set("phoneno", value)

    @property
    def text_sent(self) -> Optional[str]:
        return self._get("text_sent")

    @text_sent.setter
    def text_sent(self, value: Optional[str]) -> None:
        self._set("text_sent", value)

    @property
    def dialog_stack(self) -> List[Any]:
        system = self._data.get("system")
        if not isinstance(system, dict):
            return []
        return list(system.get("dialog_stack") or [])

    def to_dict(self) -> Dict[str, Any]:
        """Copy of the full context, as sent to the engine."""
        return copy.deepcopy(self._data)

    def summary(self) -> Dict[str, Any]:
        """Known keys only, for debug logging."""
        known = {key: self._data[key] for key in self.KNOWN_KEYS if self._data.get(key)}
        if self.dialog_stack:
            known["dialog_stack"] = self.dialog_stack
        return known

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ConversationContext):
            return self._data == other._data
        return NotImplemented

    def __repr__(self) -> str:
        return f"ConversationContext({self.summary()!r})"


@dataclass
class DialogReply:
    """Result of one dialog engine round trip."""

    context: ConversationContext
    text: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Stage Classification
# =============================================================================


def classify_stage(context: Optional[ConversationContext]) -> DialogStage:
    """Classify the active dialog stage from the top of the dialog stack."""
    if context is None:
        return DialogStage.NONE

    stack = context.dialog_stack
    if not stack:
        return DialogStage.NONE

    top = stack[0]
    # Newer engine versions report frames as {"dialog_node": ...}.
    if isinstance(top, dict):
        top = top.get("dialog_node")

    for stage in (
        DialogStage.VALIDATE_TEAM,
        DialogStage.VALIDATE_EMOTION,
        DialogStage.SEND_NOTIFICATION,
    ):
        if top == stage.value:
            return stage
    return DialogStage.NONE


# =============================================================================
# Exceptions
# =============================================================================


class ConversationError(FanbotError):
    """Base exception for conversation operations."""


class DialogEngineError(ConversationError):
    """The dialog engine round trip failed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="DIALOG_ENGINE_ERROR", **kwargs)


class ToneAnalysisError(ConversationError):
    """The sentiment analysis request failed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="TONE_ANALYSIS_ERROR", **kwargs)


__all__ = [
    "DialogStage",
    "TextStatus",
    "ConversationContext",
    "DialogReply",
    "classify_stage",
    "ConversationError",
    "DialogEngineError",
    "ToneAnalysisError",
]
