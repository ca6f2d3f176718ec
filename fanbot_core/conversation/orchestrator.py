"""
Conversation Orchestrator

Top-level control loop. Each transcribed utterance goes to the dialog
engine; depending on the stage the engine reports, a side computation runs
(standing lookup, sentiment detection or a text notification) and the
engine is called again with the enriched context.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, AsyncIterable, List, Optional

import structlog

from ..errors import FanbotError
from ..sports.lookups import current_standing
from ..voice.base import VoiceError
from ..voice.playback import Speaker
from .base import DialogReply, DialogStage, ToneAnalysisError, classify_stage
from .dialog import DialogEngine
from .tone import DEFAULT_EMOTION, DEFAULT_TONE_THRESHOLD, ToneAnalyzer

if TYPE_CHECKING:
    from ..notifications.base import NotificationResult
    from ..notifications.dispatcher import NotificationDispatcher
    from ..session import SessionState

logger = structlog.get_logger(__name__)

GREETING = "Hi there, I am awake."


class OrchestratorState(str, Enum):
    """Control loop states."""

    IDLE = "idle"
    LISTENING = "listening"
    AWAITING_DIALOG_REPLY = "awaiting_dialog_reply"
    VALIDATE_TEAM = "validate_team"
    VALIDATE_EMOTION = "validate_emotion"
    SEND_NOTIFICATION = "send_notification"


_STAGE_STATES = {
    DialogStage.VALIDATE_TEAM: OrchestratorState.VALIDATE_TEAM,
    DialogStage.VALIDATE_EMOTION: OrchestratorState.VALIDATE_EMOTION,
    DialogStage.SEND_NOTIFICATION: OrchestratorState.SEND_NOTIFICATION,
}


@dataclass
class TurnResult:
    """Everything one utterance caused."""

    utterance: str
    stage: DialogStage = DialogStage.NONE
    replies: List[str] = field(default_factory=list)
    notification: Optional["NotificationResult"] = None


class ConversationOrchestrator:
    """
    Drives one continuous conversation for the lifetime of the process.

    Utterances are handled strictly one after another: the full reaction
    chain of one utterance (every dialog round trip and side computation)
    finishes before the next queued utterance is looked at.
    """

    def __init__(
        self,
        session: "SessionState",
        dialog_engine: DialogEngine,
        speaker: Speaker,
        tone_analyzer: ToneAnalyzer,
        dispatcher: "NotificationDispatcher",
        tone_threshold: float = DEFAULT_TONE_THRESHOLD,
        debug: bool = False,
    ):
        self.session = session
        self.dialog_engine = dialog_engine
        self.speaker = speaker
        self.tone_analyzer = tone_analyzer
        self.dispatcher = dispatcher
        self.tone_threshold = tone_threshold
        self.debug = debug
        self._state = OrchestratorState.IDLE

    @property
    def state(self) -> OrchestratorState:
        return self._state

    async def run(self, utterances: AsyncIterable[str]) -> None:
        """
        Wait for all data, greet the user, then handle utterances until the
        stream ends.
        """
        await self.session.barrier.wait()
        await self.start()

        async for utterance in utterances:
            try:
                await self.handle_utterance(utterance)
            except FanbotError as e:
                logger.error("turn_failed", utterance=utterance, **e.to_dict())
            finally:
                self._state = OrchestratorState.LISTENING

    async def start(self) -> None:
        """Enter Listening. Only valid once the readiness barrier is satisfied."""
        if not self.session.barrier.is_ready:
            raise RuntimeError("Conversation cannot start before all data is loaded")
        if self._state is not OrchestratorState.IDLE:
            return
        self._state = OrchestratorState.LISTENING
        logger.info("listening", message="You may speak now.")
        await self._say(GREETING)

    async def handle_utterance(self, utterance: str) -> TurnResult:
        """Run the full reaction chain for one utterance."""
        logger.info("user_says", text=utterance)
        turn = TurnResult(utterance=utterance)

        self._state = OrchestratorState.AWAITING_DIALOG_REPLY
        reply = await self._round_trip(utterance, "call 1")
        await self._reply(turn, reply)

        turn.stage = classify_stage(self.session.context)
        self._state = _STAGE_STATES.get(turn.stage, OrchestratorState.LISTENING)
        if turn.stage is not DialogStage.NONE:
            logger.info("dialog_stage", stage=turn.stage.value)

        if turn.stage is DialogStage.VALIDATE_EMOTION:
            # The user has expressed how they feel about their team.
            context = self.session.context
            context.emotion = await self._detect_emotion(context.emotion or "")
            await self._reply(turn, await self._round_trip(utterance, "call 2"))

        elif turn.stage is DialogStage.VALIDATE_TEAM:
            # The user has named the team they follow.
            context = self.session.context
            context.standings = current_standing(context.my_team or "", self.session.standings)
            await self._reply(turn, await self._round_trip(utterance, "call 3"))

        elif turn.stage is DialogStage.SEND_NOTIFICATION:
            turn.notification = await self.dispatcher.dispatch()
            await self._reply(turn, await self._round_trip("", "call 4"))

        self._state = OrchestratorState.LISTENING
        return turn

    async def _round_trip(self, utterance: str, label: str) -> DialogReply:
        """Send to the engine and adopt its context."""
        self._log_context(f"before {label}")
        reply = await self.dialog_engine.send(utterance, self.session.context)
        self.session.context = reply.context
        self._log_context(f"after {label}")
        return reply

    async def _reply(self, turn: TurnResult, reply: DialogReply) -> None:
        if reply.text:
            turn.replies.append(reply.text)
            await self._say(reply.text)

    async def _say(self, text: str) -> None:
        logger.info("assistant_says", text=text)
        try:
            await self.speaker.speak(text)
        except VoiceError as e:
            logger.error("speech_failed", **e.to_dict())

    async def _detect_emotion(self, text: str) -> str:
        try:
            return await self.tone_analyzer.detect_emotion(text, self.tone_threshold)
        except ToneAnalysisError as e:
            logger.warning("tone_analysis_failed", **e.to_dict())
            return DEFAULT_EMOTION

    def _log_context(self, header: str) -> None:
        if self.debug:
            logger.debug("dialog_context", header=header, **self.session.context.summary())
