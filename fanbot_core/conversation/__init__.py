"""
Conversation Module

Dialog engine round trips and the control loop around them:
- ConversationContext: the engine-owned key/value context
- classify_stage: which side computation the current stage needs
- ConversationOrchestrator: the utterance-driven state machine
- parse_phone_number: spoken digits to a dialable number
"""

from .base import (
    ConversationContext,
    ConversationError,
    DialogEngineError,
    DialogReply,
    DialogStage,
    TextStatus,
    ToneAnalysisError,
    classify_stage,
)
from .dialog import DialogEngine, WatsonAssistantEngine
from .orchestrator import GREETING, ConversationOrchestrator, OrchestratorState, TurnResult
from .phone import (
    InvalidPhoneNumber,
    is_valid_phone_number,
    parse_phone_number,
    require_valid_phone_number,
)
from .tone import ToneAnalyzer, ToneScore, WatsonToneAnalyzer, dominant_tone

__all__ = [
    "ConversationContext",
    "ConversationError",
    "DialogEngineError",
    "DialogReply",
    "DialogStage",
    "TextStatus",
    "ToneAnalysisError",
    "classify_stage",
    "DialogEngine",
    "WatsonAssistantEngine",
    "GREETING",
    "ConversationOrchestrator",
    "OrchestratorState",
    "TurnResult",
    "InvalidPhoneNumber",
    "is_valid_phone_number",
    "parse_phone_number",
    "require_valid_phone_number",
    "ToneAnalyzer",
    "ToneScore",
    "WatsonToneAnalyzer",
    "dominant_tone",
]
