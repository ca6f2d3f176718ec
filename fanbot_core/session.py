"""
Session state shared by the aggregator, the orchestrator and the
notification dispatcher.

One session lives for the whole process: one continuous conversation.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .conversation.base import ConversationContext, TextStatus
from .sports.aggregator import ReadinessBarrier
from .sports.base import MergedSchedule, StandingEntry, Team


@dataclass
class SessionState:
    """Loaded data sets, the dialog context and the last texted number."""

    reference_date: date
    teams: List[Team] = field(default_factory=list)
    standings: List[StandingEntry] = field(default_factory=list)
    schedule: Optional[MergedSchedule] = None
    context: ConversationContext = field(default_factory=ConversationContext)
    phone_number: str = ""
    barrier: ReadinessBarrier = field(default_factory=ReadinessBarrier)

    @classmethod
    def create(
        cls,
        reference_date: date,
        override_phone_number: str = "",
    ) -> "SessionState":
        """
        New session. With an override number the session texts that number
        and never asks the user to dictate one.
        """
        session = cls(reference_date=reference_date)
        if override_phone_number:
            session.phone_number = override_phone_number
            session.context.text_sent = TextStatus.SUCCESS.value
        return session
