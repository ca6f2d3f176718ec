"""
Notification dispatcher.

Texts the user's team schedule followed by a couple of news headlines.
"""

from typing import TYPE_CHECKING, List

import structlog

from ..conversation.base import TextStatus
from ..conversation.phone import InvalidPhoneNumber, parse_phone_number, require_valid_phone_number
from ..sports.lookups import upcoming_schedule
from .base import (
    DeliveryStatus,
    HeadlineSource,
    MessageDelivery,
    NotificationError,
    NotificationResult,
    NotificationStatus,
    SMSGateway,
)
from .headlines import dedupe_headlines

if TYPE_CHECKING:
    from ..session import SessionState

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """
    Sends the upcoming schedule and headlines for context.my_team.

    The destination is the previously used number unless the last attempt
    failed (or none was made), in which case it is re-derived from the
    latest dictation in context.phoneno.
    """

    def __init__(
        self,
        session: "SessionState",
        gateway: SMSGateway,
        headline_source: HeadlineSource,
        headline_count: int = 2,
        headline_query_count: int = 5,
    ):
        self.session = session
        self.gateway = gateway
        self.headline_source = headline_source
        self.headline_count = headline_count
        self.headline_query_count = headline_query_count

    def resolve_phone_number(self) -> str:
        context = self.session.context
        if context.text_sent != TextStatus.SUCCESS.value or not self.session.phone_number:
            self.session.phone_number = parse_phone_number(context.phoneno)
        return self.session.phone_number

    async def dispatch(self) -> NotificationResult:
        context = self.session.context

        try:
            phone_number = require_valid_phone_number(self.resolve_phone_number())
        except InvalidPhoneNumber as e:
            logger.warning("phone_number_rejected", number=e.number)
            context.text_sent = TextStatus.FAILURE.value
            return NotificationResult(
                status=NotificationStatus.FAILED,
                phone_number=e.number,
                error_message=e.message,
            )

        logger.info("sending_text", to=phone_number)
        team = context.my_team or ""
        headlines = await self._headlines(team)
        schedule = upcoming_schedule(
            team,
            self.session.teams,
            self.session.schedule,
            self.session.reference_date,
        )

        context.text_sent = TextStatus.SUCCESS.value
        result = NotificationResult(
            status=NotificationStatus.SENT,
            phone_number=phone_number,
            headlines=headlines,
        )

        # Schedule first, then headlines in discovery order. Failed messages
        # are not retried and do not undo earlier sends.
        for body in [schedule] + headlines:
            result.deliveries.append(await self._send(phone_number, body))

        if result.sent_count == 0:
            result.status = NotificationStatus.FAILED
        elif result.sent_count < len(result.deliveries):
            result.status = NotificationStatus.PARTIAL

        logger.info(
            "schedule_and_headlines_sent",
            status=result.status.value,
            sent=result.sent_count,
            total=len(result.deliveries),
        )
        return result

    async def _headlines(self, team: str) -> List[str]:
        try:
            found = await self.headline_source.search(
                f"{team} baseball", self.headline_query_count
            )
        except NotificationError as e:
            logger.warning("headline_search_failed", **e.to_dict())
            return []
        return dedupe_headlines(found, self.headline_count)

    async def _send(self, to: str, body: str) -> MessageDelivery:
        delivery = MessageDelivery(to=to, body=body)
        try:
            delivery.provider_message_id = await self.gateway.send(to, body)
        except NotificationError as e:
            delivery.status = DeliveryStatus.FAILED
            delivery.error_message = e.message
            logger.error("sms_failed", to=to, **e.to_dict())
        return delivery
