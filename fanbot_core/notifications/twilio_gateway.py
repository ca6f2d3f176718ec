"""
Twilio SMS gateway.
"""

import asyncio
from typing import Optional

import requests
import structlog
from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.rest import Client

from .base import SMSDeliveryError, SMSGateway

logger = structlog.get_logger(__name__)


class TwilioSMSGateway(SMSGateway):
    """
    Sends text messages through the Twilio REST API.

    The Twilio client is synchronous, so each send runs in a worker thread.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        client: Optional[Client] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self._client = client

    def _get_client(self) -> Client:
        """Get or create Twilio client."""
        if self._client is None:
            self._client = Client(self.account_sid, self.auth_token)
        return self._client

    async def send(self, to: str, body: str) -> str:
        client = self._get_client()
        try:
            message = await asyncio.to_thread(
                client.messages.create,
                to=to,
                from_=self.from_number,
                body=body,
            )
        except TwilioRestException as e:
            raise SMSDeliveryError(
                f"Twilio rejected message: {e.msg}",
                details={"status": e.status, "twilio_code": e.code},
            ) from e
        except (TwilioException, requests.RequestException) as e:
            raise SMSDeliveryError(
                f"Unable to send message through Twilio: {e}",
                details={"error": type(e).__name__},
            ) from e

        logger.info("sms_sent", sid=message.sid)
        return message.sid
