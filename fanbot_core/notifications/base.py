"""
Notifications - Base Types

Outbound text messages carrying the upcoming schedule and news headlines.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import FanbotError


class NotificationStatus(str, Enum):
    """Outcome of one notification request."""

    SENT = "sent"
    PARTIAL = "partial"
    FAILED = "failed"


class DeliveryStatus(str, Enum):
    """Outcome of one outbound message."""

    SENT = "sent"
    FAILED = "failed"


@dataclass
class MessageDelivery:
    """One outbound text message."""

    to: str
    body: str
    status: DeliveryStatus = DeliveryStatus.SENT
    provider_message_id: Optional[str] = None
    error_message: Optional[str] = None
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "to": self.to,
            "status": self.status.value,
            "provider_message_id": self.provider_message_id,
            "error_message": self.error_message,
            "sent_at": self.sent_at.isoformat(),
        }


@dataclass
class NotificationResult:
    """Result of a notification request."""

    status: NotificationStatus
    phone_number: str
    deliveries: List[MessageDelivery] = field(default_factory=list)
    headlines: List[str] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def sent_count(self) -> int:
        return sum(1 for d in self.deliveries if d.status == DeliveryStatus.SENT)


class SMSGateway(ABC):
    """Sends a single text message and returns the provider message id."""

    @abstractmethod
    async def send(self, to: str, body: str) -> str:
        """Send body to the number; raise SMSDeliveryError on failure."""


class HeadlineSource(ABC):
    """News headlines for a query."""

    @abstractmethod
    async def search(self, query: str, count: int) -> List[str]:
        """Headlines in relevance order (duplicates possible)."""

    async def close(self) -> None:
        pass


# =============================================================================
# Exceptions
# =============================================================================


class NotificationError(FanbotError):
    """Base exception for notification operations."""


class SMSDeliveryError(NotificationError):
    """The SMS gateway rejected or failed a message."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="SMS_DELIVERY_ERROR", **kwargs)


class HeadlineSourceError(NotificationError):
    """The headline query failed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="HEADLINE_SOURCE_ERROR", **kwargs)
