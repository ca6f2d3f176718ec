"""
Notifications Module

Text message delivery of the upcoming schedule and team headlines.
"""

from .base import (
    DeliveryStatus,
    HeadlineSource,
    HeadlineSourceError,
    MessageDelivery,
    NotificationError,
    NotificationResult,
    NotificationStatus,
    SMSDeliveryError,
    SMSGateway,
)
from .dispatcher import NotificationDispatcher
from .headlines import DiscoveryHeadlineSource, dedupe_headlines
from .twilio_gateway import TwilioSMSGateway

__all__ = [
    "DeliveryStatus",
    "HeadlineSource",
    "HeadlineSourceError",
    "MessageDelivery",
    "NotificationError",
    "NotificationResult",
    "NotificationStatus",
    "SMSDeliveryError",
    "SMSGateway",
    "NotificationDispatcher",
    "DiscoveryHeadlineSource",
    "dedupe_headlines",
    "TwilioSMSGateway",
]
