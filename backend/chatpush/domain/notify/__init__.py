"""Notification dispatch domain: resolve recipients, build payloads, deliver, report."""
from chatpush.domain.notify.models import (
    Broadcast,
    ChangeEvent,
    DeliveryOutcome,
    DeliveryReport,
    Direct,
    EventCreated,
    MessageCreated,
    MessageStatusChanged,
    NotificationPayload,
    ProfileRecord,
    Recipients,
)

__all__ = [
    "Broadcast",
    "ChangeEvent",
    "DeliveryOutcome",
    "DeliveryReport",
    "Direct",
    "EventCreated",
    "MessageCreated",
    "MessageStatusChanged",
    "NotificationPayload",
    "ProfileRecord",
    "Recipients",
]
