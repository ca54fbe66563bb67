"""
Notification pipeline: one call per change event.

    resolve recipients -> build payload -> deliver -> report

Every invocation is independent and runs to completion. Nothing raised by a
stage escapes handle(); the caller (the trigger adapter) always sees a normal
return so the host does not retry and duplicate notifications already sent.
"""
import logging
from typing import Optional

from chatpush.domain.notify.dispatcher import DeliveryDispatcher
from chatpush.domain.notify.models import (
    ChangeEvent,
    DeliveryReport,
    EventCreated,
    MessageCreated,
    MessageStatusChanged,
)
from chatpush.domain.notify.payloads import (
    DEFAULT_EVENT_BODY_TEMPLATE,
    DEFAULT_EVENT_TITLE,
    build_payload,
)
from chatpush.domain.notify.reporter import report_delivery
from chatpush.domain.notify.repositories import ProfileStore, PushGateway
from chatpush.domain.notify.resolver import RecipientResolver

logger = logging.getLogger(__name__)


def _label(event: ChangeEvent) -> str:
    if isinstance(event, EventCreated):
        return f"NewEvent[{event.event_id}]"
    if isinstance(event, MessageCreated):
        return f"NewMessage[{event.dialog_id}/{event.message_id}]"
    if isinstance(event, MessageStatusChanged):
        return f"MessageStatusUpdate[{event.dialog_id}/{event.message_id}]"
    return type(event).__name__


class NotificationPipeline:
    """Runs the dispatch core for one change event at a time. Holds no per-invocation state."""

    def __init__(
        self,
        resolver: RecipientResolver,
        dispatcher: DeliveryDispatcher,
        *,
        event_title: str = DEFAULT_EVENT_TITLE,
        event_body_template: str = DEFAULT_EVENT_BODY_TEMPLATE,
    ):
        self.resolver = resolver
        self.dispatcher = dispatcher
        self.event_title = event_title
        self.event_body_template = event_body_template

    @classmethod
    def create(
        cls,
        profiles: ProfileStore,
        gateway: PushGateway,
        *,
        batch_size: int = 500,
        event_title: str = DEFAULT_EVENT_TITLE,
        event_body_template: str = DEFAULT_EVENT_BODY_TEMPLATE,
    ) -> "NotificationPipeline":
        return cls(
            RecipientResolver(profiles),
            DeliveryDispatcher(gateway, batch_size=batch_size),
            event_title=event_title,
            event_body_template=event_body_template,
        )

    async def handle(self, event: ChangeEvent) -> Optional[DeliveryReport]:
        """
        Handle one change event.

        Returns the delivery report, or None when there was nobody to notify
        (private event, unchanged status, missing token, lookup failure).
        """
        label = _label(event)
        try:
            recipients = await self.resolver.resolve(event)
            if recipients is None:
                logger.info("%s: no recipients; nothing sent", label)
                return None
            payload = build_payload(
                event,
                event_title=self.event_title,
                event_body_template=self.event_body_template,
            )
            report = await self.dispatcher.deliver(payload, recipients)
            report_delivery(report, label=label)
            return report
        except Exception:
            logger.exception("%s: unexpected error while handling change event", label)
            return None


def build_default_pipeline() -> NotificationPipeline:
    """Pipeline wired to Firestore profiles and FCM, configured from settings."""
    from chatpush.infra.db.profile_repo import FirestoreProfileStore
    from chatpush.infra.push.sender import FirebasePushGateway
    from chatpush.settings import get_settings

    s = get_settings()
    return NotificationPipeline.create(
        FirestoreProfileStore(),
        FirebasePushGateway(),
        batch_size=s.multicast_batch_size,
        event_title=s.event_title,
        event_body_template=s.event_body_template,
    )
