"""Recipient resolution: which device token(s) a change event should reach."""
import logging
from typing import Optional

from chatpush.domain.notify.models import (
    Broadcast,
    ChangeEvent,
    Direct,
    EventCreated,
    MessageCreated,
    MessageStatusChanged,
    Recipients,
)
from chatpush.domain.notify.repositories import ProfileStore

logger = logging.getLogger(__name__)


class RecipientResolver:
    """
    Resolve a change event to Broadcast / Direct / None.

    Lookup failures never escape: they are logged and resolve to None, the same
    as a user who never registered a device.
    """

    def __init__(self, profiles: ProfileStore):
        self.profiles = profiles

    async def resolve(self, event: ChangeEvent) -> Recipients:
        if isinstance(event, EventCreated):
            return await self._resolve_event(event)
        if isinstance(event, MessageCreated):
            logger.info("NewMessage. ConversationId: %s", event.dialog_id)
            return await self._resolve_direct(event.receiver_id, role="receiver")
        if isinstance(event, MessageStatusChanged):
            if not event.status_changed:
                logger.debug(
                    "MessageStatusUpdate. Status unchanged (%s) for message %s; skipped",
                    event.new_status,
                    event.message_id,
                )
                return None
            logger.info("MessageStatusUpdate. ConversationId: %s", event.dialog_id)
            # status updates go back to whoever sent the original message
            return await self._resolve_direct(event.sender_id, role="sender")
        raise TypeError(f"Unsupported change event: {type(event).__name__}")

    async def _resolve_event(self, event: EventCreated) -> Recipients:
        if event.is_private:
            logger.info("Event %s is private, skipped: notification will not be sent", event.event_id)
            return None
        tokens = await self.collect_all_tokens()
        if tokens is None:
            return None
        if not tokens:
            logger.info("No device tokens available for event %s", event.event_id)
        return Broadcast(tokens=tokens)

    async def collect_all_tokens(self) -> Optional[tuple[str, ...]]:
        """Every non-empty token in the profile collection, de-duplicated, first-seen order. None on lookup failure."""
        try:
            records = await self.profiles.get_all()
        except Exception as e:
            logger.error("Failed to load device tokens: %s", e, exc_info=True)
            return None
        seen: dict[str, None] = {}
        for record in records:
            if record.device_token:
                seen.setdefault(record.device_token, None)
        return tuple(seen)

    async def _resolve_direct(self, user_id: str, *, role: str) -> Recipients:
        if not user_id:
            logger.warning("No %s id on the message; nothing to notify", role)
            return None
        try:
            record = await self.profiles.get_by_id(user_id)
        except Exception as e:
            logger.error("Failed to load profile for %s %s: %s", role, user_id, e, exc_info=True)
            return None
        if record is None or not record.device_token:
            logger.info("FCM token not found for %s: %s", role, user_id)
            return None
        return Direct(token=record.device_token)
