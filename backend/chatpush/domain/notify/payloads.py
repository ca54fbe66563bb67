"""Notification payload templates, one per change-event kind."""
from chatpush.domain.notify.models import (
    ChangeEvent,
    EventCreated,
    MessageCreated,
    MessageStatusChanged,
    NotificationPayload,
)

# Client-side routing discriminators (data["type"])
EVENT_TYPE = "event"
MESSAGE_TYPE = "message"
MESSAGE_STATUS_TYPE = "messageStatus"

DEFAULT_EVENT_TITLE = "New event!"
DEFAULT_EVENT_BODY_TEMPLATE = "Event: {title}"


def build_payload(
    event: ChangeEvent,
    *,
    event_title: str = DEFAULT_EVENT_TITLE,
    event_body_template: str = DEFAULT_EVENT_BODY_TEMPLATE,
) -> NotificationPayload:
    """Build the payload for a change event. Pure; only the event's own fields are used."""
    if isinstance(event, EventCreated):
        return NotificationPayload(
            display_title=event_title,
            display_body=event_body_template.replace("{title}", event.title),
            data={"eventId": event.event_id, "type": EVENT_TYPE},
        )
    if isinstance(event, MessageCreated):
        return NotificationPayload(
            display_title=event.sender_name,
            display_body=event.body,
            data={
                "conversationId": event.dialog_id,
                "messageId": event.message_id,
                "type": MESSAGE_TYPE,
                "sender": event.sender_name,
                "senderId": event.sender_id,
            },
        )
    if isinstance(event, MessageStatusChanged):
        # data-only: the client updates the message tick silently
        return NotificationPayload(
            display_title=None,
            display_body=None,
            data={
                "dialogId": event.dialog_id,
                "messageId": event.message_id,
                "type": MESSAGE_STATUS_TYPE,
                "sender": event.sender_name,
                "senderId": event.sender_id,
                "receiverId": event.receiver_id,
                "messageStatus": event.new_status,
                "status": event.new_status,
            },
        )
    raise TypeError(f"Unsupported change event: {type(event).__name__}")
