"""
Trigger request bodies and their mapping onto ChangeEvent variants.

Identifiers come from the document path (params); everything else from the
document body. Each body is validated once through change_event_adapter, where
missing fields fall back to "", so the core only ever sees complete, typed events.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from chatpush.domain.common.errors import InvalidChangeEventError
from chatpush.domain.notify.models import (
    EventCreated,
    MessageCreated,
    MessageStatusChanged,
    change_event_adapter,
)


class DocumentCreatedRequest(BaseModel):
    """Created document: path params + new document data."""
    params: dict[str, Any] = Field(default_factory=dict)
    data: Optional[dict[str, Any]] = None


class DocumentUpdatedRequest(BaseModel):
    """Updated document: path params + document data before and after the write."""
    params: dict[str, Any] = Field(default_factory=dict)
    before: Optional[dict[str, Any]] = None
    after: Optional[dict[str, Any]] = None


def _param(params: dict[str, Any], name: str) -> str:
    value = params.get(name)
    if value is None or str(value) == "":
        raise InvalidChangeEventError(f"Missing path parameter: {name}")
    return str(value)


def _validate(fields: dict[str, Any]):
    try:
        return change_event_adapter.validate_python(fields)
    except ValidationError as e:
        raise InvalidChangeEventError(f"Invalid {fields.get('kind')} document: {e}") from e


def event_created_from_document(request: DocumentCreatedRequest) -> EventCreated:
    data = request.data or {}
    return _validate(
        {
            "kind": "event_created",
            "event_id": _param(request.params, "eventId"),
            "title": data.get("title"),
            "is_private": data.get("isPrivate"),
        }
    )


def message_created_from_document(request: DocumentCreatedRequest) -> MessageCreated:
    data = request.data or {}
    return _validate(
        {
            "kind": "message_created",
            "dialog_id": _param(request.params, "dialogId"),
            "message_id": _param(request.params, "messageId"),
            "sender_id": data.get("senderId"),
            "sender_name": data.get("senderName"),
            "receiver_id": data.get("receiverId"),
            "body": data.get("body"),
        }
    )


def message_status_changed_from_documents(request: DocumentUpdatedRequest) -> MessageStatusChanged:
    before = request.before or {}
    after = request.after or {}
    return _validate(
        {
            "kind": "message_status_changed",
            "dialog_id": _param(request.params, "dialogId"),
            "message_id": _param(request.params, "messageId"),
            "sender_id": after.get("senderId"),
            "sender_name": after.get("senderName"),
            "receiver_id": after.get("receiverId"),
            "previous_status": before.get("status"),
            "new_status": after.get("status"),
        }
    )
