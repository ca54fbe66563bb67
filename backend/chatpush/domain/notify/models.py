"""Push dispatch domain models.

Change events are pydantic models (validated once, where the trigger body is
parsed); everything produced inside the pipeline is a frozen dataclass.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Literal, Optional, Sequence, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter


def _as_text(value: Any) -> str:
    """Missing fields become "" and non-string scalars are stringified."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _as_flag(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        # any non-empty string counts, so an unexpected value never leaks a private event
        return bool(value.strip())
    return bool(value)


Text = Annotated[str, BeforeValidator(_as_text)]
Flag = Annotated[bool, BeforeValidator(_as_flag)]


class _ChangeEventBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class EventCreated(_ChangeEventBase):
    """New record in the events collection."""

    kind: Literal["event_created"] = "event_created"
    event_id: Text
    title: Text = ""
    is_private: Flag = False


class MessageCreated(_ChangeEventBase):
    """New record in a conversation's message list."""

    kind: Literal["message_created"] = "message_created"
    dialog_id: Text
    message_id: Text
    sender_id: Text = ""
    sender_name: Text = ""
    receiver_id: Text = ""
    body: Text = ""


class MessageStatusChanged(_ChangeEventBase):
    """Update of a message record (only the status transition matters)."""

    kind: Literal["message_status_changed"] = "message_status_changed"
    dialog_id: Text
    message_id: Text
    sender_id: Text = ""
    sender_name: Text = ""
    receiver_id: Text = ""
    previous_status: Text = ""
    new_status: Text = ""

    @property
    def status_changed(self) -> bool:
        return self.previous_status != self.new_status


ChangeEvent = Annotated[
    Union[EventCreated, MessageCreated, MessageStatusChanged],
    Field(discriminator="kind"),
]
change_event_adapter: TypeAdapter = TypeAdapter(ChangeEvent)


@dataclass(frozen=True)
class ProfileRecord:
    """User profile as far as push dispatch cares: who, and which device (if any)."""
    user_id: str
    device_token: Optional[str] = None


@dataclass(frozen=True)
class Broadcast:
    """Every token found across the user-profile collection, first-seen order, no duplicates."""
    tokens: tuple[str, ...]


@dataclass(frozen=True)
class Direct:
    """The single resolved counterpart's token."""
    token: str


# None means "nobody to notify" and ends the pipeline before a payload is built.
Recipients = Optional[Union[Broadcast, Direct]]


@dataclass(frozen=True)
class NotificationPayload:
    # display_title/display_body are None for data-only messages
    display_title: Optional[str]
    display_body: Optional[str]
    data: dict[str, str] = field(default_factory=dict)

    @property
    def has_notification(self) -> bool:
        return self.display_title is not None or self.display_body is not None


@dataclass(frozen=True)
class DeliveryOutcome:
    token: str
    success: bool
    error_message: Optional[str] = None
    message_id: Optional[str] = None
    # failed because the whole multicast request was rejected, not this token
    batch_rejected: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "success": self.success,
            "errorMessage": self.error_message,
        }


@dataclass(frozen=True)
class DeliveryReport:
    success_count: int
    failure_count: int
    outcomes: tuple[DeliveryOutcome, ...] = ()
    # one aggregate message per rejected multicast request
    errors: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> "DeliveryReport":
        return cls(success_count=0, failure_count=0, outcomes=())

    @classmethod
    def from_outcomes(
        cls, outcomes: list[DeliveryOutcome], errors: Sequence[str] = ()
    ) -> "DeliveryReport":
        succeeded = sum(1 for o in outcomes if o.success)
        return cls(
            success_count=succeeded,
            failure_count=len(outcomes) - succeeded,
            outcomes=tuple(outcomes),
            errors=tuple(errors),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "outcomes": [o.to_dict() for o in self.outcomes],
            "errors": list(self.errors),
        }
