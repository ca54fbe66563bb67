"""Push dispatch collaborator protocols."""
from typing import Optional, Protocol, Sequence

from chatpush.domain.notify.models import DeliveryOutcome, NotificationPayload, ProfileRecord


class ProfileStore(Protocol):
    """Read-only view of the user-profile collection."""

    async def get_all(self) -> Sequence[ProfileRecord]:
        """Every profile record. Raises ProfileLookupError when the store is unreachable."""
        ...

    async def get_by_id(self, user_id: str) -> Optional[ProfileRecord]:
        """One profile, or None if no such document exists."""
        ...


class PushGateway(Protocol):
    """Remote push-delivery gateway."""

    async def send_one(self, token: str, payload: NotificationPayload) -> str:
        """
        Send to a single device token. Returns the gateway message id.
        Raises GatewayError when the send is rejected.
        """
        ...

    async def send_multicast(
        self, tokens: Sequence[str], payload: NotificationPayload
    ) -> list[DeliveryOutcome]:
        """
        Send one request to many tokens. Returns one outcome per token, in input order.
        Raises GatewayError when the whole request is rejected.
        """
        ...
