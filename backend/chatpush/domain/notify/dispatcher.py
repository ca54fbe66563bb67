"""Delivery of a built payload to resolved recipients via the push gateway."""
import logging
from typing import Sequence

from chatpush.domain.notify.models import (
    Broadcast,
    DeliveryOutcome,
    DeliveryReport,
    Direct,
    NotificationPayload,
    Recipients,
)
from chatpush.domain.notify.repositories import PushGateway

logger = logging.getLogger(__name__)

# FCM accepts at most 500 tokens per multicast request
MAX_MULTICAST_TOKENS = 500
NO_RESPONSE_ERROR = "no response from gateway"


class DeliveryDispatcher:
    """Send a payload to Direct or Broadcast recipients. Gateway errors are captured, never raised."""

    def __init__(self, gateway: PushGateway, batch_size: int = MAX_MULTICAST_TOKENS):
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.gateway = gateway
        self.batch_size = min(batch_size, MAX_MULTICAST_TOKENS)

    async def deliver(self, payload: NotificationPayload, recipients: Recipients) -> DeliveryReport:
        if isinstance(recipients, Direct):
            return await self._send_direct(payload, recipients.token)
        if isinstance(recipients, Broadcast):
            return await self._send_broadcast(payload, recipients.tokens)
        raise ValueError("deliver() called without recipients")

    async def _send_direct(self, payload: NotificationPayload, token: str) -> DeliveryReport:
        try:
            message_id = await self.gateway.send_one(token, payload)
        except Exception as e:
            logger.error("Error sending notification (type=%s): %s", payload.data.get("type"), e)
            outcome = DeliveryOutcome(token=token, success=False, error_message=str(e))
        else:
            logger.info("Notification sent (type=%s, id=%s)", payload.data.get("type"), message_id)
            outcome = DeliveryOutcome(token=token, success=True, message_id=message_id)
        return DeliveryReport.from_outcomes([outcome])

    async def _send_broadcast(self, payload: NotificationPayload, tokens: Sequence[str]) -> DeliveryReport:
        if not tokens:
            return DeliveryReport.empty()
        outcomes: list[DeliveryOutcome] = []
        errors: list[str] = []
        for start in range(0, len(tokens), self.batch_size):
            batch = list(tokens[start:start + self.batch_size])
            try:
                outcomes.extend(await self._send_batch(payload, batch))
            except Exception as e:
                logger.error("Error sending notifications to %d tokens: %s", len(batch), e)
                errors.append(str(e))
                outcomes.extend(
                    DeliveryOutcome(token=t, success=False, error_message=str(e), batch_rejected=True)
                    for t in batch
                )
        return DeliveryReport.from_outcomes(outcomes, errors=errors)

    async def _send_batch(self, payload: NotificationPayload, batch: list[str]) -> list[DeliveryOutcome]:
        """One multicast request. Always returns exactly one outcome per token, aligned with batch."""
        outcomes = list(await self.gateway.send_multicast(batch, payload))
        if len(outcomes) != len(batch):
            logger.warning(
                "Gateway returned %d outcomes for %d tokens", len(outcomes), len(batch)
            )
        outcomes = outcomes[:len(batch)]
        outcomes.extend(
            DeliveryOutcome(token=t, success=False, error_message=NO_RESPONSE_ERROR)
            for t in batch[len(outcomes):]
        )
        return outcomes
