"""Push gateway over FCM (Firebase Cloud Messaging)."""
import asyncio
import logging
from typing import Any, List, Optional, Sequence

from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging

from chatpush.domain.common.errors import GatewayError
from chatpush.domain.notify.models import DeliveryOutcome, NotificationPayload
from chatpush.infra.firebase import get_firebase_app
from chatpush.settings import settings

logger = logging.getLogger(__name__)


def _notification(payload: NotificationPayload) -> Optional[messaging.Notification]:
    if not payload.has_notification:
        return None
    return messaging.Notification(title=payload.display_title, body=payload.display_body)


def _data(payload: NotificationPayload) -> dict[str, str]:
    # FCM data payload: all values must be strings
    return {k: "" if v is None else str(v) for k, v in payload.data.items()}


def _error_code(exc: Exception) -> Optional[str]:
    return getattr(exc, "code", None)


class FirebasePushGateway:
    """
    FCM gateway. firebase_admin's messaging calls are blocking, so each one runs
    in a worker thread; the HTTP transport's own timeout bounds every call.
    """

    def __init__(self, app: Any = None, dry_run: Optional[bool] = None, enabled: Optional[bool] = None):
        self._app = app
        self.dry_run = settings.push_dry_run if dry_run is None else dry_run
        self.enabled = settings.push_enabled if enabled is None else enabled

    def _get_app(self):
        if not self.enabled:
            raise GatewayError("Push disabled (push_enabled=False)", code="disabled")
        if self._app is None:
            try:
                self._app = get_firebase_app()
            except Exception as e:
                raise GatewayError(f"Firebase init failed: {e}", code="init-failed") from e
        return self._app

    async def send_one(self, token: str, payload: NotificationPayload) -> str:
        app = self._get_app()
        try:
            message = messaging.Message(
                token=token,
                notification=_notification(payload),
                data=_data(payload),
            )
            message_id = await asyncio.to_thread(messaging.send, message, self.dry_run, app)
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            raise GatewayError(str(e), code=_error_code(e)) from e
        logger.debug("Push sent to token %s...", token[:20])
        return message_id

    async def send_multicast(
        self, tokens: Sequence[str], payload: NotificationPayload
    ) -> List[DeliveryOutcome]:
        app = self._get_app()
        token_list = list(tokens)
        try:
            message = messaging.MulticastMessage(
                tokens=token_list,
                notification=_notification(payload),
                data=_data(payload),
            )
            batch = await asyncio.to_thread(messaging.send_each_for_multicast, message, self.dry_run, app)
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            raise GatewayError(str(e), code=_error_code(e)) from e

        # send_each_for_multicast keeps responses in token order
        outcomes: List[DeliveryOutcome] = []
        for token, response in zip(token_list, batch.responses):
            if response.success:
                outcomes.append(DeliveryOutcome(token=token, success=True, message_id=response.message_id))
            else:
                error = response.exception
                outcomes.append(
                    DeliveryOutcome(
                        token=token,
                        success=False,
                        error_message=str(error) if error is not None else "unknown error",
                    )
                )
        return outcomes
