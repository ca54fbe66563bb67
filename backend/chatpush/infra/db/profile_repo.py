"""Firestore-backed profile store: user documents carrying an FCM token field."""
import logging
from typing import Any, List, Optional

from firebase_admin import firestore_async
from google.api_core import exceptions as google_exceptions

from chatpush.domain.common.errors import ProfileLookupError
from chatpush.domain.notify.models import ProfileRecord
from chatpush.infra.firebase import get_firebase_app
from chatpush.settings import settings

logger = logging.getLogger(__name__)


class FirestoreProfileStore:
    """Profile store over the users collection. Read-only; safe to share between invocations."""

    def __init__(
        self,
        client: Any = None,
        collection: Optional[str] = None,
        token_field: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._client = client
        self.collection = collection or settings.users_collection
        self.token_field = token_field or settings.device_token_field
        self.timeout = timeout if timeout is not None else settings.lookup_timeout_seconds

    def _collection(self):
        if self._client is None:
            self._client = firestore_async.client(app=get_firebase_app())
        return self._client.collection(self.collection)

    def _to_record(self, snapshot) -> ProfileRecord:
        data = snapshot.to_dict()
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ProfileLookupError("Profile document is not a mapping", user_id=snapshot.id)
        token = data.get(self.token_field)
        if token is not None and not isinstance(token, str):
            raise ProfileLookupError(
                f"Profile field {self.token_field!r} is {type(token).__name__}, expected string",
                user_id=snapshot.id,
            )
        return ProfileRecord(user_id=snapshot.id, device_token=token or None)

    async def get_all(self) -> List[ProfileRecord]:
        """All profiles. Malformed documents are skipped with a warning; store errors raise ProfileLookupError."""
        records: List[ProfileRecord] = []
        try:
            async for snapshot in self._collection().stream(timeout=self.timeout):
                try:
                    records.append(self._to_record(snapshot))
                except ProfileLookupError as e:
                    logger.warning("Skipping malformed profile %s: %s", e.user_id, e.message)
        except google_exceptions.GoogleAPIError as e:
            raise ProfileLookupError(f"Could not list {self.collection}: {e}") from e
        return records

    async def get_by_id(self, user_id: str) -> Optional[ProfileRecord]:
        try:
            snapshot = await self._collection().document(user_id).get(timeout=self.timeout)
        except google_exceptions.GoogleAPIError as e:
            raise ProfileLookupError(f"Could not load profile {user_id}: {e}", user_id=user_id) from e
        if not snapshot.exists:
            return None
        return self._to_record(snapshot)
