"""Process-wide Firebase app, initialised lazily and shared by Firestore and FCM clients."""
import logging
import os
import threading

import firebase_admin
from firebase_admin import credentials

from chatpush.settings import settings

logger = logging.getLogger(__name__)

_firebase_app = None
_init_lock = threading.Lock()


def _credentials_path() -> str:
    return settings.google_application_credentials or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "")


def get_firebase_app() -> firebase_admin.App:
    """
    Return the Firebase default app, creating it on first use.
    Uses the service account file when configured, else Application Default Credentials.
    Raises ValueError / google.auth errors when no usable credentials exist.
    """
    global _firebase_app
    if _firebase_app is not None:
        return _firebase_app
    with _init_lock:
        if _firebase_app is not None:
            return _firebase_app
        try:
            _firebase_app = firebase_admin.get_app()
            return _firebase_app
        except ValueError:
            pass  # not initialised yet
        cred_path = _credentials_path()
        cred = credentials.Certificate(cred_path) if cred_path else credentials.ApplicationDefault()
        options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
        _firebase_app = firebase_admin.initialize_app(cred, options)
        logger.info("Firebase app initialised (project=%s)", _firebase_app.project_id or "default")
        return _firebase_app


def reset_firebase_app() -> None:
    """Forget the cached app (tests, credential rotation). Does not delete the Firebase app itself."""
    global _firebase_app
    with _init_lock:
        _firebase_app = None
