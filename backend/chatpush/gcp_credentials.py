"""
Google Application Default Credentials from an inline service-account JSON.

Serverless and PaaS hosts often cannot ship a key file. Put the whole JSON (raw
or base64) in GOOGLE_APPLICATION_CREDENTIALS_JSON and call
setup_application_default_credentials() before the Firebase app is created: the
JSON is written to a private temp file and GOOGLE_APPLICATION_CREDENTIALS points
at it, which is what firebase_admin and google.auth.default() read.
"""
import base64
import binascii
import json
import logging
import os
import tempfile
from typing import Optional

logger = logging.getLogger(__name__)


def _decode_credentials(raw: str) -> Optional[dict]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        try:
            data = json.loads(base64.b64decode(raw).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("GOOGLE_APPLICATION_CREDENTIALS_JSON is neither JSON nor base64 JSON: %s", e)
            return None
    if not isinstance(data, dict):
        logger.warning("GOOGLE_APPLICATION_CREDENTIALS_JSON is not a JSON object; skipping ADC setup")
        return None
    return data


def setup_application_default_credentials() -> Optional[str]:
    """
    If GOOGLE_APPLICATION_CREDENTIALS is unset but GOOGLE_APPLICATION_CREDENTIALS_JSON is set,
    write the JSON to a temp file and export its path. Returns the credentials path in effect, if any.
    """
    existing = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
    if existing:
        return existing
    raw = (os.environ.get("GOOGLE_APPLICATION_CREDENTIALS_JSON") or "").strip()
    if not raw:
        logger.debug("GOOGLE_APPLICATION_CREDENTIALS_JSON is empty or not set; skipping ADC setup")
        return None
    data = _decode_credentials(raw)
    if data is None:
        return None
    fd, path = tempfile.mkstemp(suffix=".json", prefix="gcp-credentials-")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f)
    except OSError as e:
        logger.warning("Could not write ADC temp file: %s", e)
        os.unlink(path)
        return None
    os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = path
    logger.info("Google Application Default Credentials set from GOOGLE_APPLICATION_CREDENTIALS_JSON")
    return path
