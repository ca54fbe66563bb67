"""Application settings and configuration."""
import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatpush.config_store import ConfigStore


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Chat Push Functions"
    app_version: str = "0.1.0"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"

    # Push notifications (FCM)
    push_enabled: bool = False  # Gateway refuses to send until this is True
    push_dry_run: bool = False  # FCM validate-only: nothing reaches devices
    multicast_batch_size: int = Field(default=500, ge=1, le=500)  # FCM per-request token limit

    # Firebase / GCP credentials
    google_application_credentials: str = ""  # Path to service account JSON (or env GOOGLE_APPLICATION_CREDENTIALS)
    google_application_credentials_json: str = ""  # Full JSON or base64-encoded JSON for PaaS deploys
    firebase_project_id: str = ""  # Optional; inferred from credentials when empty

    # Profile store (Firestore)
    users_collection: str = "users"
    device_token_field: str = "fcmToken"
    lookup_timeout_seconds: float = 10.0

    # Event broadcast template
    event_title: str = "New event!"
    event_body_template: str = "Event: {title}"


# Config file path: CONFIG_FILE env or default backend/config.yaml (config file is master over env)
_config_file = os.environ.get("CONFIG_FILE") or str(
    Path(__file__).resolve().parent.parent / "config.yaml"
)
_config_store = ConfigStore(Settings, _config_file)
_config_store.load_initial()


class _SettingsProxy:
    """Proxy so 'settings.attr' always returns the current value from the config store."""

    def __getattr__(self, name: str):
        return getattr(_config_store.get_settings(), name)


settings: Settings = _SettingsProxy()  # type: ignore[assignment]


def get_settings() -> Settings:
    """Return current Settings snapshot."""
    return _config_store.get_settings()


def get_config_store() -> ConfigStore:
    """Return the config store for update() and clear_overrides()."""
    return _config_store
