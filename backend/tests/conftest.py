"""Pytest configuration and shared fakes for the push dispatch tests."""
from typing import Optional, Sequence

import pytest

from chatpush.domain.common.errors import GatewayError, ProfileLookupError
from chatpush.domain.notify.models import DeliveryOutcome, NotificationPayload, ProfileRecord
from chatpush.services.notification_service import NotificationPipeline


def pytest_configure(config):
    """Register markers used across the suite."""
    config.addinivalue_line(
        "markers", "integration: marks tests that need real Firebase credentials (deselect with '-m \"not integration\"')"
    )


class FakeProfileStore:
    """In-memory profile store recording every lookup."""

    def __init__(self, tokens: Optional[dict[str, Optional[str]]] = None):
        self.records = {
            user_id: ProfileRecord(user_id=user_id, device_token=token)
            for user_id, token in (tokens or {}).items()
        }
        self.calls: list[tuple] = []
        self.fail_with: Optional[Exception] = None

    async def get_all(self) -> list[ProfileRecord]:
        self.calls.append(("get_all",))
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.records.values())

    async def get_by_id(self, user_id: str) -> Optional[ProfileRecord]:
        self.calls.append(("get_by_id", user_id))
        if self.fail_with is not None:
            raise self.fail_with
        return self.records.get(user_id)


class FakePushGateway:
    """Gateway that records sends. Tokens listed in rejected_tokens fail individually."""

    def __init__(self):
        self.single_sends: list[tuple[str, NotificationPayload]] = []
        self.multicasts: list[tuple[list[str], NotificationPayload]] = []
        self.rejected_tokens: dict[str, str] = {}
        self.send_one_error: Optional[Exception] = None
        self.multicast_error: Optional[Exception] = None

    async def send_one(self, token: str, payload: NotificationPayload) -> str:
        self.single_sends.append((token, payload))
        if self.send_one_error is not None:
            raise self.send_one_error
        return f"projects/test/messages/{len(self.single_sends)}"

    async def send_multicast(
        self, tokens: Sequence[str], payload: NotificationPayload
    ) -> list[DeliveryOutcome]:
        self.multicasts.append((list(tokens), payload))
        if self.multicast_error is not None:
            raise self.multicast_error
        return [
            DeliveryOutcome(token=t, success=False, error_message=self.rejected_tokens[t])
            if t in self.rejected_tokens
            else DeliveryOutcome(token=t, success=True, message_id=f"m-{t}")
            for t in tokens
        ]

    @property
    def total_calls(self) -> int:
        return len(self.single_sends) + len(self.multicasts)


@pytest.fixture
def profiles() -> FakeProfileStore:
    return FakeProfileStore()


@pytest.fixture
def gateway() -> FakePushGateway:
    return FakePushGateway()


@pytest.fixture
def pipeline(profiles, gateway) -> NotificationPipeline:
    return NotificationPipeline.create(profiles, gateway)


@pytest.fixture
def lookup_error() -> ProfileLookupError:
    return ProfileLookupError("deadline exceeded")


@pytest.fixture
def gateway_error() -> GatewayError:
    return GatewayError("Requested entity was not found.", code="NOT_FOUND")
