"""Trigger HTTP adapter."""
import pytest
from conftest import FakeProfileStore, FakePushGateway
from fastapi.testclient import TestClient

from chatpush.api.deps import get_pipeline
from chatpush.main import app
from chatpush.services.notification_service import NotificationPipeline


@pytest.fixture
def fakes():
    profiles = FakeProfileStore({"u1": "T-sender", "u2": "T-receiver", "u3": "T-other"})
    gateway = FakePushGateway()
    app.dependency_overrides[get_pipeline] = lambda: NotificationPipeline.create(profiles, gateway)
    yield profiles, gateway
    app.dependency_overrides.clear()


@pytest.fixture
def client(fakes):
    return TestClient(app)


def test_event_created_broadcast(client, fakes):
    _, gateway = fakes
    r = client.post(
        "/v1/triggers/event-created",
        json={"params": {"eventId": "e1"}, "data": {"title": "Meetup", "isPrivate": False}},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "delivered"
    assert body["report"]["successCount"] == 3
    tokens, payload = gateway.multicasts[0]
    assert payload.data == {"eventId": "e1", "type": "event"}


def test_private_event_is_acknowledged_as_skipped(client, fakes):
    profiles, gateway = fakes
    r = client.post(
        "/v1/triggers/event-created",
        json={"params": {"eventId": "e2"}, "data": {"title": "Secret", "isPrivate": True}},
    )
    assert r.status_code == 200
    assert r.json() == {"status": "skipped", "report": None}
    assert profiles.calls == []


def test_message_created_uses_path_ids(client, fakes):
    _, gateway = fakes
    r = client.post(
        "/v1/triggers/message-created",
        json={
            "params": {"dialogId": "d1", "messageId": "m1"},
            "data": {"senderId": "u1", "senderName": "Alice", "receiverId": "u2", "body": "hi"},
        },
    )
    assert r.status_code == 200
    token, payload = gateway.single_sends[0]
    assert token == "T-receiver"
    assert payload.data["conversationId"] == "d1"
    assert payload.data["messageId"] == "m1"


def test_failed_send_still_returns_200(client, fakes, gateway_error):
    _, gateway = fakes
    gateway.send_one_error = gateway_error
    r = client.post(
        "/v1/triggers/message-created",
        json={"params": {"dialogId": "d1", "messageId": "m1"}, "data": {"receiverId": "u2"}},
    )
    assert r.status_code == 200
    report = r.json()["report"]
    assert report["failureCount"] == 1
    assert report["outcomes"][0]["errorMessage"] == str(gateway_error)


def test_status_changed_reads_before_and_after(client, fakes):
    _, gateway = fakes
    r = client.post(
        "/v1/triggers/message-status-changed",
        json={
            "params": {"dialogId": "d1", "messageId": "m1"},
            "before": {"senderId": "u1", "receiverId": "u2", "status": "sent"},
            "after": {"senderId": "u1", "senderName": "Alice", "receiverId": "u2", "status": "read"},
        },
    )
    assert r.status_code == 200
    token, payload = gateway.single_sends[0]
    assert token == "T-sender"
    assert payload.data["messageStatus"] == "read"


def test_status_unchanged_is_skipped(client, fakes):
    profiles, gateway = fakes
    r = client.post(
        "/v1/triggers/message-status-changed",
        json={
            "params": {"dialogId": "d1", "messageId": "m1"},
            "before": {"senderId": "u1", "status": "sent"},
            "after": {"senderId": "u1", "status": "sent"},
        },
    )
    assert r.json()["status"] == "skipped"
    assert profiles.calls == []
    assert gateway.total_calls == 0


def test_missing_path_param_is_rejected(client, fakes):
    _, gateway = fakes
    r = client.post("/v1/triggers/message-created", json={"params": {"dialogId": "d1"}, "data": {}})
    assert r.status_code == 422
    assert "messageId" in r.json()["detail"]
    assert gateway.total_calls == 0


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_string_private_flag_is_skipped(client, fakes):
    profiles, gateway = fakes
    r = client.post(
        "/v1/triggers/event-created",
        json={"params": {"eventId": "e4"}, "data": {"title": "Secret", "isPrivate": "Y"}},
    )
    assert r.json()["status"] == "skipped"
    assert profiles.calls == []
    assert gateway.total_calls == 0
