"""Recipient resolution for broadcast and direct events."""
import logging

from conftest import FakeProfileStore

from chatpush.domain.notify.models import (
    Broadcast,
    Direct,
    EventCreated,
    MessageCreated,
    MessageStatusChanged,
)
from chatpush.domain.notify.resolver import RecipientResolver


def _status_event(previous="sent", new="read", sender_id="u1"):
    return MessageStatusChanged(
        dialog_id="d1",
        message_id="m1",
        sender_id=sender_id,
        receiver_id="u2",
        previous_status=previous,
        new_status=new,
    )


async def test_private_event_does_no_lookup(caplog):
    store = FakeProfileStore({"u1": "A"})
    with caplog.at_level(logging.INFO):
        result = await RecipientResolver(store).resolve(EventCreated(event_id="e1", is_private=True))
    assert result is None
    assert store.calls == []
    assert "private, skipped" in caplog.text


async def test_public_event_collects_every_token():
    store = FakeProfileStore({"u1": "A", "u2": None, "u3": "", "u4": "B"})
    result = await RecipientResolver(store).resolve(EventCreated(event_id="e1", title="Meetup"))
    assert result == Broadcast(tokens=("A", "B"))


async def test_duplicate_tokens_are_collapsed_in_first_seen_order():
    store = FakeProfileStore({"u1": "A", "u2": "B", "u3": "A"})
    result = await RecipientResolver(store).resolve(EventCreated(event_id="e1"))
    assert result == Broadcast(tokens=("A", "B"))


async def test_no_registered_tokens_gives_empty_broadcast():
    store = FakeProfileStore({"u1": None})
    result = await RecipientResolver(store).resolve(EventCreated(event_id="e1"))
    assert result == Broadcast(tokens=())


async def test_broadcast_lookup_failure_resolves_to_none(lookup_error, caplog):
    store = FakeProfileStore({"u1": "A"})
    store.fail_with = lookup_error
    result = await RecipientResolver(store).resolve(EventCreated(event_id="e1"))
    assert result is None
    assert "Failed to load device tokens" in caplog.text


async def test_message_created_targets_receiver():
    store = FakeProfileStore({"u1": "S", "u2": "T1"})
    event = MessageCreated(dialog_id="d1", message_id="m1", sender_id="u1", receiver_id="u2")
    assert await RecipientResolver(store).resolve(event) == Direct(token="T1")
    assert store.calls == [("get_by_id", "u2")]


async def test_message_created_receiver_without_token(caplog):
    store = FakeProfileStore({"u2": None})
    event = MessageCreated(dialog_id="d1", message_id="m1", receiver_id="u2")
    with caplog.at_level(logging.INFO):
        assert await RecipientResolver(store).resolve(event) is None
    assert "FCM token not found for receiver: u2" in caplog.text


async def test_message_created_unknown_receiver():
    store = FakeProfileStore()
    event = MessageCreated(dialog_id="d1", message_id="m1", receiver_id="ghost")
    assert await RecipientResolver(store).resolve(event) is None


async def test_message_created_without_receiver_id_skips_lookup():
    store = FakeProfileStore({"u2": "T1"})
    event = MessageCreated(dialog_id="d1", message_id="m1")
    assert await RecipientResolver(store).resolve(event) is None
    assert store.calls == []


async def test_direct_lookup_failure_resolves_to_none(lookup_error):
    store = FakeProfileStore({"u2": "T1"})
    store.fail_with = lookup_error
    event = MessageCreated(dialog_id="d1", message_id="m1", receiver_id="u2")
    assert await RecipientResolver(store).resolve(event) is None


async def test_status_change_targets_sender():
    store = FakeProfileStore({"u1": "T2", "u2": "T1"})
    assert await RecipientResolver(store).resolve(_status_event()) == Direct(token="T2")
    assert store.calls == [("get_by_id", "u1")]


async def test_unchanged_status_does_no_lookup():
    store = FakeProfileStore({"u1": "T2"})
    assert await RecipientResolver(store).resolve(_status_event("sent", "sent")) is None
    assert store.calls == []
