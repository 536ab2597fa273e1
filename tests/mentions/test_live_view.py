"""Tests for LiveMentionView."""

import pytest

from caseroom.events.bus import EventBus
from caseroom.events.types import MessageInserted, MessageUpdated
from caseroom.mentions.live import MESSAGE_EVENTS, LiveMentionView
from caseroom.mentions.reconciler import MentionReconciler
from caseroom.store.base import MESSAGES, PARTICIPANTS
from caseroom.store.sql_store import SqlStore


@pytest.fixture
async def live_store(store: SqlStore) -> SqlStore:
    await store.insert_one(
        PARTICIPANTS, {"id": "p-1", "room_id": "room-1", "name": "Bob", "email": "b@x.com"}
    )
    return store


async def post(store: SqlStore, message_id: str, text: str, status: str | None) -> None:
    await store.insert_one(
        MESSAGES,
        {
            "id": message_id,
            "room_id": "room-1",
            "participant_id": "p-1",
            "text": text,
            "status": status,
        },
    )


@pytest.mark.asyncio
async def test_start_loads_and_subscribes(live_store: SqlStore):
    """start() computes the initial list and subscribes to message events."""
    await post(live_store, "m-1", "@Alice hi", "mentioned")
    bus = EventBus()
    view = LiveMentionView(MentionReconciler(live_store), bus, "room-1")

    records = await view.start()

    assert [r.source_message_id for r in records] == ["m-1"]
    for event_type in MESSAGE_EVENTS:
        assert bus.subscriber_count(event_type) == 1


@pytest.mark.asyncio
async def test_recomputes_on_event(live_store: SqlStore):
    """A message event triggers a full recompute."""
    bus = EventBus()
    view = LiveMentionView(MentionReconciler(live_store), bus, "room-1")
    await view.start()
    assert view.unanswered == []

    await post(live_store, "m-1", "@Alice hi", "mentioned")
    await bus.publish(MessageInserted(room_id="room-1", message_id="m-1"))

    assert [r.source_message_id for r in view.unanswered] == ["m-1"]


@pytest.mark.asyncio
async def test_duplicate_events_are_harmless(live_store: SqlStore):
    """Delivering the same change twice leaves the same list."""
    await post(live_store, "m-1", "@Alice hi", "mentioned")
    bus = EventBus()
    view = LiveMentionView(MentionReconciler(live_store), bus, "room-1")
    await view.start()

    await live_store.update_one(MESSAGES, {"id": "m-1"}, {"status": "replied"})
    event = MessageUpdated(room_id="room-1", message_id="m-1", status="replied")
    await bus.publish(event)
    await bus.publish(event)

    assert view.unanswered == []


@pytest.mark.asyncio
async def test_ignores_other_rooms(live_store: SqlStore):
    bus = EventBus()
    view = LiveMentionView(MentionReconciler(live_store), bus, "room-1")
    await view.start()

    await post(live_store, "m-1", "@Alice hi", "mentioned")
    await bus.publish(MessageInserted(room_id="room-2", message_id="m-1"))

    assert view.unanswered == []


@pytest.mark.asyncio
async def test_stop_unsubscribes(live_store: SqlStore):
    bus = EventBus()
    view = LiveMentionView(MentionReconciler(live_store), bus, "room-1")
    await view.start()

    view.stop()

    for event_type in MESSAGE_EVENTS:
        assert bus.subscriber_count(event_type) == 0
