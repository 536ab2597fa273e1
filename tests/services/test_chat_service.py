"""Tests for ChatService."""

from unittest.mock import AsyncMock

import pytest

from caseroom.chat.service import ChatService
from caseroom.errors import (
    AccessDeniedError,
    MentionStateError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from caseroom.events.bus import EventBus
from caseroom.events.types import MessageDeleted, MessageInserted, MessageUpdated
from caseroom.mentions.live import LiveMentionView
from caseroom.mentions.reconciler import MentionReconciler
from caseroom.models.message import MessageStatus
from caseroom.models.room import RoomContext, RoomType
from caseroom.store.base import MESSAGES, PARTICIPANTS
from caseroom.store.sql_store import SqlStore


@pytest.fixture
async def chat_store(store: SqlStore) -> SqlStore:
    """Normal room with Bob, Alice and Carol; public room with Dana."""
    for pid, name, email in [
        ("p-bob", "Bob", "bob@x.com"),
        ("p-alice", "Alice", "alice@x.com"),
        ("p-carol", "Carol", "carol@x.com"),
    ]:
        await store.insert_one(
            PARTICIPANTS, {"id": pid, "room_id": "room-1", "name": name, "email": email}
        )
    await store.insert_one(
        PARTICIPANTS, {"id": "p-dana", "room_id": "room-2", "name": "Dana"}
    )
    return store


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def reconciler(chat_store: SqlStore) -> MentionReconciler:
    return MentionReconciler(chat_store)


@pytest.fixture
def chat(chat_store: SqlStore, reconciler: MentionReconciler, bus: EventBus) -> ChatService:
    return ChatService(chat_store, reconciler, bus)


def as_user(key: str | None, room_id: str = "room-1", public: bool = False) -> RoomContext:
    return RoomContext(
        room_id=room_id,
        room_type=RoomType.PUBLIC if public else RoomType.NORMAL,
        current_user_key=key,
    )


class TestMembership:
    """Tests for find_member / require_member."""

    @pytest.mark.asyncio
    async def test_normal_room_matches_email_case_insensitively(self, chat):
        member = await chat.find_member(as_user("  BOB@X.COM "))
        assert member is not None
        assert member.id == "p-bob"

    @pytest.mark.asyncio
    async def test_public_room_matches_name(self, chat):
        member = await chat.find_member(as_user("Dana", "room-2", public=True))
        assert member is not None
        assert member.id == "p-dana"

    @pytest.mark.asyncio
    async def test_unknown_or_missing_identity(self, chat):
        assert await chat.find_member(as_user("nobody@x.com")) is None
        assert await chat.find_member(as_user(None)) is None
        with pytest.raises(AccessDeniedError):
            await chat.require_member(as_user("nobody@x.com"))


class TestSendMessage:
    """Tests for send_message."""

    @pytest.mark.asyncio
    async def test_mention_sets_status(self, chat, bus):
        events = []
        bus.subscribe(MessageInserted, lambda e: events.append(e))

        message = await chat.send_message(as_user("bob@x.com"), "@Alice can you check?")

        assert message.status == MessageStatus.MENTIONED
        assert message.author_name == "Bob"
        assert [e.message_id for e in events] == [message.id]

    @pytest.mark.asyncio
    async def test_plain_message_has_no_status(self, chat):
        message = await chat.send_message(as_user("bob@x.com"), "Hello all")
        assert message.status is None

    @pytest.mark.asyncio
    async def test_empty_message_rejected(self, chat):
        with pytest.raises(ValidationError):
            await chat.send_message(as_user("bob@x.com"), "   ")

    @pytest.mark.asyncio
    async def test_non_member_rejected(self, chat):
        with pytest.raises(AccessDeniedError):
            await chat.send_message(as_user("eve@x.com"), "hi")

    @pytest.mark.asyncio
    async def test_listing_in_order_with_authors(self, chat):
        await chat.send_message(as_user("bob@x.com"), "first")
        await chat.send_message(as_user("alice@x.com"), "second")

        messages = await chat.list_messages("room-1")

        assert [(m.text, m.author_name) for m in messages] == [
            ("first", "Bob"),
            ("second", "Alice"),
        ]


class TestReplyToMention:
    """Tests for reply_to_mention."""

    @pytest.mark.asyncio
    async def test_reply_answers_mention(self, chat, reconciler, bus):
        updates = []
        bus.subscribe(MessageUpdated, lambda e: updates.append(e))
        original = await chat.send_message(as_user("bob@x.com"), "@Alice status?")
        assert len(await reconciler.refresh("room-1")) == 1

        reply = await chat.reply_to_mention(as_user("alice@x.com"), original.id, "Done")

        assert reply.status == MessageStatus.REPLY
        assert reply.replies_to_message_id == original.id
        assert reconciler.unanswered("room-1") == []
        assert await reconciler.refresh("room-1") == []
        assert updates[0].status == "replied"

        annotated = await chat.annotated_messages("room-1")
        assert annotated[0].answered is True
        assert annotated[0].reply.id == reply.id

    @pytest.mark.asyncio
    async def test_second_reply_rejected(self, chat, chat_store):
        original = await chat.send_message(as_user("bob@x.com"), "@Alice @Carol ?")
        await chat.reply_to_mention(as_user("alice@x.com"), original.id, "Me first")

        with pytest.raises(MentionStateError):
            await chat.reply_to_mention(as_user("carol@x.com"), original.id, "Me too")

        replies = await chat_store.query(MESSAGES, {"replies_to_message_id": original.id})
        assert len(replies) == 1

    @pytest.mark.asyncio
    async def test_lost_race_removes_reply(self, chat, chat_store, reconciler):
        """If the original was answered meanwhile, the new reply is removed."""
        original = await chat.send_message(as_user("bob@x.com"), "@Alice ?")

        async def already_answered(message_id: str) -> None:
            raise MentionStateError("not awaiting a reply")

        reconciler.mark_answered = already_answered

        with pytest.raises(MentionStateError):
            await chat.reply_to_mention(as_user("alice@x.com"), original.id, "Late")

        replies = await chat_store.query(MESSAGES, {"replies_to_message_id": original.id})
        assert replies == []

    @pytest.mark.asyncio
    async def test_store_failure_removes_reply(self, chat, chat_store, reconciler):
        original = await chat.send_message(as_user("bob@x.com"), "hi @Alice")
        reconciler.mark_answered = AsyncMock(side_effect=StoreError("network down"))

        with pytest.raises(StoreError):
            await chat.reply_to_mention(as_user("alice@x.com"), original.id, "answer")

        rows = await chat_store.query(MESSAGES, {"room_id": "room-1"})
        assert [(r["text"], r["status"]) for r in rows] == [("hi @Alice", "mentioned")]

    @pytest.mark.asyncio
    async def test_only_mentioned_participant_can_reply(self, chat):
        original = await chat.send_message(as_user("bob@x.com"), "@Alice ?")

        with pytest.raises(AccessDeniedError):
            await chat.reply_to_mention(as_user("carol@x.com"), original.id, "Hi")

    @pytest.mark.asyncio
    async def test_cannot_reply_to_plain_message(self, chat):
        original = await chat.send_message(as_user("bob@x.com"), "no mentions")

        with pytest.raises(MentionStateError):
            await chat.reply_to_mention(as_user("alice@x.com"), original.id, "Hi")

    @pytest.mark.asyncio
    async def test_unknown_message(self, chat):
        with pytest.raises(NotFoundError):
            await chat.reply_to_mention(as_user("alice@x.com"), "missing", "Hi")

    @pytest.mark.asyncio
    async def test_live_view_follows_replies(self, chat, reconciler, bus):
        view = LiveMentionView(reconciler, bus, "room-1")
        await view.start()

        original = await chat.send_message(as_user("bob@x.com"), "@Alice ?")
        assert [r.source_message_id for r in view.unanswered] == [original.id]

        await chat.reply_to_mention(as_user("alice@x.com"), original.id, "Yes")
        assert view.unanswered == []


class TestDeleteMessage:
    """Tests for delete_message."""

    @pytest.mark.asyncio
    async def test_author_deletes(self, chat, bus):
        events = []
        bus.subscribe(MessageDeleted, lambda e: events.append(e))
        message = await chat.send_message(as_user("bob@x.com"), "oops")

        await chat.delete_message(as_user("bob@x.com"), message.id)

        assert await chat.list_messages("room-1") == []
        assert [e.message_id for e in events] == [message.id]

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, chat):
        message = await chat.send_message(as_user("bob@x.com"), "mine")

        with pytest.raises(AccessDeniedError):
            await chat.delete_message(as_user("alice@x.com"), message.id)

    @pytest.mark.asyncio
    async def test_deleting_answered_message_removes_reply(self, chat):
        original = await chat.send_message(as_user("bob@x.com"), "@Alice ?")
        reply = await chat.reply_to_mention(as_user("alice@x.com"), original.id, "Yes")

        with pytest.raises(MentionStateError):
            await chat.delete_message(as_user("alice@x.com"), reply.id)

        await chat.delete_message(as_user("bob@x.com"), original.id)
        assert await chat.list_messages("room-1") == []


@pytest.mark.asyncio
async def test_mentions_for(chat):
    hit = await chat.send_message(as_user("bob@x.com"), "@alice see this")
    await chat.send_message(as_user("bob@x.com"), "@Carol and this")

    messages = await chat.mentions_for("room-1", "Alice")

    assert [m.id for m in messages] == [hit.id]
