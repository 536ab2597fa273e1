"""Mention reconciliation.

Correlates mentioning messages with their replies. A message moves
none -> mentioned -> replied and never back; "unanswered" is exactly
the set of messages whose status is mentioned.

The module-level functions are pure and work on a message list in room
insertion order. MentionReconciler keeps the unanswered list per room
and applies the mentioned -> replied transition through the store.
"""

import re
from collections import Counter

import structlog

from caseroom.errors import MentionStateError, NotFoundError
from caseroom.mentions.extractor import extract_mentions
from caseroom.mentions.schemas import AnnotatedMessage, MentionRecord, UnansweredSummary
from caseroom.models.message import Message, MessageStatus
from caseroom.store.base import MESSAGES, PARTICIPANTS, Store

logger = structlog.get_logger()


def compute_unanswered(messages: list[Message]) -> list[MentionRecord]:
    """Build mention records for every message still waiting on a reply."""
    return [
        MentionRecord(
            source_message_id=message.id,
            mentioned_names=extract_mentions(message.text),
            author_name=message.author_name,
            created_at=message.created_at,
            answered=False,
        )
        for message in messages
        if message.status == MessageStatus.MENTIONED
    ]


def find_messages_for_participant(
    messages: list[Message], participant_name: str
) -> list[Message]:
    """Messages mentioning @participant_name, case-insensitively."""
    if not participant_name:
        return []
    pattern = re.compile("@" + re.escape(participant_name), re.IGNORECASE)
    return [message for message in messages if pattern.search(message.text)]


def find_reply(messages: list[Message], original_message_id: str) -> Message | None:
    """The reply message pointing back at original_message_id, if any."""
    return next(
        (
            message
            for message in messages
            if message.status == MessageStatus.REPLY
            and message.replies_to_message_id == original_message_id
        ),
        None,
    )


def annotate_messages(messages: list[Message]) -> list[AnnotatedMessage]:
    """Attach mentions, answered flag and reply to each message."""
    annotated = []
    for message in messages:
        answered = message.status == MessageStatus.REPLIED
        annotated.append(
            AnnotatedMessage(
                message=message,
                mentions=extract_mentions(message.text),
                answered=answered,
                reply=find_reply(messages, message.id) if answered else None,
            )
        )
    return annotated


def summarize_unanswered(records: list[MentionRecord]) -> UnansweredSummary:
    """Count unanswered mentions overall and per mentioned name.

    A name mentioned twice in one message counts once for that message.
    """
    counts: Counter[str] = Counter()
    for record in records:
        counts.update(set(record.mentioned_names))
    return UnansweredSummary(total=len(records), by_name=dict(counts))


async def load_messages(store: Store, room_id: str) -> list[Message]:
    """Load a room's messages in insertion order with author names."""
    rows = await store.query(MESSAGES, {"room_id": room_id})
    participants = await store.query(PARTICIPANTS, {"room_id": room_id})
    names = {p["id"]: p["name"] for p in participants}
    return [Message.from_row(row, names.get(row["participant_id"])) for row in rows]


class MentionReconciler:
    """Holds the unanswered mention list for each room.

    refresh() always recomputes from the full message list, so calling it
    again for the same change is harmless.
    """

    def __init__(self, store: Store):
        """Initialize reconciler.

        Args:
            store: Store holding the messages table
        """
        self._store = store
        self._unanswered: dict[str, list[MentionRecord]] = {}

    def unanswered(self, room_id: str) -> list[MentionRecord]:
        """Current unanswered list for a room (empty until refreshed)."""
        return list(self._unanswered.get(room_id, []))

    def summary(self, room_id: str) -> UnansweredSummary:
        return summarize_unanswered(self._unanswered.get(room_id, []))

    async def refresh(self, room_id: str) -> list[MentionRecord]:
        """Recompute a room's unanswered list from the store."""
        messages = await load_messages(self._store, room_id)
        records = compute_unanswered(messages)
        self._unanswered[room_id] = records
        logger.debug("Unanswered mentions recomputed", room_id=room_id, count=len(records))
        return list(records)

    async def mark_answered(self, message_id: str) -> None:
        """Move a mentioned message to replied and drop it locally.

        Args:
            message_id: The mentioning message

        Raises:
            NotFoundError: No such message
            MentionStateError: The message is not waiting on a reply
            StoreError: The update failed
        """
        updated = await self._store.update_one(
            MESSAGES,
            {"id": message_id, "status": MessageStatus.MENTIONED.value},
            {"status": MessageStatus.REPLIED.value},
        )
        if not updated:
            if not await self._store.exists(MESSAGES, {"id": message_id}):
                raise NotFoundError(f"Message not found: {message_id}")
            raise MentionStateError(f"Message {message_id} is not awaiting a reply")

        for room_id, records in self._unanswered.items():
            self._unanswered[room_id] = [
                r for r in records if r.source_message_id != message_id
            ]
        logger.info("Mention answered", message_id=message_id)
