"""Chat service: posting messages, answering mentions, room membership.

The caller's identity always arrives in a RoomContext; nothing here
reads session state.
"""

import structlog

from caseroom.errors import (
    AccessDeniedError,
    CaseRoomError,
    MentionStateError,
    NotFoundError,
    ValidationError,
)
from caseroom.events.bus import EventBus
from caseroom.events.types import MessageDeleted, MessageInserted, MessageUpdated
from caseroom.mentions.extractor import has_mentions
from caseroom.mentions.reconciler import (
    MentionReconciler,
    annotate_messages,
    find_messages_for_participant,
    load_messages,
)
from caseroom.mentions.schemas import AnnotatedMessage
from caseroom.models.message import Message, MessageStatus
from caseroom.models.participant import Participant
from caseroom.models.room import RoomContext
from caseroom.store.base import MESSAGES, PARTICIPANTS, Store

logger = structlog.get_logger()


class ChatService:
    """Posts and replies to messages on behalf of room members."""

    def __init__(
        self,
        store: Store,
        reconciler: MentionReconciler,
        event_bus: EventBus | None = None,
    ):
        """Initialize chat service.

        Args:
            store: Store holding participants and messages
            reconciler: Applies the mentioned -> replied transition
            event_bus: Optional bus notified after every message change
        """
        self._store = store
        self._reconciler = reconciler
        self._bus = event_bus

    async def find_member(self, context: RoomContext) -> Participant | None:
        """Look up the caller among the room's participants.

        Public rooms match on name, other rooms on (lower-cased) email.

        Returns:
            The caller's participant record, or None if they can't chat here
        """
        key = (context.current_user_key or "").strip()
        if not key:
            return None
        if not context.is_public:
            key = key.lower()
        rows = await self._store.query(
            PARTICIPANTS,
            {"room_id": context.room_id, context.identity_field: key},
            limit=1,
        )
        return Participant.from_row(rows[0]) if rows else None

    async def require_member(self, context: RoomContext) -> Participant:
        member = await self.find_member(context)
        if member is None:
            raise AccessDeniedError("You are not a participant in this room")
        return member

    async def list_messages(self, room_id: str) -> list[Message]:
        """All messages in a room, oldest first, with author names."""
        return await load_messages(self._store, room_id)

    async def annotated_messages(self, room_id: str) -> list[AnnotatedMessage]:
        return annotate_messages(await self.list_messages(room_id))

    async def mentions_for(self, room_id: str, participant_name: str) -> list[Message]:
        """Messages in a room that mention the given participant."""
        return find_messages_for_participant(
            await self.list_messages(room_id), participant_name
        )

    async def send_message(self, context: RoomContext, text: str) -> Message:
        """Post a message as the caller.

        A message containing an @mention starts in the mentioned state.

        Raises:
            ValidationError: Empty message
            AccessDeniedError: Caller is not a participant
        """
        if not text or not text.strip():
            raise ValidationError("Message cannot be empty")
        member = await self.require_member(context)

        message = Message(
            room_id=context.room_id,
            participant_id=member.id,
            text=text,
            status=MessageStatus.MENTIONED if has_mentions(text) else None,
        )
        await self._store.insert_one(MESSAGES, message.to_row())
        message.author_name = member.name
        logger.info(
            "Message posted",
            room_id=context.room_id,
            message_id=message.id,
            mentioned=message.status is not None,
        )

        await self._publish(MessageInserted(room_id=context.room_id, message_id=message.id))
        return message

    async def reply_to_mention(
        self, context: RoomContext, message_id: str, text: str
    ) -> Message:
        """Answer a message that mentions the caller.

        Inserts the reply first, then marks the original replied. If that
        update fails for any reason, the new reply is removed again
        before the error propagates.

        Raises:
            ValidationError: Empty reply
            AccessDeniedError: Caller is not a participant or not mentioned
            NotFoundError: No such message in the room
            MentionStateError: Message is not awaiting a reply
        """
        if not text or not text.strip():
            raise ValidationError("Reply cannot be empty")
        member = await self.require_member(context)

        rows = await self._store.query(
            MESSAGES, {"id": message_id, "room_id": context.room_id}, limit=1
        )
        if not rows:
            raise NotFoundError(f"Message not found: {message_id}")
        original = Message.from_row(rows[0])

        if original.status != MessageStatus.MENTIONED:
            raise MentionStateError(f"Message {message_id} is not awaiting a reply")
        if not find_messages_for_participant([original], member.name):
            raise AccessDeniedError("Only a mentioned participant can reply")

        reply = Message(
            room_id=context.room_id,
            participant_id=member.id,
            text=text,
            status=MessageStatus.REPLY,
            replies_to_message_id=message_id,
        )
        await self._store.insert_one(MESSAGES, reply.to_row())
        try:
            await self._reconciler.mark_answered(message_id)
        except CaseRoomError:
            await self._store.delete(MESSAGES, {"id": reply.id})
            raise
        reply.author_name = member.name

        logger.info(
            "Mention answered",
            room_id=context.room_id,
            message_id=message_id,
            reply_id=reply.id,
        )
        await self._publish(MessageInserted(room_id=context.room_id, message_id=reply.id))
        await self._publish(
            MessageUpdated(
                room_id=context.room_id,
                message_id=message_id,
                status=MessageStatus.REPLIED.value,
            )
        )
        return reply

    async def delete_message(self, context: RoomContext, message_id: str) -> None:
        """Delete one of the caller's own messages.

        Deleting an answered message also deletes its reply. A reply on
        its own can't be deleted, since its original would be left
        answered with nothing to show.

        Raises:
            AccessDeniedError: Caller is not the author
            NotFoundError: No such message in the room
            MentionStateError: Message is a reply
        """
        member = await self.require_member(context)
        rows = await self._store.query(
            MESSAGES, {"id": message_id, "room_id": context.room_id}, limit=1
        )
        if not rows:
            raise NotFoundError(f"Message not found: {message_id}")
        message = Message.from_row(rows[0])

        if message.participant_id != member.id:
            raise AccessDeniedError("You can only delete your own messages")
        if message.status == MessageStatus.REPLY:
            raise MentionStateError("Replies can't be deleted on their own")

        if message.status == MessageStatus.REPLIED:
            await self._store.delete(MESSAGES, {"replies_to_message_id": message_id})
        await self._store.delete(MESSAGES, {"id": message_id})
        logger.info("Message deleted", room_id=context.room_id, message_id=message_id)

        await self._publish(MessageDeleted(room_id=context.room_id, message_id=message_id))

    async def _publish(self, event) -> None:
        if self._bus:
            await self._bus.publish(event)
