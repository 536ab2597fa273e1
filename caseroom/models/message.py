"""Chat message model."""

from enum import Enum

from pydantic import Field

from caseroom.models.base import BaseEntity


class MessageStatus(str, Enum):
    """Mention lifecycle of a message.

    none -> mentioned -> replied. A separate message with status
    "reply" is created at the mentioned -> replied transition.
    """

    MENTIONED = "mentioned"
    REPLIED = "replied"
    REPLY = "reply"


class Message(BaseEntity):
    """A message posted by a participant in a room."""

    room_id: str = Field(description="Room the message belongs to")
    participant_id: str = Field(description="Author participant")
    text: str = Field(description="Message body")
    status: MessageStatus | None = Field(default=None)
    replies_to_message_id: str | None = Field(
        default=None,
        description="Original message this one answers (status=reply only)",
    )
    author_name: str | None = Field(
        default=None,
        description="Author display name, filled in when listing",
    )

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "room_id": self.room_id,
            "participant_id": self.participant_id,
            "text": self.text,
            "status": self.status.value if self.status else None,
            "replies_to_message_id": self.replies_to_message_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: dict, author_name: str | None = None) -> "Message":
        return cls(**row, author_name=author_name)
