"""Typed change notifications.

- ParticipantAdded: A participant was created by single add
- ParticipantsImported: A bulk import committed one or more participants
- ParticipantUpdated: A participant edited their profile
- MessageInserted: A message (or reply) was posted
- MessageUpdated: A message changed status
- MessageDeleted: A message was removed
"""

from pydantic import Field

from caseroom.events.base import Event


class ParticipantAdded(Event):
    """Emitted after a single participant is stored."""

    participant_id: str = Field(description="New participant ID")


class ParticipantsImported(Event):
    """Emitted after a bulk import commits rows."""

    added_count: int = Field(ge=0, description="Participants committed")


class ParticipantUpdated(Event):
    """Emitted after a profile self-edit."""

    participant_id: str = Field(description="Edited participant ID")


class MessageInserted(Event):
    """Emitted when a message is posted."""

    message_id: str = Field(description="New message ID")


class MessageUpdated(Event):
    """Emitted when a message's status changes."""

    message_id: str = Field(description="Changed message ID")
    status: str | None = Field(default=None, description="New status")


class MessageDeleted(Event):
    """Emitted when a message is deleted."""

    message_id: str = Field(description="Deleted message ID")
