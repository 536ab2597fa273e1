"""Derived mention views computed from message rows."""

from datetime import datetime

from pydantic import BaseModel, Field

from caseroom.models.message import Message


class MentionRecord(BaseModel):
    """A message that mentions people, with its answered state."""

    source_message_id: str = Field(description="Message containing the mentions")
    mentioned_names: list[str] = Field(default_factory=list)
    author_name: str | None = Field(default=None)
    created_at: datetime
    answered: bool = Field(description="True once the message is replied")


class AnnotatedMessage(BaseModel):
    """A message with its mentions and, when answered, the reply."""

    message: Message
    mentions: list[str] = Field(default_factory=list)
    answered: bool = False
    reply: Message | None = None

    @property
    def pending(self) -> bool:
        return bool(self.mentions) and not self.answered


class UnansweredSummary(BaseModel):
    """Count of unanswered mentions, overall and per mentioned name."""

    total: int = Field(default=0, ge=0)
    by_name: dict[str, int] = Field(default_factory=dict)
