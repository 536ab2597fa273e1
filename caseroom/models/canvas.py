"""Canvas model: a titled rich-text page."""

from datetime import datetime

from pydantic import Field

from caseroom.models.base import BaseEntity, utc_now


class Canvas(BaseEntity):
    """A shareable content page, optionally attached to a room.

    The body is stored as the author wrote it (HTML or Markdown) and
    rendered by the client.
    """

    title: str = Field(min_length=1, max_length=200, description="Page title")
    content: str = Field(default="", description="HTML or Markdown body")
    is_public: bool = Field(default=True, description="Listed for everyone")
    room_id: str | None = Field(default=None, description="Room the page belongs to")
    updated_at: datetime = Field(default_factory=utc_now)

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "is_public": int(self.is_public),
            "room_id": self.room_id,
            "updated_at": self.updated_at.isoformat(),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: dict) -> "Canvas":
        return cls(**row)
