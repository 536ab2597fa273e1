"""Room model and the per-call room context."""

from enum import Enum

from pydantic import BaseModel, Field

from caseroom.models.base import BaseEntity


class RoomType(str, Enum):
    """Room type decides which participant field is authoritative."""

    NORMAL = "normal"
    PUBLIC = "public"


class Room(BaseEntity):
    """An isolated chat namespace."""

    name: str = Field(min_length=1, max_length=200, description="Room title")
    type: RoomType = Field(default=RoomType.NORMAL, description="Room type")

    @property
    def is_public(self) -> bool:
        return self.type == RoomType.PUBLIC

    def to_row(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: dict) -> "Room":
        return cls(**row)


class RoomContext(BaseModel):
    """Identity and room facts passed explicitly into each operation.

    current_user_key is the caller's email in normal rooms and the
    caller's display name in public rooms.
    """

    room_id: str = Field(description="Room the operation targets")
    room_type: RoomType = Field(default=RoomType.NORMAL)
    current_user_key: str | None = Field(
        default=None, description="Email (normal) or name (public) of caller"
    )

    @property
    def is_public(self) -> bool:
        return self.room_type == RoomType.PUBLIC

    @property
    def identity_field(self) -> str:
        """Participant column that identifies a person in this room."""
        return "name" if self.is_public else "email"
