"""Participant model for room members."""

from pydantic import Field, field_validator

from caseroom.models.base import BaseEntity


class Participant(BaseEntity):
    """A person permitted to chat in a room.

    Participants are created by single-add or bulk import and edited
    only through profile self-edit. In public rooms the name identifies
    the person; elsewhere the email does.
    """

    room_id: str = Field(description="Owning room")
    name: str = Field(min_length=1, description="Display name")
    email: str | None = Field(
        default=None,
        description="Email address (absent in public rooms)",
    )
    phone: str | None = Field(default=None)
    organization: str | None = Field(default=None, max_length=100)
    photo_url: str | None = Field(default=None)
    description: str | None = Field(default=None, max_length=500)

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, v: str | None) -> str | None:
        """Store emails lower-cased so lookups are case-insensitive."""
        return v.lower() if v else None

    def key_for(self, identity_field: str) -> str | None:
        """Return the identifying value for the given room identity field."""
        return self.name if identity_field == "name" else self.email

    def to_row(self) -> dict:
        """Serialize to a store row."""
        return {
            "id": self.id,
            "room_id": self.room_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "organization": self.organization,
            "photo_url": self.photo_url,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: dict) -> "Participant":
        """Build from a store row."""
        return cls(**row)
