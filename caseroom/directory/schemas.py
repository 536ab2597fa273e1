"""Directory schemas."""

from pydantic import BaseModel, ConfigDict, Field

from caseroom.models.participant import Participant

OTHERS_GROUP = "Others"


class ProfileUpdate(BaseModel):
    """Fields a participant may change on their own profile.

    Fields left as None are not touched; "" clears a field.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    organization: str | None = Field(default=None)
    phone: str | None = Field(default=None)
    description: str | None = Field(default=None)
    photo_url: str | None = Field(default=None)

    def to_patch(self) -> dict[str, str | None]:
        """Store patch: only provided fields, blanks stored as NULL."""
        return {
            field: (value or None)
            for field, value in self.model_dump(exclude_none=True).items()
        }


class OrganizationGroup(BaseModel):
    """Participants sharing an organization."""

    organization: str
    participants: list[Participant] = Field(default_factory=list)
