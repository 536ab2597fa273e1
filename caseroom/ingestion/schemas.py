"""Ingestion schemas.

Defines the normalized participant candidate and the result types of a
bulk import.
"""

from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel, Field

from caseroom.models.participant import Participant


class ParticipantInput(BaseModel):
    """Normalized participant candidate from a form or CSV row.

    Every optional field is None when absent or blank. Email is
    lower-cased so duplicate checks are case-insensitive.
    """

    name: str = Field(default="", description="Display name (trimmed)")
    email: str | None = Field(default=None, description="Email (lower-cased)")
    phone: str | None = Field(default=None)
    organization: str | None = Field(default=None)
    photo_url: str | None = Field(default=None)
    description: str | None = Field(default=None)

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "ParticipantInput":
        """Parse from a normalized row.

        Expected keys: name, email, phone, org, photourl, desc. Other
        keys are ignored.

        Args:
            row: Normalized row (lower-case keys, trimmed values)

        Returns:
            ParticipantInput with blanks mapped to None
        """
        email = row.get("email", "")
        return cls(
            name=row.get("name", ""),
            email=email.lower() or None,
            phone=row.get("phone") or None,
            organization=row.get("org") or None,
            photo_url=row.get("photourl") or None,
            description=row.get("desc") or None,
        )

    def to_participant(self, room_id: str, *, public_room: bool) -> Participant:
        """Build the participant to store. Public rooms never store email."""
        return Participant(
            room_id=room_id,
            name=self.name,
            email=None if public_room else self.email,
            phone=self.phone,
            organization=self.organization,
            photo_url=self.photo_url,
            description=self.description,
        )


class RejectionKind(str, Enum):
    """Why a row was not imported."""

    VALIDATION = "validation"
    DUPLICATE = "duplicate"


class RejectedRow(BaseModel):
    """A CSV row that was skipped.

    row_number matches the line shown by a spreadsheet viewer: the
    header is line 1, so the first data row is 2.
    """

    row_number: int = Field(ge=2)
    reason: str
    kind: RejectionKind

    def describe(self) -> str:
        return f"Row {self.row_number}: {self.reason}"


class ImportSummary(BaseModel):
    """Outcome of one bulk import."""

    total_rows: int = Field(default=0, ge=0)
    added_count: int = Field(default=0, ge=0)
    validation_rejected_count: int = Field(default=0, ge=0)
    duplicate_rejected_count: int = Field(default=0, ge=0)
    rejection_details: list[str] = Field(default_factory=list)
    rejected_rows: list[RejectedRow] = Field(default_factory=list)
    added: list[Participant] = Field(default_factory=list)

    def reject(self, row_number: int, reason: str, kind: RejectionKind) -> None:
        """Record a skipped row."""
        rejected = RejectedRow(row_number=row_number, reason=reason, kind=kind)
        self.rejected_rows.append(rejected)
        self.rejection_details.append(rejected.describe())
        if kind == RejectionKind.VALIDATION:
            self.validation_rejected_count += 1
        else:
            self.duplicate_rejected_count += 1

    def record_added(self, participant: Participant) -> None:
        """Record a committed participant."""
        self.added.append(participant)
        self.added_count += 1

    def to_message(self) -> str:
        """Render the summary shown after an upload."""
        if self.added_count == 0:
            lines = ["No valid participants to add."]
        else:
            lines = ["Upload Summary:"]
        lines += [
            f"Total rows: {self.total_rows}",
            f"Successfully added: {self.added_count}",
            f"Skipped (validation errors): {self.validation_rejected_count}",
            f"Skipped (duplicates): {self.duplicate_rejected_count}",
        ]
        if self.rejection_details:
            lines.append("")
            lines.append("Rejected rows:")
            lines.extend(self.rejection_details)
        return "\n".join(lines)
