"""Two-tier duplicate detection for participant ingestion.

Tier 1 (DeduplicationIndex) catches repeats inside one upload.
Tier 2 (DuplicateChecker) asks the store whether the room already has
the participant. Neither is transactional: the store's unique indexes
are what finally rule out concurrent duplicates.
"""

from caseroom.ingestion.schemas import ParticipantInput
from caseroom.models.room import RoomType
from caseroom.store.base import PARTICIPANTS, Store


class DeduplicationIndex:
    """Names and emails already accepted during one ingestion run.

    Public rooms are keyed by name. Other rooms are keyed by email and
    by name, since both must be unique there.
    """

    def __init__(self):
        self.seen_names: set[str] = set()
        self.seen_emails: set[str] = set()

    def check(self, candidate: ParticipantInput, room_type: RoomType) -> str | None:
        """Return a duplicate reason if the candidate was already accepted."""
        if room_type != RoomType.PUBLIC and candidate.email in self.seen_emails:
            return "Duplicate email in file"
        if candidate.name in self.seen_names:
            return "Duplicate name in file"
        return None

    def add(self, candidate: ParticipantInput, room_type: RoomType) -> None:
        """Record an accepted candidate."""
        self.seen_names.add(candidate.name)
        if room_type != RoomType.PUBLIC and candidate.email:
            self.seen_emails.add(candidate.email)

    def __len__(self) -> int:
        return len(self.seen_names)


class DuplicateChecker:
    """Checks candidates against participants already stored in a room."""

    def __init__(self, store: Store):
        """Initialize checker.

        Args:
            store: Store holding the participants table
        """
        self._store = store

    async def check_existing(
        self,
        candidate: ParticipantInput,
        room_type: RoomType,
        room_id: str,
    ) -> str | None:
        """Return a reason if the room already has this participant.

        Args:
            candidate: Validated candidate
            room_type: Type of the target room
            room_id: Target room

        Returns:
            None if no collision, else the collision reason

        Raises:
            StoreError: If the existence query fails
        """
        if room_type != RoomType.PUBLIC and await self._store.exists(
            PARTICIPANTS, {"room_id": room_id, "email": candidate.email}
        ):
            return "Email already exists in this room"

        if await self._store.exists(
            PARTICIPANTS, {"room_id": room_id, "name": candidate.name}
        ):
            return "Name already exists in this room"

        return None
