"""Participant directory: listing, grouping and profile self-edit."""

import structlog

from caseroom.directory.schemas import OTHERS_GROUP, OrganizationGroup, ProfileUpdate
from caseroom.errors import AccessDeniedError, NotFoundError, ValidationError
from caseroom.events.bus import EventBus
from caseroom.events.types import ParticipantUpdated
from caseroom.ingestion.validation import validate_profile_fields
from caseroom.models.participant import Participant
from caseroom.models.room import RoomContext
from caseroom.store.base import PARTICIPANTS, Store

logger = structlog.get_logger()


def group_by_organization(participants: list[Participant]) -> list[OrganizationGroup]:
    """Group participants by trimmed organization.

    Participants without an organization go under "Others". Groups are
    sorted alphabetically with "Others" last; members keep input order.
    """
    groups: dict[str, list[Participant]] = {}
    for participant in participants:
        org = (participant.organization or "").strip() or OTHERS_GROUP
        groups.setdefault(org, []).append(participant)

    ordered = sorted(groups, key=lambda org: (org == OTHERS_GROUP, org.casefold()))
    return [
        OrganizationGroup(organization=org, participants=groups[org]) for org in ordered
    ]


class DirectoryService:
    """Reads room participants and applies profile self-edits."""

    def __init__(self, store: Store, event_bus: EventBus | None = None):
        """Initialize directory service.

        Args:
            store: Store holding the participants table
            event_bus: Optional bus notified after profile edits
        """
        self._store = store
        self._bus = event_bus

    async def list_participants(self, room_id: str) -> list[Participant]:
        rows = await self._store.query(PARTICIPANTS, {"room_id": room_id})
        return [Participant.from_row(row) for row in rows]

    async def grouped_participants(self, room_id: str) -> list[OrganizationGroup]:
        return group_by_organization(await self.list_participants(room_id))

    async def get_participant(self, room_id: str, participant_id: str) -> Participant:
        rows = await self._store.query(
            PARTICIPANTS, {"id": participant_id, "room_id": room_id}, limit=1
        )
        if not rows:
            raise NotFoundError(f"Participant not found: {participant_id}")
        return Participant.from_row(rows[0])

    async def update_profile(
        self,
        context: RoomContext,
        participant_id: str,
        update: ProfileUpdate,
    ) -> Participant:
        """Apply a profile self-edit.

        Only the participant themselves may edit, and only organization,
        phone, description and photo URL can change.

        Args:
            context: Room and caller identity
            participant_id: Profile being edited
            update: New field values

        Returns:
            The updated participant

        Raises:
            NotFoundError: No such participant in the room
            AccessDeniedError: Caller does not own the profile
            ValidationError: One or more fields invalid (all reasons joined)
        """
        participant = await self.get_participant(context.room_id, participant_id)

        owner_key = participant.key_for(context.identity_field)
        caller_key = (context.current_user_key or "").strip()
        if not context.is_public:
            caller_key = caller_key.lower()
        if not caller_key or owner_key != caller_key:
            raise AccessDeniedError("You can only edit your own profile")

        reason = validate_profile_fields(
            organization=update.organization,
            phone=update.phone,
            description=update.description,
            photo_url=update.photo_url,
        )
        if reason:
            raise ValidationError(reason)

        patch = update.to_patch()
        if patch:
            await self._store.update_one(
                PARTICIPANTS, {"id": participant_id, "room_id": context.room_id}, patch
            )
            logger.info(
                "Profile updated",
                room_id=context.room_id,
                participant_id=participant_id,
                fields=sorted(patch),
            )
            if self._bus:
                await self._bus.publish(
                    ParticipantUpdated(
                        room_id=context.room_id, participant_id=participant_id
                    )
                )

        return participant.model_copy(update=patch)
