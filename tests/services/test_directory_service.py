"""Tests for DirectoryService and organization grouping."""

import pytest

from caseroom.directory.schemas import ProfileUpdate
from caseroom.directory.service import DirectoryService, group_by_organization
from caseroom.errors import AccessDeniedError, NotFoundError, ValidationError
from caseroom.events.bus import EventBus
from caseroom.events.types import ParticipantUpdated
from caseroom.models.participant import Participant
from caseroom.models.room import RoomContext, RoomType
from caseroom.store.base import PARTICIPANTS
from caseroom.store.sql_store import SqlStore


def person(name: str, org: str | None = None) -> Participant:
    return Participant(room_id="room-1", name=name, organization=org)


class TestGroupByOrganization:
    """Tests for group_by_organization."""

    def test_groups_sorted_with_others_last(self) -> None:
        groups = group_by_organization(
            [
                person("Alice", "Zeta LLP"),
                person("Bob"),
                person("Carol", "acme"),
                person("Dan", "Zeta LLP"),
                person("Eve", "   "),
            ]
        )

        assert [g.organization for g in groups] == ["acme", "Zeta LLP", "Others"]
        assert [p.name for p in groups[1].participants] == ["Alice", "Dan"]
        assert [p.name for p in groups[2].participants] == ["Bob", "Eve"]

    def test_empty(self) -> None:
        assert group_by_organization([]) == []


class TestProfileUpdate:
    """Tests for ProfileUpdate."""

    def test_patch_skips_unset_and_clears_blank(self) -> None:
        update = ProfileUpdate(organization="  Acme ", phone="")
        assert update.to_patch() == {"organization": "Acme", "phone": None}

    def test_rejects_other_fields(self) -> None:
        with pytest.raises(Exception):
            ProfileUpdate(name="New Name")  # type: ignore[call-arg]


@pytest.fixture
async def directory_store(store: SqlStore) -> SqlStore:
    await store.insert_one(
        PARTICIPANTS,
        {"id": "p-alice", "room_id": "room-1", "name": "Alice", "email": "alice@x.com"},
    )
    await store.insert_one(
        PARTICIPANTS, {"id": "p-dana", "room_id": "room-2", "name": "Dana"}
    )
    return store


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def directory(directory_store: SqlStore, bus: EventBus) -> DirectoryService:
    return DirectoryService(directory_store, bus)


@pytest.mark.asyncio
async def test_owner_updates_profile(directory: DirectoryService, bus: EventBus):
    """A participant can edit their own profile fields."""
    events = []
    bus.subscribe(ParticipantUpdated, lambda e: events.append(e))
    context = RoomContext(room_id="room-1", current_user_key="Alice@X.com")

    updated = await directory.update_profile(
        context,
        "p-alice",
        ProfileUpdate(organization="Acme", phone="555 123 4567"),
    )

    assert updated.organization == "Acme"
    stored = await directory.get_participant("room-1", "p-alice")
    assert stored.organization == "Acme"
    assert stored.phone == "555 123 4567"
    assert [e.participant_id for e in events] == ["p-alice"]


@pytest.mark.asyncio
async def test_public_room_owner_is_name(directory: DirectoryService):
    context = RoomContext(
        room_id="room-2", room_type=RoomType.PUBLIC, current_user_key="Dana"
    )

    updated = await directory.update_profile(
        context, "p-dana", ProfileUpdate(description="Witness")
    )

    assert updated.description == "Witness"


@pytest.mark.asyncio
async def test_cannot_edit_someone_else(directory: DirectoryService):
    context = RoomContext(room_id="room-1", current_user_key="bob@x.com")

    with pytest.raises(AccessDeniedError):
        await directory.update_profile(
            context, "p-alice", ProfileUpdate(organization="Evil")
        )


@pytest.mark.asyncio
async def test_invalid_fields_reported_together(directory: DirectoryService):
    context = RoomContext(room_id="room-1", current_user_key="alice@x.com")

    with pytest.raises(ValidationError) as exc_info:
        await directory.update_profile(
            context, "p-alice", ProfileUpdate(phone="12", photo_url="nope")
        )

    assert len(exc_info.value.reason.split("\n")) == 2
    stored = await directory.get_participant("room-1", "p-alice")
    assert stored.phone is None


@pytest.mark.asyncio
async def test_unknown_participant(directory: DirectoryService):
    context = RoomContext(room_id="room-1", current_user_key="alice@x.com")

    with pytest.raises(NotFoundError):
        await directory.update_profile(context, "p-dana", ProfileUpdate())


@pytest.mark.asyncio
async def test_grouped_participants(directory: DirectoryService):
    groups = await directory.grouped_participants("room-1")

    assert [g.organization for g in groups] == ["Others"]
    assert groups[0].participants[0].name == "Alice"
