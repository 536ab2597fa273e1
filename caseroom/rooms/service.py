"""Room lifecycle and room documents."""

from pathlib import PurePosixPath

import structlog

from caseroom.errors import NotFoundError, ValidationError
from caseroom.models.room import Room, RoomContext, RoomType
from caseroom.store.base import (
    CANVAS_IMAGE_PREFIX,
    CANVASES,
    MESSAGES,
    PARTICIPANTS,
    ROOMS,
    BlobStore,
    Store,
)

logger = structlog.get_logger()


def clean_filename(filename: str) -> str:
    """Reduce an uploaded filename to its last path component.

    Raises:
        ValidationError: Nothing usable is left
    """
    name = PurePosixPath(filename.replace("\\", "/")).name
    if not name or name in {".", ".."}:
        raise ValidationError(f"Invalid filename: {filename!r}")
    return name


class RoomService:
    """Creates, reads and deletes rooms and their shared documents.

    Documents live in the blob store under "<room_id>/<filename>".
    """

    def __init__(self, store: Store, blobs: BlobStore):
        """Initialize room service.

        Args:
            store: Store holding rooms, participants and messages
            blobs: Blob store for room documents
        """
        self._store = store
        self._blobs = blobs

    async def create_room(self, name: str, room_type: RoomType = RoomType.NORMAL) -> Room:
        room = Room(name=name, type=room_type)
        await self._store.insert_one(ROOMS, room.to_row())
        logger.info("Room created", room_id=room.id, type=room.type.value)
        return room

    async def get_room(self, room_id: str) -> Room:
        rows = await self._store.query(ROOMS, {"id": room_id}, limit=1)
        if not rows:
            raise NotFoundError(f"Room not found: {room_id}")
        return Room.from_row(rows[0])

    async def list_rooms(self) -> list[Room]:
        return [Room.from_row(row) for row in await self._store.query(ROOMS, {})]

    async def context_for(self, room_id: str, current_user_key: str | None = None) -> RoomContext:
        """Build the per-call context from the stored room type."""
        room = await self.get_room(room_id)
        return RoomContext(
            room_id=room.id, room_type=room.type, current_user_key=current_user_key
        )

    async def upload_document(self, room_id: str, filename: str, data: bytes) -> str:
        """Store a document for a room and return its public URL.

        Raises:
            NotFoundError: No such room
            ValidationError: Filename is empty or contains a path
        """
        await self.get_room(room_id)
        path = await self._blobs.upload(f"{room_id}/{clean_filename(filename)}", data)
        return self._blobs.public_url(path)

    async def list_documents(self, room_id: str) -> list[str]:
        """Public URLs of a room's documents."""
        paths = await self._blobs.list(f"{room_id}/")
        return [self._blobs.public_url(path) for path in paths]

    async def delete_document(self, room_id: str, filename: str) -> None:
        """Remove one document from a room.

        Raises:
            NotFoundError: No such room or no such document
            ValidationError: Filename is empty or contains a path
        """
        await self.get_room(room_id)
        path = f"{room_id}/{clean_filename(filename)}"
        if not await self._blobs.delete([path]):
            raise NotFoundError(f"Document not found: {filename}")
        logger.info("Document deleted", room_id=room_id, path=path)

    async def delete_room(self, room_id: str) -> None:
        """Delete a room with its documents, messages and participants.

        Canvas pages attached to the room go too, images included.
        """
        await self.get_room(room_id)

        paths = await self._blobs.list(f"{room_id}/")
        for canvas in await self._store.query(CANVASES, {"room_id": room_id}):
            paths += await self._blobs.list(f"{CANVAS_IMAGE_PREFIX}/{canvas['id']}/")
        if paths:
            await self._blobs.delete(paths)
        messages = await self._store.delete(MESSAGES, {"room_id": room_id})
        participants = await self._store.delete(PARTICIPANTS, {"room_id": room_id})
        canvases = await self._store.delete(CANVASES, {"room_id": room_id})
        await self._store.delete(ROOMS, {"id": room_id})

        logger.info(
            "Room deleted",
            room_id=room_id,
            blobs=len(paths),
            messages=messages,
            participants=participants,
            canvases=canvases,
        )
