"""Canvas pages: titled rich-text content with embedded images."""

import mimetypes

import structlog

from caseroom.canvases.schemas import CanvasCreate, CanvasUpdate
from caseroom.errors import NotFoundError, ValidationError
from caseroom.models.base import new_id, utc_now
from caseroom.models.canvas import Canvas
from caseroom.rooms.service import clean_filename
from caseroom.store.base import CANVAS_IMAGE_PREFIX, CANVASES, ROOMS, BlobStore, Store

logger = structlog.get_logger()


class CanvasService:
    """Creates, edits and deletes canvas pages and their images."""

    def __init__(self, store: Store, blobs: BlobStore):
        """Initialize canvas service.

        Args:
            store: Store holding the canvases table
            blobs: Blob store for images embedded in pages
        """
        self._store = store
        self._blobs = blobs

    async def create_canvas(self, request: CanvasCreate) -> Canvas:
        """Store a new canvas page.

        Raises:
            NotFoundError: room_id given but no such room
        """
        if request.room_id and not await self._store.exists(
            ROOMS, {"id": request.room_id}
        ):
            raise NotFoundError(f"Room not found: {request.room_id}")

        canvas = Canvas(**request.model_dump())
        await self._store.insert_one(CANVASES, canvas.to_row())
        logger.info("Canvas created", canvas_id=canvas.id, room_id=canvas.room_id)
        return canvas

    async def get_canvas(self, canvas_id: str) -> Canvas:
        rows = await self._store.query(CANVASES, {"id": canvas_id}, limit=1)
        if not rows:
            raise NotFoundError(f"Canvas not found: {canvas_id}")
        return Canvas.from_row(rows[0])

    async def list_canvases(self, room_id: str | None = None) -> list[Canvas]:
        """Canvas pages, newest first, optionally only those of one room."""
        filters = {"room_id": room_id} if room_id else {}
        rows = await self._store.query(CANVASES, filters)
        return [Canvas.from_row(row) for row in reversed(rows)]

    async def update_canvas(self, canvas_id: str, update: CanvasUpdate) -> Canvas:
        """Apply an edit and bump updated_at.

        Raises:
            NotFoundError: No such canvas
        """
        await self.get_canvas(canvas_id)
        patch = update.to_patch()
        if patch:
            patch["updated_at"] = utc_now().isoformat()
            await self._store.update_one(CANVASES, {"id": canvas_id}, patch)
            logger.info("Canvas updated", canvas_id=canvas_id, fields=sorted(patch))
        return await self.get_canvas(canvas_id)

    async def delete_canvas(self, canvas_id: str) -> None:
        """Delete a canvas and its images."""
        await self.get_canvas(canvas_id)
        paths = await self._blobs.list(f"{CANVAS_IMAGE_PREFIX}/{canvas_id}/")
        if paths:
            await self._blobs.delete(paths)
        await self._store.delete(CANVASES, {"id": canvas_id})
        logger.info("Canvas deleted", canvas_id=canvas_id, images=len(paths))

    async def upload_image(self, canvas_id: str, filename: str, data: bytes) -> str:
        """Store an image for a canvas and return its public URL.

        Each upload gets a fresh id prefix, so the same filename can be
        added twice.

        Raises:
            NotFoundError: No such canvas
            ValidationError: Bad filename or not an image type
        """
        await self.get_canvas(canvas_id)
        name = clean_filename(filename)
        media_type, _ = mimetypes.guess_type(name)
        if not media_type or not media_type.startswith("image/"):
            raise ValidationError("Only image files can be added to a canvas")

        path = await self._blobs.upload(
            f"{CANVAS_IMAGE_PREFIX}/{canvas_id}/{new_id()}-{name}", data
        )
        return self._blobs.public_url(path)

    async def list_images(self, canvas_id: str) -> list[str]:
        await self.get_canvas(canvas_id)
        paths = await self._blobs.list(f"{CANVAS_IMAGE_PREFIX}/{canvas_id}/")
        return [self._blobs.public_url(path) for path in paths]
