"""Room API endpoints: lifecycle and shared documents."""

from fastapi import APIRouter, Depends, HTTPException, Response, UploadFile
from pydantic import BaseModel, Field

from caseroom.api.deps import get_room_service, to_http_error
from caseroom.errors import CaseRoomError
from caseroom.models.room import Room, RoomType
from caseroom.rooms.service import RoomService

MAX_DOCUMENT_SIZE_BYTES = 20 * 1024 * 1024  # 20 MB

router = APIRouter(prefix="/rooms", tags=["rooms"])


class RoomCreate(BaseModel):
    """Request to create a room."""

    name: str = Field(min_length=1, max_length=200, description="Room title")
    type: RoomType = Field(default=RoomType.NORMAL, description="normal or public")


class DocumentResponse(BaseModel):
    """A stored room document."""

    url: str


@router.post("", response_model=Room, status_code=201)
async def create_room(
    request: RoomCreate,
    rooms: RoomService = Depends(get_room_service),
) -> Room:
    """Create a new room."""
    try:
        return await rooms.create_room(request.name, request.type)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.get("", response_model=list[Room])
async def list_rooms(rooms: RoomService = Depends(get_room_service)) -> list[Room]:
    """List all rooms."""
    try:
        return await rooms.list_rooms()
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.get("/{room_id}", response_model=Room)
async def get_room(
    room_id: str,
    rooms: RoomService = Depends(get_room_service),
) -> Room:
    """Get one room."""
    try:
        return await rooms.get_room(room_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.delete("/{room_id}", status_code=204)
async def delete_room(
    room_id: str,
    rooms: RoomService = Depends(get_room_service),
) -> Response:
    """Delete a room with its participants, messages and documents."""
    try:
        await rooms.delete_room(room_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e
    return Response(status_code=204)


@router.post("/{room_id}/documents", response_model=DocumentResponse, status_code=201)
async def upload_document(
    room_id: str,
    file: UploadFile,
    rooms: RoomService = Depends(get_room_service),
) -> DocumentResponse:
    """Upload a document to a room."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="Filename is required")

    data = await file.read()
    if len(data) > MAX_DOCUMENT_SIZE_BYTES:
        max_mb = MAX_DOCUMENT_SIZE_BYTES // (1024 * 1024)
        raise HTTPException(
            status_code=413, detail=f"File too large. Maximum size: {max_mb}MB"
        )

    try:
        url = await rooms.upload_document(room_id, file.filename, data)
    except CaseRoomError as e:
        raise to_http_error(e) from e
    return DocumentResponse(url=url)


@router.get("/{room_id}/documents", response_model=list[DocumentResponse])
async def list_documents(
    room_id: str,
    rooms: RoomService = Depends(get_room_service),
) -> list[DocumentResponse]:
    """List a room's documents."""
    try:
        urls = await rooms.list_documents(room_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e
    return [DocumentResponse(url=url) for url in urls]


@router.delete("/{room_id}/documents/{filename}", status_code=204)
async def delete_document(
    room_id: str,
    filename: str,
    rooms: RoomService = Depends(get_room_service),
) -> Response:
    """Delete one of a room's documents."""
    try:
        await rooms.delete_document(room_id, filename)
    except CaseRoomError as e:
        raise to_http_error(e) from e
    return Response(status_code=204)
