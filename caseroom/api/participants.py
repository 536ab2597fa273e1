"""Participant API endpoints: single add, bulk import, directory, profile edit."""

import asyncio
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, UploadFile
from pydantic import BaseModel, Field

from caseroom.api.deps import (
    get_directory_service,
    get_ingestion_pipeline,
    get_room_service,
    participant_key,
    to_http_error,
)
from caseroom.directory.schemas import OrganizationGroup, ProfileUpdate
from caseroom.directory.service import DirectoryService
from caseroom.errors import CaseRoomError
from caseroom.ingestion.normalizer import parse_xlsx
from caseroom.ingestion.pipeline import IngestionPipeline
from caseroom.ingestion.schemas import ImportSummary
from caseroom.models.participant import Participant
from caseroom.rooms.service import RoomService

MAX_UPLOAD_SIZE_BYTES = 5 * 1024 * 1024  # 5 MB
UPLOAD_SUFFIXES = {".csv", ".xlsx"}

router = APIRouter(prefix="/rooms/{room_id}/participants", tags=["participants"])


class ParticipantCreate(BaseModel):
    """Single-add form. Keys match the CSV import columns."""

    name: str = Field(default="", description="Display name")
    email: str | None = Field(default=None, description="Required in normal rooms")
    phone: str | None = Field(default=None)
    org: str | None = Field(default=None, description="Organization (role in public rooms)")
    photourl: str | None = Field(default=None, description="Photo URL")
    desc: str | None = Field(default=None, description="Description")


class ImportResponse(BaseModel):
    """Bulk import outcome with a ready-to-show message."""

    summary: ImportSummary
    message: str


def decode_csv(content_bytes: bytes) -> str:
    """Decode an uploaded CSV, UTF-8 (with or without BOM) then Latin-1."""
    try:
        return content_bytes.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content_bytes.decode("latin-1")


@router.post("", response_model=Participant, status_code=201)
async def add_participant(
    room_id: str,
    request: ParticipantCreate,
    rooms: RoomService = Depends(get_room_service),
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
) -> Participant:
    """Add one participant to a room.

    Name is always required; email too unless the room is public. Name
    and email must be unique within the room.
    """
    try:
        context = await rooms.context_for(room_id)
        return await pipeline.add_single(request.model_dump(), context)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.post("/bulk", response_model=ImportResponse)
async def import_participants(
    room_id: str,
    file: UploadFile,
    rooms: RoomService = Depends(get_room_service),
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
) -> ImportResponse:
    """Import participants from a CSV or Excel (.xlsx) file.

    Columns (case-insensitive): name, email, phone, org, photourl, desc.
    For Excel, the first sheet is read.
    Rows that fail validation or duplicate checks are skipped and listed
    in the summary.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="Filename is required")
    suffix = Path(file.filename).suffix.lower()
    if suffix not in UPLOAD_SUFFIXES:
        raise HTTPException(
            status_code=415, detail="Please upload a CSV or Excel file"
        )

    content_bytes = await file.read()
    if not content_bytes:
        raise HTTPException(status_code=400, detail="File is empty")
    if len(content_bytes) > MAX_UPLOAD_SIZE_BYTES:
        max_mb = MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
        raise HTTPException(
            status_code=413, detail=f"File too large. Maximum size: {max_mb}MB"
        )

    try:
        context = await rooms.context_for(room_id)
        if suffix == ".xlsx":
            rows = await asyncio.to_thread(parse_xlsx, content_bytes)
            summary = await pipeline.add_bulk_rows(rows, context)
        else:
            summary = await pipeline.add_bulk(decode_csv(content_bytes), context)
    except CaseRoomError as e:
        raise to_http_error(e) from e
    return ImportResponse(summary=summary, message=summary.to_message())


@router.get("", response_model=list[OrganizationGroup])
async def list_participants(
    room_id: str,
    directory: DirectoryService = Depends(get_directory_service),
) -> list[OrganizationGroup]:
    """Room participants grouped by organization ("Others" last)."""
    try:
        return await directory.grouped_participants(room_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.patch("/{participant_id}", response_model=Participant)
async def update_profile(
    room_id: str,
    participant_id: str,
    request: ProfileUpdate,
    current_user: str | None = Depends(participant_key),
    rooms: RoomService = Depends(get_room_service),
    directory: DirectoryService = Depends(get_directory_service),
) -> Participant:
    """Edit your own organization, phone, description or photo URL."""
    try:
        context = await rooms.context_for(room_id, current_user)
        return await directory.update_profile(context, participant_id, request)
    except CaseRoomError as e:
        raise to_http_error(e) from e
