"""Shared API dependencies and error mapping."""

from fastapi import Header, HTTPException, Request

from caseroom.canvases.service import CanvasService
from caseroom.chat.service import ChatService
from caseroom.directory.service import DirectoryService
from caseroom.errors import (
    AccessDeniedError,
    BulkImportError,
    CaseRoomError,
    DuplicateError,
    MentionStateError,
    NotFoundError,
    ParseError,
    StoreError,
    ValidationError,
)
from caseroom.ingestion.pipeline import IngestionPipeline
from caseroom.mentions.reconciler import MentionReconciler
from caseroom.rooms.service import RoomService
from caseroom.store.base import BlobStore

# Checked in order; BulkImportError before its StoreError parent
_STATUS_CODES: list[tuple[type[CaseRoomError], int]] = [
    (ValidationError, 422),
    (DuplicateError, 409),
    (MentionStateError, 409),
    (NotFoundError, 404),
    (AccessDeniedError, 403),
    (ParseError, 400),
    (BulkImportError, 502),
    (StoreError, 502),
]


def to_http_error(error: CaseRoomError) -> HTTPException:
    """Translate an application error into an HTTPException."""
    status_code = next(
        (code for error_type, code in _STATUS_CODES if isinstance(error, error_type)),
        500,
    )
    detail: str | dict = str(error)
    if isinstance(error, BulkImportError):
        detail = {"message": str(error), "summary": error.summary.model_dump(mode="json")}
    return HTTPException(status_code=status_code, detail=detail)


def participant_key(
    x_participant_key: str | None = Header(default=None),
) -> str | None:
    """Caller identity: email in normal rooms, name in public rooms."""
    return x_participant_key


def get_room_service(request: Request) -> RoomService:
    """Dependency to get RoomService from app state."""
    return request.app.state.room_service


def get_ingestion_pipeline(request: Request) -> IngestionPipeline:
    """Dependency to get IngestionPipeline from app state."""
    return request.app.state.ingestion_pipeline


def get_directory_service(request: Request) -> DirectoryService:
    """Dependency to get DirectoryService from app state."""
    return request.app.state.directory_service


def get_chat_service(request: Request) -> ChatService:
    """Dependency to get ChatService from app state."""
    return request.app.state.chat_service


def get_reconciler(request: Request) -> MentionReconciler:
    """Dependency to get MentionReconciler from app state."""
    return request.app.state.reconciler


def get_blob_store(request: Request) -> BlobStore:
    """Dependency to get the BlobStore from app state."""
    return request.app.state.blobs


def get_canvas_service(request: Request) -> CanvasService:
    """Dependency to get CanvasService from app state."""
    return request.app.state.canvas_service
