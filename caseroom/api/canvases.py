"""Canvas API endpoints: rich-text pages and their images."""

from fastapi import APIRouter, Depends, HTTPException, Response, UploadFile

from caseroom.api.deps import get_canvas_service, to_http_error
from caseroom.api.rooms import DocumentResponse
from caseroom.canvases.schemas import CanvasCreate, CanvasUpdate
from caseroom.canvases.service import CanvasService
from caseroom.errors import CaseRoomError
from caseroom.models.canvas import Canvas

MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB

router = APIRouter(prefix="/canvases", tags=["canvases"])


@router.post("", response_model=Canvas, status_code=201)
async def create_canvas(
    request: CanvasCreate,
    canvases: CanvasService = Depends(get_canvas_service),
) -> Canvas:
    """Create a canvas page."""
    try:
        return await canvases.create_canvas(request)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.get("", response_model=list[Canvas])
async def list_canvases(
    room_id: str | None = None,
    canvases: CanvasService = Depends(get_canvas_service),
) -> list[Canvas]:
    """List canvas pages, newest first."""
    try:
        return await canvases.list_canvases(room_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.get("/{canvas_id}", response_model=Canvas)
async def get_canvas(
    canvas_id: str,
    canvases: CanvasService = Depends(get_canvas_service),
) -> Canvas:
    try:
        return await canvases.get_canvas(canvas_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.patch("/{canvas_id}", response_model=Canvas)
async def update_canvas(
    canvas_id: str,
    request: CanvasUpdate,
    canvases: CanvasService = Depends(get_canvas_service),
) -> Canvas:
    """Edit title, body or visibility."""
    try:
        return await canvases.update_canvas(canvas_id, request)
    except CaseRoomError as e:
        raise to_http_error(e) from e


@router.delete("/{canvas_id}", status_code=204)
async def delete_canvas(
    canvas_id: str,
    canvases: CanvasService = Depends(get_canvas_service),
) -> Response:
    try:
        await canvases.delete_canvas(canvas_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e
    return Response(status_code=204)


@router.post("/{canvas_id}/images", response_model=DocumentResponse, status_code=201)
async def upload_image(
    canvas_id: str,
    file: UploadFile,
    canvases: CanvasService = Depends(get_canvas_service),
) -> DocumentResponse:
    """Upload an image for use in a canvas body."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="Filename is required")

    data = await file.read()
    if len(data) > MAX_IMAGE_SIZE_BYTES:
        max_mb = MAX_IMAGE_SIZE_BYTES // (1024 * 1024)
        raise HTTPException(
            status_code=413, detail=f"File too large. Maximum size: {max_mb}MB"
        )

    try:
        url = await canvases.upload_image(canvas_id, file.filename, data)
    except CaseRoomError as e:
        raise to_http_error(e) from e
    return DocumentResponse(url=url)


@router.get("/{canvas_id}/images", response_model=list[DocumentResponse])
async def list_images(
    canvas_id: str,
    canvases: CanvasService = Depends(get_canvas_service),
) -> list[DocumentResponse]:
    try:
        urls = await canvases.list_images(canvas_id)
    except CaseRoomError as e:
        raise to_http_error(e) from e
    return [DocumentResponse(url=url) for url in urls]
