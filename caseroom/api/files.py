"""Download endpoint for stored blobs (room documents, canvas images)."""

import mimetypes

from fastapi import APIRouter, Depends, Response

from caseroom.api.deps import get_blob_store, to_http_error
from caseroom.config import settings
from caseroom.errors import CaseRoomError
from caseroom.store.base import BlobStore

router = APIRouter(prefix=settings.blob_base_url.rstrip("/"), tags=["files"])


@router.get("/{path:path}")
async def download_file(
    path: str,
    blobs: BlobStore = Depends(get_blob_store),
) -> Response:
    """Serve a stored file at the URL returned by upload."""
    try:
        data = await blobs.read(path)
    except CaseRoomError as e:
        raise to_http_error(e) from e

    media_type, _ = mimetypes.guess_type(path)
    return Response(content=data, media_type=media_type or "application/octet-stream")
