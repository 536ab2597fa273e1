"""Canvas pages: rich-text content with image uploads."""

from caseroom.canvases.schemas import CanvasCreate, CanvasUpdate
from caseroom.canvases.service import CanvasService

__all__ = [
    "CanvasCreate",
    "CanvasService",
    "CanvasUpdate",
]
