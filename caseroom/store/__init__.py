"""Storage layer.

- Store / BlobStore: protocols the services are written against
- SqlStore: Store backed by libSQL through TursoClient
- LocalBlobStore: BlobStore backed by a local directory
"""

from caseroom.store.base import (
    CANVAS_IMAGE_PREFIX,
    CANVASES,
    MESSAGES,
    PARTICIPANTS,
    ROOMS,
    BlobStore,
    Filters,
    Row,
    Store,
)
from caseroom.store.blob_store import LocalBlobStore
from caseroom.store.sql_store import SqlStore

__all__ = [
    "CANVAS_IMAGE_PREFIX",
    "CANVASES",
    "MESSAGES",
    "PARTICIPANTS",
    "ROOMS",
    "BlobStore",
    "Filters",
    "LocalBlobStore",
    "Row",
    "SqlStore",
    "Store",
]
