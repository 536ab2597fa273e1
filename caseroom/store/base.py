"""Storage protocols consumed by the core services.

Services depend on these protocols rather than a concrete backend.
Implementations satisfy them structurally; they don't need to inherit.
"""

from typing import Any, Protocol, runtime_checkable

Row = dict[str, Any]
Filters = dict[str, Any]

PARTICIPANTS = "participants"
MESSAGES = "messages"
ROOMS = "rooms"
CANVASES = "canvases"

# Blob prefix for canvas images: canvas/<canvas_id>/<uuid>-<filename>
CANVAS_IMAGE_PREFIX = "canvas"


@runtime_checkable
class Store(Protocol):
    """Row store with equality filters.

    All failures surface as StoreError, except unique-key conflicts on
    insert which surface as DuplicateError.
    """

    async def query(
        self, table: str, filters: Filters, *, limit: int | None = None
    ) -> list[Row]:
        """Return rows matching all filters, in insertion order."""
        ...

    async def insert_one(self, table: str, row: Row) -> Row:
        """Insert a row and return it as stored."""
        ...

    async def insert_many(self, table: str, rows: list[Row]) -> list[Row]:
        """Insert rows atomically and return them as stored."""
        ...

    async def update_one(self, table: str, filters: Filters, patch: Row) -> bool:
        """Patch the first matching row. Returns False if nothing matched."""
        ...

    async def exists(self, table: str, filters: Filters) -> bool:
        """Check whether any row matches."""
        ...

    async def delete(self, table: str, filters: Filters) -> int:
        """Delete matching rows and return how many were removed."""
        ...


@runtime_checkable
class BlobStore(Protocol):
    """Flat path-addressed file storage for room documents."""

    async def upload(self, path: str, data: bytes) -> str:
        """Store bytes at path and return the path."""
        ...

    async def delete(self, paths: list[str]) -> int:
        """Delete paths, returning how many existed."""
        ...

    async def read(self, path: str) -> bytes:
        """Return the bytes stored at path (NotFoundError if absent)."""
        ...

    def public_url(self, path: str) -> str:
        """URL under which the stored file is served."""
        ...

    # Declared last: the name shadows the builtin inside the class body
    async def list(self, prefix: str) -> list[str]:
        """List stored paths under a prefix."""
        ...
