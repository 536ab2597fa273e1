"""Local-directory BlobStore for room documents and canvas images.

Paths are "/"-separated and relative to the root directory, e.g.
"<room_id>/contract.pdf" or "canvas/<canvas_id>/<name>". The files
router serves them back under base_url.
"""

import asyncio
from pathlib import Path, PurePosixPath

import structlog

from caseroom.config import settings
from caseroom.errors import NotFoundError, StoreError

logger = structlog.get_logger()


class LocalBlobStore:
    """Store document bytes under a root directory."""

    def __init__(self, root: str | Path | None = None, base_url: str | None = None):
        """Initialize blob store.

        Args:
            root: Directory holding the files. Defaults to settings.blob_root.
            base_url: URL prefix for public links. Defaults to settings.
        """
        self._root = Path(root or settings.blob_root).resolve()
        self._base_url = (base_url or settings.blob_base_url).rstrip("/")

    def _resolve(self, path: str) -> Path:
        """Map a blob path to a file, refusing anything outside root."""
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise StoreError(f"Invalid blob path: {path!r}")
        return self._root.joinpath(*relative.parts)

    async def upload(self, path: str, data: bytes) -> str:
        target = self._resolve(path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise StoreError(f"Upload failed for {path}: {e}") from e
        logger.info("Stored blob", path=path, size=len(data))
        return path

    async def delete(self, paths: list[str]) -> int:
        targets = [self._resolve(p) for p in paths]

        def _remove() -> int:
            removed = 0
            for target in targets:
                if target.is_file():
                    target.unlink()
                    removed += 1
            return removed

        try:
            removed = await asyncio.to_thread(_remove)
        except OSError as e:
            raise StoreError(f"Delete failed: {e}") from e
        logger.info("Deleted blobs", requested=len(paths), removed=removed)
        return removed

    async def read(self, path: str) -> bytes:
        try:
            target = self._resolve(path)
        except StoreError:
            raise NotFoundError(f"File not found: {path}") from None

        def _read() -> bytes | None:
            return target.read_bytes() if target.is_file() else None

        try:
            data = await asyncio.to_thread(_read)
        except OSError as e:
            raise StoreError(f"Read failed for {path}: {e}") from e
        if data is None:
            raise NotFoundError(f"File not found: {path}")
        return data

    def public_url(self, path: str) -> str:
        self._resolve(path)
        return f"{self._base_url}/{path}"

    # Declared last: the name shadows the builtin inside the class body
    async def list(self, prefix: str) -> list[str]:
        base = self._resolve(prefix) if prefix.strip("/") else self._root

        def _walk() -> list[str]:
            if not base.exists():
                return []
            return sorted(
                p.relative_to(self._root).as_posix()
                for p in base.rglob("*")
                if p.is_file()
            )

        return await asyncio.to_thread(_walk)
