"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from caseroom.db.turso import TursoClient
from caseroom.main import app, init_services
from caseroom.models.room import RoomContext, RoomType
from caseroom.store.blob_store import LocalBlobStore
from caseroom.store.sql_store import SqlStore


@pytest.fixture
async def db_client(tmp_path: Path) -> AsyncIterator[TursoClient]:
    """Create a temp file database client for testing."""
    db_path = tmp_path / "test_caseroom.db"
    async with TursoClient(url=f"file:{db_path}") as client:
        yield client


@pytest.fixture
async def store(db_client: TursoClient) -> SqlStore:
    """SqlStore with schema created."""
    store = SqlStore(db_client)
    await store.initialize()
    return store


@pytest.fixture
def blobs(tmp_path: Path) -> LocalBlobStore:
    """Blob store rooted in a temp directory."""
    return LocalBlobStore(root=tmp_path / "blobs", base_url="/files")


@pytest.fixture
def normal_room() -> RoomContext:
    return RoomContext(room_id="room-1", room_type=RoomType.NORMAL)


@pytest.fixture
def public_room() -> RoomContext:
    return RoomContext(room_id="room-2", room_type=RoomType.PUBLIC)


@pytest.fixture
async def client(
    db_client: TursoClient, blobs: LocalBlobStore
) -> AsyncIterator[AsyncClient]:
    """Create async test client for FastAPI app with database."""
    await init_services(app, db_client, blobs)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up app state
    for name in (
        "db",
        "store",
        "event_bus",
        "reconciler",
        "blobs",
        "room_service",
        "canvas_service",
        "ingestion_pipeline",
        "directory_service",
        "chat_service",
    ):
        delattr(app.state, name)
