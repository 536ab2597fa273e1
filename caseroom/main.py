"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from caseroom.api.router import api_router
from caseroom.canvases.service import CanvasService
from caseroom.chat.service import ChatService
from caseroom.config import settings
from caseroom.db.turso import TursoClient
from caseroom.directory.service import DirectoryService
from caseroom.events.base import Event
from caseroom.events.bus import EventBus
from caseroom.ingestion.pipeline import IngestionPipeline
from caseroom.mentions.live import MESSAGE_EVENTS
from caseroom.mentions.reconciler import MentionReconciler
from caseroom.rooms.service import RoomService
from caseroom.store.blob_store import LocalBlobStore
from caseroom.store.sql_store import SqlStore

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def init_services(app: FastAPI, db: TursoClient, blobs: LocalBlobStore) -> None:
    """Create the store and services and register them in app state."""
    store = SqlStore(db)
    await store.initialize()
    app.state.db = db
    app.state.store = store
    logger.info("Store schema initialized")

    event_bus = EventBus()
    reconciler = MentionReconciler(store)
    app.state.event_bus = event_bus
    app.state.reconciler = reconciler

    # Keep every room's unanswered list current as messages change
    async def refresh_mentions(event: Event) -> None:
        await reconciler.refresh(event.room_id)

    event_bus.subscribe_many(MESSAGE_EVENTS, refresh_mentions)

    app.state.blobs = blobs
    app.state.room_service = RoomService(store, blobs)
    app.state.canvas_service = CanvasService(store, blobs)
    app.state.ingestion_pipeline = IngestionPipeline(store, event_bus)
    app.state.directory_service = DirectoryService(store, event_bus)
    app.state.chat_service = ChatService(store, reconciler, event_bus)
    logger.info("Services initialized")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup:
    - Connect database and create schema
    - Wire services into app state

    Shutdown:
    - Close database connection
    """
    logger.info("Starting Case Room...")

    db = TursoClient()
    await db.connect()
    logger.info(f"Database connected: {db.url}")
    await init_services(app, db, LocalBlobStore())

    yield

    logger.info("Shutting down Case Room...")
    await db.close()
    logger.info("Database connection closed")


app = FastAPI(
    title=settings.app_name,
    description="Case-management chat rooms with documents and canvas pages",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "caseroom.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
