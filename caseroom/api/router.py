"""API router aggregation."""

from fastapi import APIRouter

from caseroom.api.canvases import router as canvases_router
from caseroom.api.files import router as files_router
from caseroom.api.health import router as health_router
from caseroom.api.messages import router as messages_router
from caseroom.api.participants import router as participants_router
from caseroom.api.rooms import router as rooms_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(rooms_router)
# Participant and message routes are nested under /rooms/{room_id}
api_router.include_router(participants_router)
api_router.include_router(messages_router)
api_router.include_router(canvases_router)
api_router.include_router(files_router)
