"""Liveness and readiness probes."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from caseroom.config import settings
from caseroom.errors import StoreError
from caseroom.store.base import ROOMS

router = APIRouter(prefix="/health", tags=["health"])

OK = "ok"
FAILED = "failed"
NOT_CONFIGURED = "not_configured"


class HealthResponse(BaseModel):
    """Service identity and status."""

    status: str
    service: str
    version: str
    environment: str
    timestamp: datetime


class LivenessResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """Overall readiness plus one entry per dependency."""

    status: str
    checks: dict[str, str]


async def _check_database(request: Request) -> str:
    db = getattr(request.app.state, "db", None)
    if db is None:
        return NOT_CONFIGURED
    return OK if await db.is_healthy() else FAILED


async def _check_schema(request: Request) -> str:
    """Rooms table readable through the store."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        return NOT_CONFIGURED
    try:
        await store.query(ROOMS, {}, limit=1)
    except StoreError:
        return FAILED
    return OK


@router.get("/", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.app_env,
        timestamp=datetime.now(UTC),
    )


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Process is up and serving requests."""
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> ReadinessResponse:
    """Database reachable and schema in place."""
    checks = {
        "api": OK,
        "database": await _check_database(request),
        "store": await _check_schema(request),
    }
    status = "ready" if all(value == OK for value in checks.values()) else "not_ready"
    return ReadinessResponse(status=status, checks=checks)
