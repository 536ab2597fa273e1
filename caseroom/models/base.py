"""Base entity class for all domain models."""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    """Generate a new entity identifier."""
    return str(uuid4())


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


class BaseEntity(BaseModel):
    """Base class for all domain entities.

    Provides:
    - Unique ID (UUID string, as stored)
    - Creation timestamp
    - Standard serialization config
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_default=True,
        from_attributes=True,
    )

    id: str = Field(default_factory=new_id, description="Unique entity identifier")
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When entity was created",
    )
