"""Change notification base class."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from caseroom.models.base import new_id, utc_now


class Event(BaseModel):
    """Something that already changed in a room's stored data.

    Events name what changed, not the new state. Subscribers re-read the
    store, so an event delivered twice or late only costs a recompute.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=new_id, description="Unique event ID")
    occurred_at: datetime = Field(
        default_factory=utc_now,
        description="When the change was committed",
    )
    room_id: str = Field(description="Room whose data changed")

    @property
    def event_type(self) -> str:
        return type(self).__name__
