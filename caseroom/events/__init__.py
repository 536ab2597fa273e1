"""In-process change notifications.

- Event: Base class for all notifications
- EventBus / Subscription: Async pub/sub used to drive live recompute
- Typed events for participant and message changes
"""

from caseroom.events.base import Event
from caseroom.events.bus import EventBus, Subscription
from caseroom.events.types import (
    MessageDeleted,
    MessageInserted,
    MessageUpdated,
    ParticipantAdded,
    ParticipantsImported,
    ParticipantUpdated,
)

__all__ = [
    "Event",
    "EventBus",
    "MessageDeleted",
    "MessageInserted",
    "MessageUpdated",
    "ParticipantAdded",
    "ParticipantUpdated",
    "ParticipantsImported",
    "Subscription",
]
