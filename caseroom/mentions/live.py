"""Live unanswered-mention view driven by change notifications."""

import structlog

from caseroom.events.base import Event
from caseroom.events.bus import EventBus, Subscription
from caseroom.events.types import MessageDeleted, MessageInserted, MessageUpdated
from caseroom.mentions.reconciler import MentionReconciler
from caseroom.mentions.schemas import MentionRecord

logger = structlog.get_logger()

MESSAGE_EVENTS = [MessageInserted, MessageUpdated, MessageDeleted]


class LiveMentionView:
    """Keeps one room's unanswered list current.

    Every message event for the room triggers a full recompute instead
    of patching state from the event payload, so events arriving twice
    or after the local write leave the same result.
    """

    def __init__(self, reconciler: MentionReconciler, bus: EventBus, room_id: str):
        self._reconciler = reconciler
        self._bus = bus
        self.room_id = room_id
        self._subscriptions: list[Subscription] = []

    async def start(self) -> list[MentionRecord]:
        """Load the initial list and subscribe to the room's message events."""
        records = await self._reconciler.refresh(self.room_id)
        if not self._subscriptions:
            self._subscriptions = self._bus.subscribe_many(
                MESSAGE_EVENTS, self._on_event, room_id=self.room_id
            )
        return records

    def stop(self) -> None:
        """Unsubscribe from message events."""
        for subscription in self._subscriptions:
            self._bus.unsubscribe(subscription)
        self._subscriptions = []

    @property
    def unanswered(self) -> list[MentionRecord]:
        return self._reconciler.unanswered(self.room_id)

    async def _on_event(self, event: Event) -> None:
        logger.debug("Message change received", room_id=self.room_id, event_type=event.event_type)
        await self._reconciler.refresh(self.room_id)
