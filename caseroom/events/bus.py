"""In-process change notification bus.

Writers publish after a store write succeeds. Views subscribe, either to
every room or to a single one, and recompute from the store. Handler
failures are logged and never reach the publisher.
"""

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from caseroom.events.base import Event

logger = logging.getLogger(__name__)

Handler = Callable[[Event], None] | Callable[[Event], Awaitable[None]]


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", repr(handler))


@dataclass(frozen=True)
class Subscription:
    """A handler registered for one event class, optionally one room."""

    event_type: type[Event]
    handler: Handler
    room_id: str | None = None

    def matches(self, event: Event) -> bool:
        return self.room_id is None or self.room_id == event.room_id


class EventBus:
    """Async pub/sub keyed by event class.

    Async handlers run concurrently on the loop, sync handlers in a worker
    thread. Delivery order between handlers is not defined.
    """

    def __init__(self):
        self._subscriptions: dict[type[Event], list[Subscription]] = defaultdict(list)

    def subscribe(
        self,
        event_type: type[Event],
        handler: Handler,
        *,
        room_id: str | None = None,
    ) -> Subscription:
        """Register a handler.

        Args:
            event_type: Event class to receive (exact class, not subclasses)
            handler: Sync or async callable taking the event
            room_id: Only deliver events for this room

        Returns:
            The subscription, needed to unsubscribe
        """
        subscription = Subscription(event_type, handler, room_id)
        self._subscriptions[event_type].append(subscription)
        logger.debug(
            f"{_handler_name(handler)} subscribed to {event_type.__name__}"
            f" (room: {room_id or 'all'})"
        )
        return subscription

    def subscribe_many(
        self,
        event_types: Iterable[type[Event]],
        handler: Handler,
        *,
        room_id: str | None = None,
    ) -> list[Subscription]:
        return [
            self.subscribe(event_type, handler, room_id=room_id)
            for event_type in event_types
        ]

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unknown subscriptions are ignored."""
        registered = self._subscriptions.get(subscription.event_type, [])
        if subscription in registered:
            registered.remove(subscription)
            logger.debug(
                f"{_handler_name(subscription.handler)} unsubscribed from "
                f"{subscription.event_type.__name__}"
            )

    async def publish(self, event: Event) -> int:
        """Deliver an event to every matching subscription.

        Returns:
            Number of handlers that completed without raising
        """
        targets = [
            s for s in self._subscriptions.get(type(event), []) if s.matches(event)
        ]
        if not targets:
            return 0

        logger.debug(
            f"Publishing {event.event_type} for room {event.room_id} "
            f"to {len(targets)} handler(s)"
        )
        results = await asyncio.gather(
            *(self._deliver(s.handler, event) for s in targets),
            return_exceptions=True,
        )

        delivered = 0
        for subscription, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.error(
                    f"{_handler_name(subscription.handler)} failed on "
                    f"{event.event_type}: {result}"
                )
            else:
                delivered += 1
        return delivered

    @staticmethod
    async def _deliver(handler: Handler, event: Event) -> None:
        if inspect.iscoroutinefunction(handler):
            await handler(event)
        else:
            await asyncio.to_thread(handler, event)

    def subscriber_count(self, event_type: type[Event]) -> int:
        return len(self._subscriptions.get(event_type, []))
