"""Pub/sub fan-out for backend push events.

One long-lived SSE stream feeds the hub; long-lived consumers (the history
cache, the picker host) each get their own bounded queue for the event types
they care about. Handlers never close over UI snapshots: they receive events
through the queue and apply them to state they own.

Example:
    hub = PushEventHub()
    pump_task = asyncio.create_task(hub.pump(client.iter_events()))

    queue = hub.subscribe("entry-added", "history-sync")
    event = await queue.get()
    hub.unsubscribe(queue)

    # Or scoped, released on exit:
    async with hub.subscription("window-shown") as queue:
        event = await queue.get()
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

logger = logging.getLogger(__name__)

EventQueue = asyncio.Queue[dict[str, Any]]


class PushEventHub:
    """Route push events to per-subscriber queues by event type.

    Features:
        - One queue may subscribe to several event types
        - Bounded queues with drop-on-full backpressure (logged and flagged
          per queue, see take_overflow)
        - Sequence numbers attached to each published event
        - Cleanup of empty type keys when the last subscriber leaves

    Attributes:
        _subscribers: Map from event type to the set of subscribed queues.
        _max_queue_size: Maximum events per subscriber queue before dropping.
        _seq: Monotonic sequence counter across all events.
    """

    def __init__(self, max_queue_size: int = 256) -> None:
        """Initialize the hub.

        Args:
            max_queue_size: Maximum events per subscriber queue. When full,
                new events are dropped for that subscriber.
        """
        self._subscribers: dict[str, set[EventQueue]] = defaultdict(set)
        self._max_queue_size = max_queue_size
        self._seq = 0
        self._dropped = 0
        self._overflowed: set[EventQueue] = set()

    def subscribe(self, *event_types: str) -> EventQueue:
        """Create a queue receiving every event whose type is in event_types.

        Raises:
            ValueError: If no event types are given.
        """
        if not event_types:
            raise ValueError("at least one event type is required")
        queue: EventQueue = asyncio.Queue(maxsize=self._max_queue_size)
        for event_type in event_types:
            self._subscribers[event_type].add(queue)
        logger.debug("Subscribed queue to %s", sorted(event_types))
        return queue

    def unsubscribe(self, queue: EventQueue) -> None:
        """Remove a queue from every event type.

        Safe to call even if the queue was never subscribed or already removed.
        """
        for event_type in list(self._subscribers):
            subs = self._subscribers.get(event_type)
            if subs is None:
                continue
            subs.discard(queue)
            if not subs:
                del self._subscribers[event_type]
        self._overflowed.discard(queue)

    @asynccontextmanager
    async def subscription(self, *event_types: str) -> AsyncIterator[EventQueue]:
        """Scoped subscribe/unsubscribe pair."""
        queue = self.subscribe(*event_types)
        try:
            yield queue
        finally:
            self.unsubscribe(queue)

    def subscriber_count(self, event_type: str) -> int:
        """Count queues subscribed to an event type."""
        subs = self._subscribers.get(event_type)
        return len(subs) if subs else 0

    def take_overflow(self, queue: EventQueue) -> bool:
        """Report whether events were dropped for queue since the last call.

        A subscriber that mirrors state should resynchronize when this is True.
        """
        if queue in self._overflowed:
            self._overflowed.discard(queue)
            return True
        return False

    @property
    def dropped(self) -> int:
        """Total events dropped because a subscriber queue was full."""
        return self._dropped

    async def publish(self, event: dict[str, Any]) -> None:
        """Deliver an event to every queue subscribed to its type.

        The event is copied and stamped with a sequence number. Events whose
        type nobody subscribed to are discarded.
        """
        event_type = event.get("type")
        self._seq += 1
        event = dict(event)
        event["seq"] = self._seq

        subs = self._subscribers.get(event_type) if isinstance(event_type, str) else None
        if not subs:
            logger.debug("No subscribers for event %s (seq=%d)", event_type, self._seq)
            return

        for queue in list(subs):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                self._dropped += 1
                self._overflowed.add(queue)
                logger.warning(
                    "Dropping %s event (seq=%d) for slow subscriber", event_type, self._seq
                )

    async def pump(self, events: AsyncIterator[dict[str, Any]]) -> None:
        """Consume an event iterator and publish everything it yields.

        Run as a background task; returns when the iterator is exhausted.

        Example:
            pump_task = asyncio.create_task(hub.pump(client.iter_events()))
            ...
            pump_task.cancel()
        """
        async for event in events:
            await self.publish(event)
        logger.debug("Push event stream ended")
