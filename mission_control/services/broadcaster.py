#  Mission Control - Live Update Channel
#
#  Fan-out of committed events to connected SSE observers.
#  One instance per process, owned by the DI container.
#
#  Depends on: config.py
#  Used by:    container.py, routes/events.py, services/workflow.py

import asyncio
import json
import logging

from mission_control.config import EVENTS_KEEPALIVE_SECONDS, EVENTS_SUBSCRIBER_QUEUE_SIZE

logger = logging.getLogger("mission_control.broadcaster")


class Subscription:
    """One connected observer: a bounded queue of pending events."""

    def __init__(self, maxsize: int):
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.dropped = False


class EventBroadcaster:
    """Pushes each committed event to every current subscriber.

    broadcast() never blocks and never raises: a subscriber whose queue is
    full is dropped from the fan-out rather than silently losing events.
    Its stream drains what is already queued and then ends, so the client
    reconnects and backfills from GET /api/events. Subscribers only see
    events broadcast after they subscribed.
    """

    def __init__(
        self,
        queue_size: int = EVENTS_SUBSCRIBER_QUEUE_SIZE,
        keepalive_seconds: float = EVENTS_KEEPALIVE_SECONDS,
    ):
        self._queue_size = queue_size
        self._keepalive_seconds = keepalive_seconds
        self._subscribers: set[Subscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription:
        sub = Subscription(self._queue_size)
        self._subscribers.add(sub)
        logger.debug("Subscriber added (%d active)", len(self._subscribers))
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        self._subscribers.discard(sub)
        logger.debug("Subscriber removed (%d active)", len(self._subscribers))

    def broadcast(self, event: dict) -> int:
        """Deliver event to every subscriber. Returns how many received it."""
        delivered = 0
        for sub in list(self._subscribers):
            try:
                sub.queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                sub.dropped = True
                self._subscribers.discard(sub)
                logger.warning(
                    "Dropping slow subscriber after %d undelivered events (event %s)",
                    sub.queue.qsize(), event.get("id"),
                )
        return delivered

    async def stream(self):
        """Yield SSE-formatted strings for one observer. Used by the events endpoint."""
        sub = self.subscribe()
        try:
            # Flush headers to the client before the first event arrives
            yield ": connected\n\n"
            while True:
                if sub.dropped and sub.queue.empty():
                    break
                try:
                    event = await asyncio.wait_for(sub.queue.get(), timeout=self._keepalive_seconds)
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
                    continue
                yield f"data: {json.dumps(event)}\n\n"
        finally:
            self.unsubscribe(sub)
