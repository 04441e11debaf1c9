"""
Live-reload broadcast hub.
Keeps the set of open Server-Sent-Events streams and pushes reload
notifications to them when files change.
"""

import asyncio
import itertools
import logging
from enum import Enum
from typing import AsyncIterator, Iterator, List, Optional

from fastapi.responses import StreamingResponse

logger = logging.getLogger(__name__)

HEARTBEAT_INTERVAL = 60.0  # seconds

STREAM_HEADERS = {
    "connection": "keep-alive",
    "cache-control": "no-cache",
}


def format_event(channel: str, data: str) -> str:
    """Encode one event in the event-stream wire format."""
    return f"event: {channel}\nid: 0\ndata: {data}\n\n"


class SubscriberState(str, Enum):
    """Subscriber state."""
    SUBSCRIBED = "subscribed"
    CLOSED = "closed"


class ReloadSubscriber:
    """One open reload stream: an outbound event queue plus its heartbeat."""

    def __init__(self, subscriber_id: int):
        self.id = subscriber_id
        self.state = SubscriberState.SUBSCRIBED
        self.heartbeat: Optional[asyncio.Task] = None
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()

    @property
    def closed(self) -> bool:
        return self.state == SubscriberState.CLOSED

    def send(self, channel: str, data: str) -> bool:
        """Queue an event; returns False once the subscriber is closed."""
        if self.closed:
            return False
        self._queue.put_nowait(format_event(channel, data))
        return True

    def close(self) -> None:
        """End the stream after already queued events and stop the heartbeat."""
        if self.closed:
            return
        self.state = SubscriberState.CLOSED
        if self.heartbeat is not None:
            self.heartbeat.cancel()
        self._queue.put_nowait(None)

    async def events(self) -> AsyncIterator[str]:
        """Yield queued events until the subscriber is closed."""
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event


class ReloadRegistry:
    """Subscribers currently waiting for a reload notification."""

    def __init__(self):
        self._subscribers: List[ReloadSubscriber] = []

    def add(self, subscriber: ReloadSubscriber) -> None:
        self._subscribers.append(subscriber)

    def remove(self, subscriber: ReloadSubscriber) -> bool:
        try:
            self._subscribers.remove(subscriber)
        except ValueError:
            return False
        return True

    def drain(self) -> List[ReloadSubscriber]:
        """Remove and return every subscriber."""
        drained, self._subscribers = self._subscribers, []
        return drained

    def __contains__(self, subscriber: object) -> bool:
        return subscriber in self._subscribers

    def __iter__(self) -> Iterator[ReloadSubscriber]:
        return iter(list(self._subscribers))

    def __len__(self) -> int:
        return len(self._subscribers)


class LiveReloadHub:
    """
    Owns the reload registry.

    All registry mutation happens on the event loop, so operations are
    serialized without locks. A broadcast drains the registry in one step:
    subscribers added afterwards wait for the next change.
    """

    def __init__(self, heartbeat_interval: float = HEARTBEAT_INTERVAL):
        self.registry = ReloadRegistry()
        self._heartbeat_interval = heartbeat_interval
        self._ids = itertools.count(1)

    def subscribe(self) -> ReloadSubscriber:
        """Register a new subscriber, greet it and arm its heartbeat."""
        subscriber = ReloadSubscriber(next(self._ids))
        subscriber.send("connected", "ready")
        self.registry.add(subscriber)
        subscriber.heartbeat = asyncio.create_task(self._heartbeat(subscriber))
        logger.debug(f"Reload subscriber {subscriber.id} connected ({len(self.registry)} open)")
        return subscriber

    def unsubscribe(self, subscriber: ReloadSubscriber) -> None:
        """Close a subscriber and drop it from the registry if still present."""
        subscriber.close()
        if self.registry.remove(subscriber):
            logger.debug(f"Reload subscriber {subscriber.id} disconnected ({len(self.registry)} open)")

    async def stream(self, subscriber: ReloadSubscriber) -> AsyncIterator[str]:
        """Event stream body for subscriber; deregisters when the stream ends."""
        try:
            async for event in subscriber.events():
                yield event
        finally:
            self.unsubscribe(subscriber)

    def event_stream_response(self) -> StreamingResponse:
        """Subscribe and return the long-lived event-stream response."""
        subscriber = self.subscribe()
        return StreamingResponse(
            self.stream(subscriber),
            media_type="text/event-stream",
            headers=STREAM_HEADERS,
        )

    def on_file_change(self) -> int:
        """Send reload to every subscriber and empty the registry."""
        delivered = 0
        for subscriber in self.registry.drain():
            if subscriber.send("message", "reload"):
                delivered += 1
            subscriber.close()

        if delivered:
            logger.info(f"Reload sent to {delivered} client(s)")
        return delivered

    def shutdown(self) -> int:
        """Close every still-registered stream."""
        closed = 0
        for subscriber in self.registry.drain():
            subscriber.close()
            closed += 1

        if closed:
            logger.info(f"Closed {closed} live-reload stream(s)")
        return closed

    async def _heartbeat(self, subscriber: ReloadSubscriber) -> None:
        while not subscriber.closed:
            await asyncio.sleep(self._heartbeat_interval)
            subscriber.send("ping", "waiting")
