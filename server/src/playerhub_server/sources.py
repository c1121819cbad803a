"""EventSource — hand-off point between upstream producers and the hub.

Producers call ``publish`` from anywhere on the event loop and never wait;
the hub subscribes exactly once and drains events one at a time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from .events import Event

logger = logging.getLogger("playerhub.sources")


class EventSource:
    def __init__(self) -> None:
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._subscribed = False

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def publish(self, event: Event) -> None:
        self._queue.put_nowait(event)
        logger.debug("Queued %s event (%d pending)", event.kind, self._queue.qsize())

    def subscribe(self) -> AsyncIterator[Event]:
        """Return the event stream.  Only one consumer is allowed."""
        if self._subscribed:
            raise RuntimeError("EventSource already has a subscriber")
        self._subscribed = True
        return self._stream()

    async def _stream(self) -> AsyncIterator[Event]:
        while True:
            event = await self._queue.get()
            try:
                yield event
            finally:
                self._queue.task_done()

    async def drain(self) -> None:
        """Wait until every published event has been consumed."""
        await self._queue.join()
