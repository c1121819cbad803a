"""Registry of connected WebSocket subscribers.

Any object with an awaitable ``send_text(str)`` counts as a connection, so
tests can register plain fakes instead of Starlette sockets.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol


logger = logging.getLogger("playerhub.registry")


class Connection(Protocol):
    async def send_text(self, data: str) -> Any: ...


class SubscriberRegistry:
    """Live set of subscriber connections."""

    def __init__(self) -> None:
        self._clients: set[Connection] = set()

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, ws: object) -> bool:
        return ws in self._clients

    # ── Membership ───────────────────────────────────────────────

    def add(self, ws: Connection) -> None:
        self._clients.add(ws)
        logger.info("WebSocket client connected (%d total)", len(self._clients))

    def remove(self, ws: Connection) -> None:
        if ws not in self._clients:
            return
        self._clients.discard(ws)
        logger.info("WebSocket client disconnected (%d total)", len(self._clients))

    # ── Delivery ─────────────────────────────────────────────────

    async def for_each(self, fn: Callable[[Connection], Awaitable[Any]]) -> int:
        """Await ``fn(ws)`` for every client concurrently; drop the ones that fail.

        Works on a copy of the client set, so clients joining or leaving
        mid-broadcast don't disturb it, and one slow client doesn't hold up
        the rest.  Returns the number of successful calls.
        """

        async def deliver(ws: Connection) -> bool:
            try:
                await fn(ws)
            except Exception as exc:
                logger.warning("Dropping WebSocket client after send failure: %s", exc)
                return False
            return True

        clients = list(self._clients)
        results = await asyncio.gather(*(deliver(ws) for ws in clients))
        for ws, ok in zip(clients, results):
            if not ok:
                self.remove(ws)
        return sum(results)

    async def broadcast(self, payload: str) -> int:
        """Send a serialized message to every connected client."""
        return await self.for_each(lambda ws: ws.send_text(payload))
