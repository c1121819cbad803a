"""BroadcastHub — ties the aggregator to the subscriber registry.

One hub exists per running app.  It is the only writer to the aggregator:
every event, every new subscriber baseline and every renderer refresh goes
through ``self._lock`` so subscribers never see a delta before their
snapshot, nor two events interleaved.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from .aggregator import PlayerAggregator
from .events import (
    Event,
    LyricUpdated,
    PlayPauseChanged,
    PositionChanged,
    RepeatChanged,
    Seeked,
    ShuffleChanged,
    TrackChanged,
    VolumeChanged,
)
from .models import Delta, MessageType
from .registry import Connection, SubscriberRegistry
from .services.renderer import RendererClient
from .sources import EventSource

logger = logging.getLogger("playerhub.hub")


class BroadcastHub:
    def __init__(
        self,
        aggregator: PlayerAggregator | None = None,
        registry: SubscriberRegistry | None = None,
        renderer: RendererClient | None = None,
        renderer_timeout: float = 1.5,
    ) -> None:
        self.aggregator = aggregator or PlayerAggregator()
        self.registry = registry or SubscriberRegistry()
        self.renderer = renderer
        self.renderer_timeout = renderer_timeout
        self._lock = asyncio.Lock()

        agg = self.aggregator
        self._handlers: dict[type, Callable[[Any], Delta | None]] = {
            TrackChanged: lambda e: agg.on_track_changed(e.song_info()),
            PlayPauseChanged: lambda e: agg.on_play_pause(e.song_info()),
            PositionChanged: lambda e: agg.on_position(e.seconds, e.song_info()),
            Seeked: lambda e: agg.on_position(e.seconds),
            VolumeChanged: lambda e: agg.on_volume(e.level, e.muted),
            RepeatChanged: lambda e: agg.on_repeat(e.mode),
            ShuffleChanged: lambda e: agg.on_shuffle(e.flag),
            LyricUpdated: self._apply_lyric,
        }

    # ── Subscribers ──────────────────────────────────────────────

    async def on_connect(self, ws: Connection) -> bool:
        """Register *ws* and send it the current baseline.

        Sends ``PLAYER_INFO`` followed by ``LYRICS_CHANGED`` or
        ``LYRICS_UNAVAILABLE``.  Returns False (and unregisters) if the
        client dropped during the handshake.
        """
        async with self._lock:
            self.registry.add(ws)
            info = {"type": MessageType.PLAYER_INFO.value, **self.aggregator.snapshot().to_dict()}
            lyric = self.aggregator.lyric
            if lyric is not None:
                lyrics = {"type": MessageType.LYRICS_CHANGED.value, "lyric": lyric.to_dict()}
            else:
                lyrics = {"type": MessageType.LYRICS_UNAVAILABLE.value}
            try:
                await ws.send_text(json.dumps(info))
                await ws.send_text(json.dumps(lyrics))
            except Exception as exc:
                logger.warning("Client dropped during initial sync: %s", exc)
                self.registry.remove(ws)
                return False
        return True

    def on_disconnect(self, ws: Connection) -> None:
        self.registry.remove(ws)

    # ── Ingest ───────────────────────────────────────────────────

    async def ingest(self, event: Event) -> Delta | None:
        """Fold one event into the state and broadcast the resulting delta.

        Never raises: an event that fails to apply is logged and dropped.
        """
        async with self._lock:
            try:
                delta = self._apply(event)
            except Exception:
                logger.exception("Dropping %s event after unexpected error", type(event).__name__)
                return None
            if delta is None:
                return None
            delivered = await self.registry.broadcast(json.dumps(delta.to_message()))
            logger.debug("Broadcast %s to %d client(s)", delta.type.value, delivered)
            return delta

    def _apply(self, event: Event) -> Delta | None:
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.warning("No handler for event %r", event)
            return None
        return handler(event)

    def _apply_lyric(self, event: LyricUpdated) -> Delta | None:
        payload = event.payload
        if isinstance(payload, dict):
            logger.debug(
                "Received synced lyric: provider=%s romanized=%s index=%s",
                payload.get("provider"),
                payload.get("romanized"),
                payload.get("index"),
            )
        return self.aggregator.on_lyric(payload)

    async def run(self, source: EventSource) -> None:
        """Consume *source* until cancelled."""
        logger.info("Event ingestion started")
        async for event in source.subscribe():
            await self.ingest(event)

    # ── Current lyric query ──────────────────────────────────────

    async def current_lyric(self) -> dict:
        """Return ``{"available": bool, "lyric": dict | None}``.

        Asks the renderer for the line on screen first; if that fails or
        takes longer than ``renderer_timeout`` the last pushed line is used.
        """
        if self.renderer is not None:
            generation = self.aggregator.track_generation
            try:
                result = await asyncio.wait_for(
                    self.renderer.current_line(), timeout=self.renderer_timeout
                )
            except Exception as exc:
                logger.debug("Renderer refresh skipped: %r", exc)
            else:
                if result is not None:
                    async with self._lock:
                        if not self.aggregator.on_rendered_lyric(result, generation):
                            logger.debug("Renderer line not applied (stale track or unusable result)")

        lyric = self.aggregator.lyric
        return {"available": lyric is not None, "lyric": lyric.to_dict() if lyric else None}
