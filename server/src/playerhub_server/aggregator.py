"""PlayerAggregator — folds upstream events into the canonical player state.

Each ``on_*`` method applies one event and returns the ``Delta`` to
broadcast, or ``None`` when nothing externally visible changed.  The
methods never await, so a caller holding a lock sees each one as atomic.
"""

from __future__ import annotations

import logging
from typing import Any

from .lyrics import normalize_lyric, rendered_lyric
from .models import Delta, LyricLine, MessageType, PlayerState, RepeatMode, SongInfo

logger = logging.getLogger("playerhub.aggregator")


class PlayerAggregator:
    """Owns the current ``PlayerState`` and ``LyricLine``."""

    def __init__(self) -> None:
        self._state = PlayerState()
        self._lyric: LyricLine | None = None
        self._track_generation = 0

    # ── Reads ────────────────────────────────────────────────────

    def snapshot(self) -> PlayerState:
        """Return a copy of the full player state."""
        return self._state.copy()

    @property
    def lyric(self) -> LyricLine | None:
        return self._lyric

    @property
    def song(self) -> SongInfo | None:
        return self._state.song

    @property
    def track_generation(self) -> int:
        """Bumped on every track change; lets async readers detect a switch."""
        return self._track_generation

    # ── Transport ────────────────────────────────────────────────

    def on_track_changed(self, song: SongInfo) -> Delta:
        self._state.song = song
        self._track_generation += 1
        self._state.position = 0
        # Lyrics belong to a track; the old line is meaningless now.
        self._lyric = None
        return Delta(MessageType.VIDEO_CHANGED, {"song": song.to_dict(), "position": 0})

    def on_play_pause(self, song: SongInfo) -> Delta:
        self._state.song = song
        self._state.position = song.elapsed_seconds
        return Delta(
            MessageType.PLAYER_STATE_CHANGED,
            {"isPlaying": self._state.is_playing, "position": self._state.position},
        )

    def on_position(self, seconds: float, song: SongInfo | None = None) -> Delta:
        seconds = max(0, seconds)
        if song is not None:
            self._state.song = song
        if self._state.song is not None:
            self._state.song.elapsed_seconds = seconds
        self._state.position = seconds
        return Delta(MessageType.POSITION_CHANGED, {"position": seconds})

    # ── Mixer / modes ────────────────────────────────────────────

    def on_volume(self, level: int, muted: bool) -> Delta:
        self._state.volume = max(0, min(100, int(level)))
        self._state.muted = bool(muted)
        return Delta(
            MessageType.VOLUME_CHANGED,
            {"volume": self._state.volume, "muted": self._state.muted},
        )

    def on_repeat(self, mode: RepeatMode) -> Delta:
        self._state.repeat = RepeatMode(mode)
        return Delta(MessageType.REPEAT_CHANGED, {"repeat": self._state.repeat.value})

    def on_shuffle(self, flag: bool) -> Delta:
        self._state.shuffle = bool(flag)
        return Delta(MessageType.SHUFFLE_CHANGED, {"shuffle": self._state.shuffle})

    # ── Lyrics ───────────────────────────────────────────────────

    def on_lyric(self, payload: Any) -> Delta | None:
        line = normalize_lyric(payload, self._state.song)
        if line is None:
            return None
        self._lyric = line
        return Delta(MessageType.LYRICS_CHANGED, {"lyric": line.to_dict()})

    def on_rendered_lyric(self, result: Any, generation: int | None = None) -> bool:
        """Replace the lyric with what the renderer shows.  Not broadcast.

        A result read before the latest track change (*generation* behind
        ``track_generation``) belongs to the previous track and is dropped.
        """
        if generation is not None and generation != self._track_generation:
            return False
        line = rendered_lyric(result, self._state.song)
        if line is None:
            return False
        self._lyric = line
        return True
