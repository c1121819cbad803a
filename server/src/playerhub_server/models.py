"""Data models for the player state, lyric lines, and outbound messages.

Everything that leaves the server goes through ``to_dict`` so the wire
format stays camelCase regardless of the Python attribute names.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class RepeatMode(str, Enum):
    """Repeat modes reported by the player."""

    NONE = "NONE"
    ONE = "ONE"
    ALL = "ALL"


class MessageType(str, Enum):
    """``type`` field of every message pushed to subscribers."""

    PLAYER_INFO = "PLAYER_INFO"
    VIDEO_CHANGED = "VIDEO_CHANGED"
    PLAYER_STATE_CHANGED = "PLAYER_STATE_CHANGED"
    POSITION_CHANGED = "POSITION_CHANGED"
    VOLUME_CHANGED = "VOLUME_CHANGED"
    REPEAT_CHANGED = "REPEAT_CHANGED"
    SHUFFLE_CHANGED = "SHUFFLE_CHANGED"
    LYRICS_CHANGED = "LYRICS_CHANGED"
    LYRICS_UNAVAILABLE = "LYRICS_UNAVAILABLE"


# Optional song metadata passed through untouched: wire key -> attribute.
_SONG_EXTRAS = {
    "album": "album",
    "songDuration": "song_duration",
    "imageSrc": "image_src",
    "url": "url",
    "playlistId": "playlist_id",
}


def _finite_number(value: Any, default: Any = 0) -> Any:
    """Return *value* if it is a real, finite number, else *default*."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return value


@dataclass
class SongInfo:
    """The track the player reports as currently loaded."""

    title: str = ""
    artist: str = ""
    video_id: str = ""
    elapsed_seconds: float = 0
    is_paused: bool = True
    album: str | None = None
    song_duration: float | None = None
    image_src: str | None = None
    url: str | None = None
    playlist_id: str | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "title": self.title,
            "artist": self.artist,
            "videoId": self.video_id,
            "elapsedSeconds": self.elapsed_seconds,
            "isPaused": self.is_paused,
        }
        for key, attr in _SONG_EXTRAS.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> SongInfo:
        """Build from an upstream payload, accepting camelCase or snake_case keys."""

        def pick(camel: str, snake: str, default: Any = None) -> Any:
            if data.get(camel) is not None:
                return data[camel]
            if data.get(snake) is not None:
                return data[snake]
            return default

        elapsed = _finite_number(pick("elapsedSeconds", "elapsed_seconds"))
        is_paused = pick("isPaused", "is_paused", True)
        if not isinstance(is_paused, bool):
            is_paused = True
        extras = {attr: data.get(key, data.get(attr)) for key, attr in _SONG_EXTRAS.items()}
        extras["song_duration"] = _finite_number(extras["song_duration"], None)
        return cls(
            title=str(data.get("title") or ""),
            artist=str(data.get("artist") or ""),
            video_id=str(pick("videoId", "video_id", "")),
            elapsed_seconds=max(0, elapsed),
            is_paused=is_paused,
            **extras,
        )


@dataclass
class LyricSong:
    """Denormalized track reference attached to a lyric line."""

    title: str
    artists: list[str]
    video_id: str

    def to_dict(self) -> dict:
        return {"title": self.title, "artists": list(self.artists), "videoId": self.video_id}


@dataclass
class LyricLine:
    """The lyric line currently shown by the player."""

    index: int | None = None
    text: str = ""
    time_in_ms: float = 0
    duration: float = 0
    is_synced: bool = False
    song: LyricSong | None = None
    timestamp: int = 0
    provider: str | None = None
    romanized: str | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "index": self.index,
            "text": self.text,
            "timeInMs": self.time_in_ms,
            "duration": self.duration,
            "isSynced": self.is_synced,
            "timestamp": self.timestamp,
            "provider": self.provider,
            "romanized": self.romanized,
        }
        if self.song is not None:
            data["song"] = self.song.to_dict()
        return data


@dataclass
class PlayerState:
    """Canonical playback snapshot.  ``is_playing`` is always derived."""

    song: SongInfo | None = None
    muted: bool = False
    position: float = 0
    volume: int = 100
    repeat: RepeatMode = RepeatMode.NONE
    shuffle: bool = False

    @property
    def is_playing(self) -> bool:
        return self.song is not None and not self.song.is_paused

    def copy(self) -> PlayerState:
        song = replace(self.song) if self.song is not None else None
        return replace(self, song=song)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "isPlaying": self.is_playing,
            "muted": self.muted,
            "position": self.position,
            "volume": self.volume,
            "repeat": self.repeat.value,
            "shuffle": self.shuffle,
        }
        if self.song is not None:
            data["song"] = self.song.to_dict()
        return data


@dataclass
class Delta:
    """A partial state update produced by a single event."""

    type: MessageType
    fields: dict[str, Any] = field(default_factory=dict)

    def to_message(self) -> dict:
        return {"type": self.type.value, **self.fields}
