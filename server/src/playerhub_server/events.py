"""Upstream events, as a tagged union keyed on ``kind``."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from .models import RepeatMode, SongInfo


class _SongEvent(BaseModel):
    song: dict[str, Any]

    def song_info(self) -> SongInfo:
        return SongInfo.from_dict(self.song)


class TrackChanged(_SongEvent):
    """A new track was loaded."""

    kind: Literal["track_changed"] = "track_changed"


class PlayPauseChanged(_SongEvent):
    kind: Literal["play_pause_changed"] = "play_pause_changed"


class PositionChanged(BaseModel):
    """Periodic playback progress, optionally with the refreshed song."""

    kind: Literal["position_changed"] = "position_changed"
    seconds: float = Field(ge=0, allow_inf_nan=False)
    song: dict[str, Any] | None = None

    def song_info(self) -> SongInfo | None:
        return SongInfo.from_dict(self.song) if self.song is not None else None


class Seeked(BaseModel):
    """The user scrubbed to a new position."""

    kind: Literal["seeked"] = "seeked"
    seconds: float = Field(ge=0, allow_inf_nan=False)


class VolumeChanged(BaseModel):
    kind: Literal["volume_changed"] = "volume_changed"
    level: int = Field(ge=0, le=100)
    muted: bool = False


class RepeatChanged(BaseModel):
    kind: Literal["repeat_changed"] = "repeat_changed"
    mode: RepeatMode


class ShuffleChanged(BaseModel):
    kind: Literal["shuffle_changed"] = "shuffle_changed"
    flag: bool


class LyricUpdated(BaseModel):
    """Raw payload from the lyric provider; normalized by the aggregator."""

    kind: Literal["lyric_updated"] = "lyric_updated"
    payload: Any = None


Event = Annotated[
    Union[
        TrackChanged,
        PlayPauseChanged,
        PositionChanged,
        Seeked,
        VolumeChanged,
        RepeatChanged,
        ShuffleChanged,
        LyricUpdated,
    ],
    Field(discriminator="kind"),
]

_event_adapter: TypeAdapter[Event] = TypeAdapter(Event)


def parse_event(data: Any) -> Event:
    """Validate a raw dict into one of the event models.

    Raises ``pydantic.ValidationError`` on an unknown ``kind`` or bad fields.
    """
    return _event_adapter.validate_python(data)
