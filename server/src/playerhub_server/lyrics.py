"""Normalize lyric payloads from upstream producers into ``LyricLine`` records.

Producers send whatever shape their lyric provider gave them.  Every field
is extracted on its own with an explicit fallback, so a bad field degrades
to its default instead of poisoning the whole line.
"""

from __future__ import annotations

import logging
import math
import re
import time
from collections.abc import Mapping
from typing import Any

from .models import LyricLine, LyricSong, SongInfo

logger = logging.getLogger("playerhub.lyrics")

_ARTIST_SEPARATORS = re.compile(r"[&,]")


def now_ms() -> int:
    return int(time.time() * 1000)


def split_artists(artist: str) -> list[str]:
    """``"A & B, C"`` -> ``["A", "B", "C"]``."""
    if not artist:
        return []
    return [part.strip() for part in _ARTIST_SEPARATORS.split(artist)]


def lyric_song(song: SongInfo | None) -> LyricSong | None:
    if song is None:
        return None
    return LyricSong(title=song.title, artists=split_artists(song.artist), video_id=song.video_id)


def to_number(value: Any) -> float:
    """Coerce *value* to a float, returning NaN when it isn't numeric."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def _first_present(source: Mapping, *keys: str) -> Any:
    for key in keys:
        value = source.get(key)
        if value is not None:
            return value
    return None


def _index(value: Any) -> int | None:
    number = to_number(value)
    if not math.isfinite(number) or number < 0:
        return None
    return int(number)


def _millis(value: Any) -> float:
    """Non-negative finite number, or 0."""
    number = to_number(value)
    if not math.isfinite(number) or number < 0:
        return 0
    return int(number) if number.is_integer() else number


def _timestamp(value: Any) -> int:
    number = to_number(value)
    if not math.isfinite(number):
        return now_ms()
    return int(number)


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def normalize_lyric(payload: Any, song: SongInfo | None = None) -> LyricLine | None:
    """Turn a raw ``synced-lyrics`` payload into a ``LyricLine``.

    Returns ``None`` only when extraction blows up; callers treat that as
    "no update".
    """
    try:
        if not isinstance(payload, Mapping):
            payload = {}
        line = payload.get("line")
        if not isinstance(line, Mapping):
            line = {}

        text = _first_present(line, "text", "lyrics")
        raw_time = line.get("timeInMs")
        is_synced = (
            isinstance(raw_time, (int, float)) and not isinstance(raw_time, bool)
        ) or isinstance(line.get("time"), str)

        return LyricLine(
            index=_index(payload.get("index")),
            text="" if text is None else str(text),
            time_in_ms=_millis(_first_present(line, "timeInMs", "time")),
            duration=_millis(line.get("duration")),
            is_synced=is_synced,
            song=lyric_song(song),
            timestamp=_timestamp(payload.get("timestamp")),
            provider=_optional_str(payload.get("provider")),
            romanized=_optional_str(payload.get("romanized")),
        )
    except Exception:
        logger.warning("Discarding unparseable lyric payload", exc_info=True)
        return None


def rendered_lyric(result: Any, song: SongInfo | None = None) -> LyricLine | None:
    """Build a static line from what the renderer reports on screen.

    The renderer only knows the visible text, so timing is zeroed and the
    line is never marked as synced.
    """
    if not isinstance(result, Mapping):
        return None
    try:
        text = result.get("text")
        return LyricLine(
            index=_index(result.get("index")),
            text="" if text is None else str(text),
            song=lyric_song(song),
            timestamp=_timestamp(result.get("timestamp")),
            provider=None,
            romanized=_optional_str(result.get("romanized")),
        )
    except Exception:
        logger.warning("Discarding unparseable renderer result", exc_info=True)
        return None
