"""Tests for SongInfo parsing of upstream song payloads."""

from __future__ import annotations

import math

import pytest

from playerhub_server.models import SongInfo


def test_camel_and_snake_case_keys():
    camel = SongInfo.from_dict({"title": "T", "videoId": "v", "elapsedSeconds": 5, "isPaused": False})
    snake = SongInfo.from_dict({"title": "T", "video_id": "v", "elapsed_seconds": 5, "is_paused": False})
    assert camel == snake
    assert camel.to_dict()["videoId"] == "v"


@pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan, "12", True, None])
def test_unusable_elapsed_seconds_default_to_zero(value):
    song = SongInfo.from_dict({"elapsedSeconds": value, "songDuration": value})
    assert song.elapsed_seconds == 0
    assert song.song_duration is None
    assert "songDuration" not in song.to_dict()


def test_negative_elapsed_is_clamped():
    assert SongInfo.from_dict({"elapsedSeconds": -4}).elapsed_seconds == 0


def test_finite_song_duration_passes_through():
    assert SongInfo.from_dict({"songDuration": 215}).to_dict()["songDuration"] == 215


@pytest.mark.parametrize("value", ["false", "true", 0, 1, []])
def test_non_bool_is_paused_falls_back_to_paused(value):
    assert SongInfo.from_dict({"isPaused": value}).is_paused is True


def test_real_bool_is_paused_is_kept():
    assert SongInfo.from_dict({"isPaused": False}).is_paused is False
