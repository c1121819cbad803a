"""End-to-end tests through the FastAPI app (HTTP + WebSocket)."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from playerhub_server import config
from playerhub_server.main import create_app

WS_URL = f"/api/{config.API_VERSION}/ws"
EVENTS_URL = f"/api/{config.API_VERSION}/events"
LYRIC_URL = f"/api/{config.API_VERSION}/lyrics/current"


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(config, "RENDERER_URL", "")
    with TestClient(create_app()) as c:
        yield c


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "subscribers": 0}


def test_websocket_baseline_then_deltas(client):
    with client.websocket_connect(WS_URL) as ws:
        assert ws.receive_json()["type"] == "PLAYER_INFO"
        assert ws.receive_json() == {"type": "LYRICS_UNAVAILABLE"}

        r = client.post(EVENTS_URL, json={"kind": "volume_changed", "level": 42, "muted": True})
        assert r.json() == {"status": "ok", "kind": "volume_changed"}
        assert ws.receive_json() == {"type": "VOLUME_CHANGED", "volume": 42, "muted": True}

        client.post(EVENTS_URL, json={"kind": "repeat_changed", "mode": "ALL"})
        assert ws.receive_json() == {"type": "REPEAT_CHANGED", "repeat": "ALL"}


def test_two_subscribers_receive_the_same_delta(client):
    with client.websocket_connect(WS_URL) as a, client.websocket_connect(WS_URL) as b:
        for ws in (a, b):
            ws.receive_json()
            ws.receive_json()
        client.post(EVENTS_URL, json={"kind": "shuffle_changed", "flag": True})
        assert a.receive_json() == b.receive_json() == {"type": "SHUFFLE_CHANGED", "shuffle": True}


def test_lyric_flow(client):
    assert client.get(LYRIC_URL).json() == {"available": False, "lyric": None}

    song = {"title": "T", "artist": "A & B", "videoId": "v", "elapsedSeconds": 0, "isPaused": False}
    with client.websocket_connect(WS_URL) as ws:
        ws.receive_json()
        ws.receive_json()
        client.post(EVENTS_URL, json={"kind": "track_changed", "song": song})
        changed = ws.receive_json()
        assert changed["type"] == "VIDEO_CHANGED"
        assert changed["position"] == 0

        client.post(
            EVENTS_URL,
            json={"kind": "lyric_updated", "payload": {"index": 0, "line": {"text": "hi", "timeInMs": 0}}},
        )
        lyric = ws.receive_json()
        assert lyric["type"] == "LYRICS_CHANGED"
        assert lyric["lyric"]["song"] == {"title": "T", "artists": ["A", "B"], "videoId": "v"}

    body = client.get(LYRIC_URL).json()
    assert body["available"] is True
    assert body["lyric"]["text"] == "hi"
    assert body["lyric"]["isSynced"] is True

    with client.websocket_connect(WS_URL) as late:
        assert late.receive_json()["song"]["videoId"] == "v"
        assert late.receive_json()["type"] == "LYRICS_CHANGED"


@pytest.mark.parametrize(
    "body",
    [
        {"kind": "nope"},
        {"kind": "volume_changed", "level": 500},
        {"kind": "position_changed", "seconds": -1},
        {"kind": "repeat_changed", "mode": "SOMETIMES"},
        {"level": 3},
    ],
)
def test_invalid_events_are_rejected(client, body):
    assert client.post(EVENTS_URL, json=body).status_code == 422


def _strict_json(text: str) -> dict:
    def reject(token):
        raise ValueError(f"non-standard JSON token {token}")

    return json.loads(text, parse_constant=reject)


@pytest.mark.parametrize("token", ["Infinity", "-Infinity", "NaN"])
def test_non_finite_song_numbers_never_reach_subscribers(client, token):
    body = (
        '{"kind": "play_pause_changed", "song": {"title": "T", "artist": "A", "videoId": "v", '
        f'"elapsedSeconds": {token}, "songDuration": {token}, "isPaused": false}}}}'
    )
    with client.websocket_connect(WS_URL) as ws:
        ws.receive_json()
        ws.receive_json()
        r = client.post(EVENTS_URL, content=body, headers={"Content-Type": "application/json"})
        assert r.status_code == 200
        changed = _strict_json(ws.receive_text())
        assert changed == {"type": "PLAYER_STATE_CHANGED", "isPlaying": True, "position": 0}

    with client.websocket_connect(WS_URL) as late:
        info = _strict_json(late.receive_text())
        assert info["song"]["elapsedSeconds"] == 0
        assert "songDuration" not in info["song"]
