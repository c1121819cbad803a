"""WebSocket /api/v1/ws — real-time player state stream."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..config import API_VERSION
from ..hub import BroadcastHub

logger = logging.getLogger("playerhub.routes.ws")

router = APIRouter()


@router.websocket(f"/api/{API_VERSION}/ws")
async def websocket_endpoint(ws: WebSocket) -> None:
    """Accept a subscriber and keep the connection open.

    On connect the hub sends ``PLAYER_INFO`` and the current lyric state so
    the client starts from a consistent baseline; after that it only
    receives deltas.  Anything the client sends is logged and ignored.
    """
    await ws.accept()
    hub: BroadcastHub = ws.app.state.hub

    if not await hub.on_connect(ws):
        return

    try:
        while True:
            data = await ws.receive_text()
            logger.debug("WS received from client: %s", data[:200])
    except WebSocketDisconnect:
        pass
    finally:
        hub.on_disconnect(ws)
