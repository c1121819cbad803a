"""GET /api/v1/lyrics/current — the lyric line currently on screen."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ..config import API_VERSION
from ..hub import BroadcastHub

router = APIRouter()


class CurrentLyricResponse(BaseModel):
    available: bool
    lyric: dict[str, Any] | None = None


@router.get(
    f"/api/{API_VERSION}/lyrics/current",
    response_model=CurrentLyricResponse,
    summary="get current lyric",
)
async def get_current_lyric(request: Request) -> dict:
    """Return the current active lyric line.

    The renderer is asked for the highlighted line first; when it can't
    answer in time the last line pushed by the lyric provider is returned.
    """
    hub: BroadcastHub = request.app.state.hub
    return await hub.current_lyric()
