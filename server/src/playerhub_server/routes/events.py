"""POST /api/v1/events — receive player events from upstream producers."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from ..config import API_VERSION
from ..events import parse_event
from ..sources import EventSource

logger = logging.getLogger("playerhub.routes.events")

router = APIRouter()


@router.post(f"/api/{API_VERSION}/events")
async def receive_event(request: Request, body: Any = Body(...)) -> dict:
    """Queue an event for ingestion and return immediately.

    Expected body (one of the ``kind`` variants)::

        {"kind": "volume_changed", "level": 42, "muted": true}
        {"kind": "lyric_updated", "payload": {"index": 3, "line": {...}}}

    Producers don't wait for the broadcast; the hub drains the queue in
    order on its own task.
    """
    try:
        event = parse_event(body)
    except ValidationError as exc:
        logger.warning("Rejected event payload: %s", exc.error_count())
        raise RequestValidationError(exc.errors()) from exc

    source: EventSource = request.app.state.source
    source.publish(event)
    logger.debug("Accepted %s event", event.kind)
    return {"status": "ok", "kind": event.kind}
