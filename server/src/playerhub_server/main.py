"""Player hub server — FastAPI entry point.

Start with::

    cd server
    uv run uvicorn playerhub_server.main:app --host 0.0.0.0 --port 26538

or simply ``playerhub`` once the package is installed.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .hub import BroadcastHub
from .routes import events, lyrics, ws
from .services.renderer import RendererClient
from .sources import EventSource

# ── Logging ──────────────────────────────────────────────────────────

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s  %(name)-24s  %(levelname)-7s  %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("playerhub.main")


# ── Lifecycle ────────────────────────────────────────────────────────

@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the hub for this app instance and run its ingest loop."""
    renderer = None
    if config.RENDERER_URL:
        renderer = RendererClient(config.RENDERER_URL, timeout=config.RENDERER_TIMEOUT_S)
    hub = BroadcastHub(renderer=renderer, renderer_timeout=config.RENDERER_TIMEOUT_S)
    source = EventSource()
    app.state.hub = hub
    app.state.source = source

    task = asyncio.create_task(hub.run(source))
    logger.info("Player hub ready (renderer refresh %s)", "on" if renderer else "off")
    try:
        yield
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        if renderer is not None:
            await renderer.aclose()
        logger.info("Player hub stopped")


# ── App ──────────────────────────────────────────────────────────────

def create_app() -> FastAPI:
    app = FastAPI(
        title="Player Hub",
        description=(
            "Real-time player state and synced-lyric broadcast hub.  "
            "Producers POST events; subscribers listen on the WebSocket."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Overlays and widgets run in browsers on arbitrary origins.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(events.router)
    app.include_router(lyrics.router)
    app.include_router(ws.router)

    @app.get("/health")
    async def health(request: Request) -> dict:
        """Simple health-check endpoint."""
        hub: BroadcastHub = request.app.state.hub
        return {"status": "ok", "subscribers": len(hub.registry)}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())
