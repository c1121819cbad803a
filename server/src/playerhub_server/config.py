"""
Configuration for the player hub server.

Values come from the environment (or a ``.env`` file next to where the
server is started) so they can be changed without touching code.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# HTTP server
# ---------------------------------------------------------------------------
HOST = os.getenv("PLAYERHUB_HOST", "0.0.0.0")
PORT = _int_env("PLAYERHUB_PORT", 26538)

# Prefix for every versioned route (/api/v1/ws, /api/v1/lyrics/current, ...).
API_VERSION = "v1"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("PLAYERHUB_LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Renderer (playback engine) used to refresh the current lyric on demand.
# An empty URL disables the refresh; the query then serves pushed lyrics only.
# ---------------------------------------------------------------------------
RENDERER_URL = os.getenv("PLAYERHUB_RENDERER_URL", "")

# Upper bound in seconds on one refresh round-trip.
RENDERER_TIMEOUT_S = _float_env("PLAYERHUB_RENDERER_TIMEOUT", 1.5)
