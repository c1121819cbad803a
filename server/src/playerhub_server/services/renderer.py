"""Client for the playback engine's script-evaluation endpoint.

The engine renders the lyrics view; this client asks it to evaluate a
read-only snippet against the live document and hands back whatever JSON
value the snippet produced.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger("playerhub.renderer")

# ── Script evaluated inside the renderer ─────────────────────────────

CURRENT_LINE_SCRIPT = """\
(() => {
  const el = document.querySelector('.synced-line.current');
  if (!el) return null;
  const textEl = el.querySelector('.text-lyrics');
  const romajiEl = el.querySelector('.romaji');
  return {
    index: null,
    text: textEl ? textEl.innerText.trim() : '',
    romanized: romajiEl ? romajiEl.innerText.trim() : null,
    timestamp: Date.now()
  };
})();"""


class RendererError(Exception):
    """The renderer could not be reached or returned something unusable."""


class RendererClient:
    """Evaluates scripts in the renderer over HTTP.

    Parameters
    ----------
    url:
        Evaluation endpoint.  It receives ``{"expression": ..., "returnByValue":
        true}`` and answers ``{"result": <value>}``.
    timeout:
        Per-request timeout in seconds.
    client:
        Optional pre-built ``httpx.AsyncClient`` (tests pass one with a mock
        transport).
    """

    def __init__(
        self,
        url: str,
        timeout: float = 1.5,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self._timeout = float(timeout)
        self._client = client or httpx.AsyncClient(timeout=self._timeout)

    async def evaluate(self, expression: str) -> Any:
        try:
            r = await self._client.post(
                self.url,
                json={"expression": expression, "returnByValue": True},
            )
            r.raise_for_status()
            body = r.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise RendererError(f"evaluation failed: {exc}") from exc

        if not isinstance(body, dict):
            raise RendererError("renderer answered with a non-object body")
        if body.get("error"):
            raise RendererError(str(body["error"]))
        return body.get("result")

    async def current_line(self) -> dict | None:
        """Return the highlighted lyric line, or ``None`` if none is shown."""
        result = await self.evaluate(CURRENT_LINE_SCRIPT)
        if result is None:
            return None
        if not isinstance(result, dict):
            raise RendererError(f"unexpected current-line result: {type(result).__name__}")
        return result

    async def aclose(self) -> None:
        await self._client.aclose()
