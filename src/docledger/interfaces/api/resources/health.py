"""Liveness and readiness endpoints."""

import os
from pathlib import Path

import falcon.asgi

from docledger.application.services import DocumentRegistry


def _state_dir_writable(state_dir: Path) -> bool:
    """Whether the directory, or the ancestor it will be created under, is writable."""
    path = state_dir.resolve()
    while not path.exists() and path != path.parent:
        path = path.parent
    return os.access(path, os.W_OK)


class HealthResource:
    """
    GET /v1/health answers as long as the process serves requests.

    GET /v1/health/ready also reports the number of loaded documents and
    answers 503 when metadata can no longer be saved to the state directory.
    """

    def __init__(
        self,
        registry: DocumentRegistry | None = None,
        state_dir: str | Path | None = None,
    ) -> None:
        self._registry = registry
        self._state_dir = Path(state_dir) if state_dir is not None else None

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        if self._state_dir is not None and not _state_dir_writable(self._state_dir):
            resp.media = {
                "status": "unavailable",
                "reason": f"State directory is not writable: {self._state_dir}",
            }
            resp.status = falcon.HTTP_503
            return
        media: dict = {"status": "ready"}
        if self._registry is not None:
            media["documents"] = len(self._registry)
        resp.media = media
        resp.status = falcon.HTTP_200
