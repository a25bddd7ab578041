"""Exceptions center: documents needing attention."""

import falcon.asgi

from docledger.application.services import DocumentRegistry
from docledger.interfaces.api.resources.documents import _document_to_dict


class ExceptionsResource:
    """GET /v1/exceptions - documents in Error or Review Required."""

    def __init__(self, registry: DocumentRegistry) -> None:
        self._registry = registry

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        items = sorted(self._registry.exceptions(), key=lambda d: d.uploaded_at, reverse=True)
        resp.media = {"items": [_document_to_dict(d) for d in items]}
        resp.status = falcon.HTTP_200
