"""Per-document and batch actions: retry, unlock, post, split, reprocess."""

import falcon.asgi

from docledger.application.dto.document_dto import BatchResult
from docledger.application.services import DocumentRegistry
from docledger.application.use_cases.document.retry_document import RetryReprocessCoordinator
from docledger.application.use_cases.document.split_document import SplitDocumentUseCase
from docledger.application.use_cases.ledger.post_document import LedgerPoster
from docledger.interfaces.api.resources.documents import _document_to_dict
from docledger.interfaces.api.resources.ledger import _entry_to_dict


def _batch_to_dict(result: BatchResult) -> dict:
    return {
        "processed": result.processed,
        "skipped": result.skipped,
        "failed": result.failed,
    }


class DocumentActionsResource:
    """POST /v1/documents/{id}/retry|unlock|post|split."""

    def __init__(
        self,
        registry: DocumentRegistry,
        coordinator: RetryReprocessCoordinator,
        poster: LedgerPoster,
        split_document: SplitDocumentUseCase,
    ) -> None:
        self._registry = registry
        self._coordinator = coordinator
        self._poster = poster
        self._split_document = split_document

    async def on_post_retry(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        """Restart a document in Error from the beginning."""
        await self._coordinator.retry(document_id)
        resp.media = _document_to_dict(self._registry.get(document_id))
        resp.status = falcon.HTTP_200

    async def on_post_unlock(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        """Submit a password for an encrypted PDF."""
        try:
            body = await req.get_media(default_when_empty={})
            password = str(body["password"])
            await self._coordinator.submit_password(document_id, password)
        except (KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.media = _document_to_dict(self._registry.get(document_id))
        resp.status = falcon.HTTP_200

    async def on_post_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        """Post a validated document to the ledger."""
        try:
            body = await req.get_media(default_when_empty={})
            raw_amount = body.get("amount")
            amount = float(raw_amount) if raw_amount is not None else None
            entry = self._poster.post(document_id, amount=amount)
        except (TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.media = {
            "document": _document_to_dict(self._registry.get(document_id)),
            "ledger_entry": _entry_to_dict(entry),
        }
        resp.status = falcon.HTTP_201

    async def on_post_split(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        """Copy a page range of a PDF into a new document."""
        try:
            body = await req.get_media()
            from_page = int(body["from_page"])
            to_page = int(body["to_page"])
            new_name = str(body.get("name") or "")
            record = await self._split_document.execute(
                document_id, from_page, to_page, new_name
            )
        except (KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.media = _document_to_dict(record)
        resp.status = falcon.HTTP_201


class DocumentBatchResource:
    """POST /v1/documents/batch-unlock and /v1/documents/reprocess."""

    def __init__(self, coordinator: RetryReprocessCoordinator) -> None:
        self._coordinator = coordinator

    async def on_post_unlock(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Apply one password to every document waiting for a password."""
        try:
            body = await req.get_media(default_when_empty={})
            result = await self._coordinator.batch_unlock(str(body["password"]))
        except (KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.media = _batch_to_dict(result)
        resp.status = falcon.HTTP_200

    async def on_post_reprocess(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Retry the listed documents that are in Error."""
        try:
            body = await req.get_media(default_when_empty={})
            ids = body["document_ids"]
            if not isinstance(ids, list):
                raise ValueError("document_ids must be a list")
        except (KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        result = await self._coordinator.reprocess_failed([str(i) for i in ids])
        resp.media = _batch_to_dict(result)
        resp.status = falcon.HTTP_200
