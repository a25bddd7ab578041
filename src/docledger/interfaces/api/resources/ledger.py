"""Ledger and ledger mapping resources."""

import falcon.asgi

from docledger.application.services import LedgerBook
from docledger.domain.entities import LedgerEntry
from docledger.domain.value_objects import LedgerAccount


def _entry_to_dict(e: LedgerEntry) -> dict:
    return {
        "id": e.id,
        "date": e.date.isoformat(),
        "narration": e.narration,
        "debit_account": e.debit_account,
        "credit_account": e.credit_account,
        "amount": e.amount,
        "source_document_id": e.source_document_id,
    }


class LedgerResource:
    """GET /v1/ledger - posted entries, optionally for one document."""

    def __init__(self, ledger: LedgerBook) -> None:
        self._ledger = ledger

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        document_id = req.get_param("document_id")
        entries = (
            self._ledger.entries_for_document(document_id)
            if document_id
            else self._ledger.entries
        )
        resp.media = {"items": [_entry_to_dict(e) for e in entries]}
        resp.status = falcon.HTTP_200


class LedgerMappingsResource:
    """GET/PUT /v1/ledger/mappings - account to ledger code table."""

    def __init__(self, ledger: LedgerBook) -> None:
        self._ledger = ledger

    def _mappings_media(self) -> dict:
        return {m.account.value: m.ledger_code for m in self._ledger.mappings()}

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.media = {"mappings": self._mappings_media()}
        resp.status = falcon.HTTP_200

    async def on_put(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Update codes for the given accounts, e.g. {"mappings": {"Sales": "4100"}}."""
        try:
            body = await req.get_media()
            updates = body["mappings"]
            if not isinstance(updates, dict):
                raise ValueError("mappings must be an object")
            parsed = [(LedgerAccount(k), str(v)) for k, v in updates.items()]
            for _, code in parsed:
                if not code.strip():
                    raise ValueError("Ledger code must not be empty")
        except (KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        for account, code in parsed:
            self._ledger.update_mapping(account, code)
        resp.media = {"mappings": self._mappings_media()}
        resp.status = falcon.HTTP_200
