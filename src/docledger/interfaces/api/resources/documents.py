"""Document API resources."""

import logging
import re
from urllib.parse import unquote_to_bytes

import falcon.asgi

from docledger.application.dto.document_dto import InboxFilter, InboxSort, UploadedFile
from docledger.application.services import DocumentRegistry
from docledger.application.use_cases.document.remove_document import RemoveDocumentUseCase
from docledger.application.use_cases.document.upload_documents import UploadDocumentsUseCase
from docledger.domain.entities import DocumentRecord

logger = logging.getLogger(__name__)

# RFC 5987: filename*=charset''percent-encoded (two single quotes)
_FILENAME_STAR_RFC5987 = re.compile(r"([\w-]+)''(.+)")


def _decode_filename(raw: str | None) -> str:
    """Decode filename to UTF-8, fixing mojibake when UTF-8 bytes were read as Latin-1."""
    if not raw or not raw.strip():
        return ""
    raw = raw.strip()
    try:
        return raw.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        return raw


def _parse_filename_star_from_header(raw_header_value: bytes) -> str | None:
    """Parse Content-Disposition raw value for filename*=charset''percent-encoded (RFC 5987)."""
    if not raw_header_value:
        return None
    decoded = raw_header_value.decode("utf-8", errors="replace")
    idx = decoded.find("filename*=")
    if idx == -1:
        return None
    rest = decoded[idx + len("filename*=") :].split(";", 1)[0].strip()
    match = _FILENAME_STAR_RFC5987.match(rest)
    if not match:
        return None
    charset, encoded = match.groups()
    try:
        return unquote_to_bytes(encoded).decode(charset)
    except (ValueError, LookupError):
        return None


def _get_part_filename(part: object, fallback_index: int) -> str:
    """Filename of a multipart part: filename, else filename* from raw header, else file_N."""
    raw = (getattr(part, "filename", None) or "").strip()
    if not raw:
        headers = getattr(part, "_headers", None)
        if isinstance(headers, dict):
            raw_star = _parse_filename_star_from_header(headers.get(b"content-disposition", b""))
            if raw_star:
                raw = raw_star.strip()
    decoded = _decode_filename(raw) if raw else ""
    return decoded if decoded else f"file_{fallback_index}"


def _document_to_dict(d: DocumentRecord, include_content: bool = False) -> dict:
    out = {
        "id": d.id,
        "name": d.name,
        "size": d.size,
        "mime_type": d.mime_type,
        "sha256": d.content_hash,
        "uploaded_at": d.uploaded_at.isoformat(),
        "document_type": d.document_type.value,
        "status": d.status.value,
        "version": d.version,
        "source": d.source.value,
        "is_duplicate": d.is_duplicate,
        "duplicate_of": d.duplicate_of,
        "exception_reason": d.exception_reason,
        "fix_suggestion": d.fix_suggestion,
        "review_notes": list(d.review_notes),
        "posted_ledger_entry_ids": list(d.posted_ledger_entry_ids),
        "logs": [
            {"timestamp": e.timestamp.isoformat(), "message": e.message} for e in d.logs
        ],
    }
    if include_content:
        out["content"] = d.content
    return out


class DocumentsResource:
    """GET/POST /v1/documents - inbox listing and multipart upload."""

    def __init__(
        self, upload_documents: UploadDocumentsUseCase, registry: DocumentRegistry
    ) -> None:
        self._upload_documents = upload_documents
        self._registry = registry

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List documents in an inbox view."""
        try:
            inbox_filter = InboxFilter(req.get_param("filter") or InboxFilter.ALL.value)
            sort = InboxSort(req.get_param("sort") or InboxSort.DATE_DESC.value)
        except ValueError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        items = self._registry.list_documents(inbox_filter, sort)
        resp.media = {
            "items": [_document_to_dict(d) for d in items],
            "filter": inbox_filter.value,
            "sort": sort.value,
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Upload files (multipart field `files`); processing completes before responding."""
        if "multipart/form-data" not in (req.content_type or ""):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "multipart/form-data required"}
            return

        try:
            form = await req.get_media()
        except falcon.MediaMalformedError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid multipart: {e.description}"}
            return

        files: list[UploadedFile] = []
        file_index = 0
        async for part in form:
            if (part.name or "") not in ("files", "files[]"):
                continue
            data = await part.get_data()
            if not data:
                continue
            file_index += 1
            files.append(
                UploadedFile(
                    filename=_get_part_filename(part, file_index),
                    data=bytes(data),
                    content_type=part.content_type,
                )
            )
        if not files:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "At least one file required"}
            return

        records = await self._upload_documents.execute(files)
        logger.info("Uploaded %d file(s)", len(files))
        resp.media = {"documents": [_document_to_dict(d) for d in records]}
        resp.status = falcon.HTTP_201


class DocumentsSummaryResource:
    """GET /v1/documents/summary - counts per inbox view."""

    def __init__(self, registry: DocumentRegistry) -> None:
        self._registry = registry

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.media = {"counts": self._registry.counts(), "total": len(self._registry)}
        resp.status = falcon.HTTP_200


class DocumentResource:
    """GET/DELETE /v1/documents/{id}."""

    def __init__(
        self, registry: DocumentRegistry, remove_document: RemoveDocumentUseCase
    ) -> None:
        self._registry = registry
        self._remove_document = remove_document

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        """Document with its extracted content and log."""
        record = self._registry.get(document_id)
        resp.media = _document_to_dict(record, include_content=True)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        document_id: str,
    ) -> None:
        self._remove_document.execute(document_id)
        resp.status = falcon.HTTP_204
