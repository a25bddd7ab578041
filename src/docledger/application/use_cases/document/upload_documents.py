"""Upload documents use case: hash, deduplicate, register, process."""

import asyncio
import logging
import mimetypes
from datetime import UTC, datetime

from docledger.application.dto.document_dto import UploadedFile
from docledger.application.services import ByteCache, CachedFile, DocumentRegistry
from docledger.application.use_cases.document.process_document import ProcessingPipeline
from docledger.domain.entities import DocumentRecord, LogEntry, make_document_id
from docledger.domain.value_objects import ContentHash, DocumentStatus

logger = logging.getLogger(__name__)

DUPLICATE_REASON = "Potential duplicate of existing file."


def resolve_mime_type(filename: str, content_type: str | None = None) -> str:
    """Declared content type without parameters, else a guess from the file name."""
    if content_type and content_type.split(";")[0].strip():
        return content_type.split(";")[0].strip().lower()
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


class UploadDocumentsUseCase:
    """Register uploaded files and run the pipeline for every new, non-duplicate one."""

    def __init__(
        self,
        registry: DocumentRegistry,
        byte_cache: ByteCache,
        pipeline: ProcessingPipeline,
    ) -> None:
        self._registry = registry
        self._byte_cache = byte_cache
        self._pipeline = pipeline

    async def execute(self, files: list[UploadedFile]) -> list[DocumentRecord]:
        """Upload files; returns their records after the pipeline settled."""
        document_ids: list[str] = []
        to_process: list[str] = []
        # Registration is sequential so duplicates inside one batch are detected.
        for file in files:
            document_id, needs_run = self._register(file)
            if document_id not in document_ids:
                document_ids.append(document_id)
            if needs_run and document_id not in to_process:
                to_process.append(document_id)

        results = await asyncio.gather(
            *(self._pipeline.process(doc_id) for doc_id in to_process),
            return_exceptions=True,
        )
        for doc_id, result in zip(to_process, results, strict=True):
            if isinstance(result, BaseException):
                logger.error("Pipeline for %s did not run: %s", doc_id, result)

        records = [self._registry.find(doc_id) for doc_id in document_ids]
        return [r for r in records if r is not None]

    def _register(self, file: UploadedFile) -> tuple[str, bool]:
        """Insert a record for the file. Returns (id, whether to auto-pipe it)."""
        content_hash = ContentHash.of(file.data)
        document_id = make_document_id(file.filename, content_hash)
        mime_type = resolve_mime_type(file.filename, file.content_type)

        existing = self._registry.find(document_id)
        if existing is not None:
            # Same name and bytes: idempotent, but the bytes become resident again.
            if not self._byte_cache.has(document_id):
                self._byte_cache.put(
                    document_id, CachedFile(file.filename, file.data, mime_type)
                )
                self._registry.append_log(
                    document_id, "File re-uploaded; original is available again."
                )
            needs_run = existing.status == DocumentStatus.UPLOADED and not (
                self._registry.is_in_flight(document_id)
            )
            return document_id, needs_run

        self._byte_cache.put(document_id, CachedFile(file.filename, file.data, mime_type))
        now = datetime.now(UTC)
        original = self._registry.find_original(content_hash.value, document_id)
        if original is not None:
            record = DocumentRecord(
                id=document_id,
                name=file.filename,
                size=len(file.data),
                mime_type=mime_type,
                content_hash=content_hash.value,
                uploaded_at=now,
                status=DocumentStatus.REVIEW_REQUIRED,
                logs=[LogEntry(now, f"File flagged as potential duplicate of {original.name}.")],
                source=file.source,
                is_duplicate=True,
                duplicate_of=original.name,
                exception_reason=DUPLICATE_REASON,
            )
            self._registry.insert(record)
            logger.info("Document %s flagged as duplicate of %s", document_id, original.id)
            return document_id, False

        record = DocumentRecord(
            id=document_id,
            name=file.filename,
            size=len(file.data),
            mime_type=mime_type,
            content_hash=content_hash.value,
            uploaded_at=now,
            logs=[LogEntry(now, "File added to queue.")],
            source=file.source,
        )
        self._registry.insert(record)
        return document_id, True
