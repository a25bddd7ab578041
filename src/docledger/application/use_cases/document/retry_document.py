"""Retry, password unlock and reprocess-failed coordination."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from docledger.application.dto.document_dto import BatchResult
from docledger.application.services import ByteCache, DocumentRegistry, SessionNotices
from docledger.application.use_cases.document.process_document import ProcessingPipeline
from docledger.domain.entities import DocumentRecord
from docledger.domain.exceptions import ResourceUnavailable
from docledger.domain.value_objects import PASSWORD_STATUSES, DocumentStatus

logger = logging.getLogger(__name__)

RETRY_UNAVAILABLE_NOTICE = (
    "Cannot retry: The original file is not available in this session. "
    "Please re-upload the document to process it again."
)
UNLOCK_UNAVAILABLE_NOTICE = (
    "Cannot unlock: The original file is not available in this session. "
    "Please re-upload the document."
)


class RetryReprocessCoordinator:
    """User-initiated re-entry into the pipeline."""

    def __init__(
        self,
        registry: DocumentRegistry,
        byte_cache: ByteCache,
        pipeline: ProcessingPipeline,
        notices: SessionNotices,
    ) -> None:
        self._registry = registry
        self._byte_cache = byte_cache
        self._pipeline = pipeline
        self._notices = notices

    async def retry(self, document_id: str) -> DocumentRecord | None:
        """Restart a failed document. Raises ResourceUnavailable without resident bytes."""
        self._registry.get(document_id)
        if not self._byte_cache.has(document_id):
            self._notices.publish(RETRY_UNAVAILABLE_NOTICE)
            raise ResourceUnavailable(RETRY_UNAVAILABLE_NOTICE)
        return await self._pipeline.restart(document_id)

    async def submit_password(self, document_id: str, password: str) -> DocumentRecord | None:
        """Retry extraction of an encrypted document with a password."""
        if not password:
            raise ValueError("Password must not be empty")
        self._registry.get(document_id)
        if not self._byte_cache.has(document_id):
            self._notices.publish(UNLOCK_UNAVAILABLE_NOTICE)
            raise ResourceUnavailable(UNLOCK_UNAVAILABLE_NOTICE)
        return await self._pipeline.unlock(document_id, password)

    async def batch_unlock(self, password: str) -> BatchResult:
        """Apply one password to every document waiting for a password."""
        if not password:
            raise ValueError("Password must not be empty")
        targets = self._registry.ids_with_status(PASSWORD_STATUSES)
        return await self._fan_out(
            targets, lambda doc_id: self.submit_password(doc_id, password)
        )

    async def reprocess_failed(self, document_ids: list[str]) -> BatchResult:
        """Retry the given documents that are in Error; others are skipped."""
        targets: list[str] = []
        skipped: list[str] = []
        for doc_id in dict.fromkeys(document_ids):
            record = self._registry.find(doc_id)
            if record is not None and record.status == DocumentStatus.ERROR:
                targets.append(doc_id)
            else:
                skipped.append(doc_id)
        result = await self._fan_out(targets, self.retry)
        result.skipped.extend(skipped)
        return result

    async def _fan_out(
        self,
        document_ids: list[str],
        action: Callable[[str], Awaitable[DocumentRecord | None]],
    ) -> BatchResult:
        """Run action per document concurrently; one failure never stops the rest."""
        outcomes = await asyncio.gather(
            *(action(doc_id) for doc_id in document_ids), return_exceptions=True
        )
        result = BatchResult()
        for doc_id, outcome in zip(document_ids, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                logger.warning("Batch action failed for %s: %s", doc_id, outcome)
                result.failed[doc_id] = str(outcome)
            else:
                result.processed.append(doc_id)
        return result
