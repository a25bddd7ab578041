"""Processing pipeline: Extract -> Classify -> Validate for one document."""

import asyncio
import logging

from docledger.application.ports import Classifier, FileExtractor
from docledger.application.services import ByteCache, CachedFile, DocumentRegistry, SessionNotices
from docledger.domain.entities import DocumentRecord
from docledger.domain.exceptions import (
    ExtractionError,
    InvalidPassword,
    PasswordRequired,
    ResourceUnavailable,
)
from docledger.domain.validation import validate_content
from docledger.domain.value_objects import DocumentStatus, DocumentType

logger = logging.getLogger(__name__)


class ProcessingPipeline:
    """
    Runs documents through extraction, classification and validation.

    Runs for different documents proceed concurrently; the registry's
    in-flight marker keeps a single run per document id. Every outcome is
    recorded on the document itself (status, log, exception reason), so a
    run never raises because of the file it is processing.
    """

    def __init__(
        self,
        registry: DocumentRegistry,
        byte_cache: ByteCache,
        extractor: FileExtractor,
        classifier: Classifier,
        notices: SessionNotices,
        min_content_length: int = 50,
        excerpt_chars: int = 500,
    ) -> None:
        self._registry = registry
        self._byte_cache = byte_cache
        self._extractor = extractor
        self._classifier = classifier
        self._notices = notices
        self._min_content_length = min_content_length
        self._excerpt_chars = excerpt_chars

    async def process(self, document_id: str) -> DocumentRecord | None:
        """Run a freshly uploaded document (status Uploaded)."""
        cached = self._require_bytes(document_id)
        with self._registry.claim(document_id) as token:
            await self._run(document_id, token, cached, password=None)
            if not self._registry.holds(document_id, token):
                return None
        return self._registry.find(document_id)

    async def unlock(self, document_id: str, password: str) -> DocumentRecord | None:
        """Awaiting/Invalid Password -> Unlocking -> pipeline with the password."""
        cached = self._require_bytes(document_id)
        with self._registry.claim(document_id) as token:
            self._registry.update_status(
                document_id,
                DocumentStatus.UNLOCKING,
                "Attempting to unlock with password...",
            )
            await self._run(document_id, token, cached, password=password)
            if not self._registry.holds(document_id, token):
                return None
        return self._registry.find(document_id)

    async def restart(self, document_id: str) -> DocumentRecord | None:
        """Error -> Uploaded -> pipeline."""
        cached = self._require_bytes(document_id)
        with self._registry.claim(document_id) as token:
            self._registry.update_status(
                document_id,
                DocumentStatus.UPLOADED,
                "Retrying processing...",
                exception_reason=None,
            )
            await self._run(document_id, token, cached, password=None)
            if not self._registry.holds(document_id, token):
                return None
        return self._registry.find(document_id)

    def _require_bytes(self, document_id: str) -> CachedFile:
        self._registry.get(document_id)
        cached = self._byte_cache.get(document_id)
        if cached is None:
            raise ResourceUnavailable(
                f"Original file for {document_id} is not available in this session"
            )
        return cached

    async def _run(
        self,
        document_id: str,
        token: object,
        cached: CachedFile,
        password: str | None,
    ) -> None:
        record = self._registry.update_status(
            document_id, DocumentStatus.EXTRACTING_TEXT, "Extracting content..."
        )
        try:
            result = await asyncio.to_thread(
                self._extractor.extract,
                cached.data,
                cached.filename,
                cached.content_type,
                password,
            )
        except PasswordRequired as e:
            self._settle(document_id, token, DocumentStatus.AWAITING_PASSWORD, str(e))
            return
        except InvalidPassword as e:
            if self._settle(document_id, token, DocumentStatus.INVALID_PASSWORD, str(e)):
                self._notices.publish(f"Incorrect password for {record.name}.")
            return
        except ExtractionError as e:
            self._settle(document_id, token, DocumentStatus.ERROR, f"Processing failed: {e}")
            return
        except Exception as e:
            logger.exception("Unexpected extraction error for %s", document_id)
            self._settle(document_id, token, DocumentStatus.ERROR, f"Processing failed: {e}")
            return

        if not self._registry.holds(document_id, token):
            logger.info("Document %s removed during extraction", document_id)
            return
        if password:
            self._byte_cache.remember_password(document_id, password)
        self._registry.update_status(
            document_id,
            DocumentStatus.CLASSIFYING,
            "Content extracted successfully. Classifying document...",
            content=result.text,
            exception_reason=None,
        )

        document_type = await self._classify(record.name, result.text)
        if not self._registry.holds(document_id, token):
            logger.info("Document %s removed during classification", document_id)
            return
        self._registry.update_status(
            document_id,
            DocumentStatus.VALIDATING,
            f"Classification complete: {document_type}. Validating data...",
            document_type=document_type,
        )

        outcome = validate_content(result.text, self._min_content_length)
        if outcome.flagged:
            current = self._registry.get(document_id)
            self._registry.update_status(
                document_id,
                DocumentStatus.REVIEW_REQUIRED,
                f"Validation flagged for review: {outcome.reason}",
                exception_reason=outcome.reason,
                review_notes=[*current.review_notes, outcome.reason],
            )
        else:
            self._registry.update_status(
                document_id, DocumentStatus.VALIDATED, "Validation successful."
            )

    async def _classify(self, name: str, content: str) -> DocumentType:
        """Classifier result, degraded to Other on any failure."""
        try:
            label = await self._classifier.classify(name, content[: self._excerpt_chars])
        except Exception as e:
            logger.warning("Classification failed for %s, using Other: %s", name, e)
            return DocumentType.OTHER
        return DocumentType.parse(str(label) if label is not None else None)

    def _settle(
        self, document_id: str, token: object, status: DocumentStatus, reason: str
    ) -> bool:
        """Record an extraction outcome; False when the document is gone."""
        if not self._registry.holds(document_id, token):
            return False
        logger.info("Document %s -> %s: %s", document_id, status, reason)
        self._registry.update_status(document_id, status, reason, exception_reason=reason)
        return True
