"""Split a page range of a PDF into a new document."""

import asyncio

from docledger.application.dto.document_dto import UploadedFile
from docledger.application.ports import FileExtractor
from docledger.application.services import ByteCache, DocumentRegistry, SessionNotices
from docledger.application.use_cases.document.upload_documents import UploadDocumentsUseCase
from docledger.domain.entities import DocumentRecord
from docledger.domain.exceptions import (
    ExtractionError,
    PageRangeError,
    ResourceUnavailable,
    UnsupportedDocument,
)
from docledger.domain.value_objects import DocumentSource


class SplitDocumentUseCase:
    """Copy pages of a resident PDF into a new upload (source=split)."""

    def __init__(
        self,
        registry: DocumentRegistry,
        byte_cache: ByteCache,
        extractor: FileExtractor,
        upload_documents: UploadDocumentsUseCase,
        notices: SessionNotices,
    ) -> None:
        self._registry = registry
        self._byte_cache = byte_cache
        self._extractor = extractor
        self._upload_documents = upload_documents
        self._notices = notices

    async def execute(
        self, document_id: str, from_page: int, to_page: int, new_name: str
    ) -> DocumentRecord:
        """Split pages from_page..to_page (1-based, inclusive) into new_name."""
        original = self._registry.get(document_id)
        cached = self._byte_cache.get(document_id)
        if cached is None:
            self._notices.publish(
                f'Cannot split "{original.name}": the original file is not available '
                "in this session."
            )
            raise ResourceUnavailable(f"Original file for {document_id} is not resident")
        if not original.is_pdf:
            self._notices.publish("Splitting is only supported for PDF files.")
            raise UnsupportedDocument("Splitting is only supported for PDF files")
        name = new_name.strip()
        if not name:
            raise ValueError("New document name is required")
        file_name = name if name.lower().endswith(".pdf") else f"{name}.pdf"

        try:
            data = await asyncio.to_thread(
                self._extractor.extract_pages,
                cached.data,
                from_page,
                to_page,
                cached.password,
            )
        except PageRangeError:
            self._notices.publish(f'Invalid page range for "{original.name}".')
            raise
        except ExtractionError as e:
            self._notices.publish(f"Failed to split PDF: {e}")
            self._registry.append_log(document_id, f"Splitting failed: {e}")
            raise

        self._registry.append_log(
            document_id, f'Splitting pages {from_page}-{to_page} into "{file_name}"'
        )
        records = await self._upload_documents.execute(
            [
                UploadedFile(
                    filename=file_name,
                    data=data,
                    content_type="application/pdf",
                    source=DocumentSource.SPLIT,
                )
            ]
        )
        if self._registry.contains(document_id):
            self._registry.append_log(document_id, f'Successfully created "{file_name}"')
        return records[0]
