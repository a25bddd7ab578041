"""Remove document use case."""

from docledger.application.services import ByteCache, DocumentRegistry
from docledger.domain.entities import DocumentRecord


class RemoveDocumentUseCase:
    """Delete a record and drop its cached bytes."""

    def __init__(self, registry: DocumentRegistry, byte_cache: ByteCache) -> None:
        self._registry = registry
        self._byte_cache = byte_cache

    def execute(self, document_id: str) -> DocumentRecord:
        record = self._registry.remove(document_id)
        self._byte_cache.evict(document_id)
        return record
