"""Document record entity."""

from dataclasses import dataclass, field
from datetime import datetime

from docledger.domain.value_objects import (
    ContentHash,
    DocumentSource,
    DocumentStatus,
    DocumentType,
)


def make_document_id(name: str, content_hash: ContentHash | str) -> str:
    """Deterministic document id for a (name, content hash) pair."""
    return f"{name}-{content_hash}"


@dataclass(frozen=True)
class LogEntry:
    """One timestamped line of a document's processing trail."""

    timestamp: datetime
    message: str


@dataclass
class DocumentRecord:
    """Uploaded document, its extracted text and processing state."""

    id: str
    name: str
    size: int
    mime_type: str
    content_hash: str
    uploaded_at: datetime
    content: str = ""
    document_type: DocumentType = DocumentType.OTHER
    status: DocumentStatus = DocumentStatus.UPLOADED
    logs: list[LogEntry] = field(default_factory=list)
    version: int = 1
    source: DocumentSource = DocumentSource.UPLOAD
    is_duplicate: bool = False
    duplicate_of: str | None = None
    exception_reason: str | None = None
    fix_suggestion: str | None = None
    review_notes: list[str] = field(default_factory=list)
    posted_ledger_entry_ids: list[str] = field(default_factory=list)

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == "application/pdf" or self.name.lower().endswith(".pdf")
