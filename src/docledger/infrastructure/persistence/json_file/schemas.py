"""Stored shapes of documents, ledger entries and mappings."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from docledger.domain.entities import DocumentRecord, LedgerEntry, LedgerMapping, LogEntry
from docledger.domain.value_objects import (
    DocumentSource,
    DocumentStatus,
    DocumentType,
    LedgerAccount,
)


class StoredLogEntry(BaseModel):
    timestamp: dt.datetime
    message: str


class StoredDocument(BaseModel):
    """Document metadata without extracted content."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    size: int
    mime_type: str
    content_hash: str
    uploaded_at: dt.datetime
    document_type: DocumentType = DocumentType.OTHER
    status: DocumentStatus
    logs: list[StoredLogEntry] = Field(default_factory=list)
    version: int = 1
    source: DocumentSource = DocumentSource.UPLOAD
    is_duplicate: bool = False
    duplicate_of: str | None = None
    exception_reason: str | None = None
    fix_suggestion: str | None = None
    review_notes: list[str] = Field(default_factory=list)
    posted_ledger_entry_ids: list[str] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, record: DocumentRecord) -> "StoredDocument":
        return cls(
            id=record.id,
            name=record.name,
            size=record.size,
            mime_type=record.mime_type,
            content_hash=record.content_hash,
            uploaded_at=record.uploaded_at,
            document_type=record.document_type,
            status=record.status,
            logs=[StoredLogEntry(timestamp=e.timestamp, message=e.message) for e in record.logs],
            version=record.version,
            source=record.source,
            is_duplicate=record.is_duplicate,
            duplicate_of=record.duplicate_of,
            exception_reason=record.exception_reason,
            fix_suggestion=record.fix_suggestion,
            review_notes=list(record.review_notes),
            posted_ledger_entry_ids=list(record.posted_ledger_entry_ids),
        )

    def to_entity(self) -> DocumentRecord:
        """Rehydrate; content stays empty until re-extraction."""
        return DocumentRecord(
            id=self.id,
            name=self.name,
            size=self.size,
            mime_type=self.mime_type,
            content_hash=self.content_hash,
            uploaded_at=self.uploaded_at,
            content="",
            document_type=self.document_type,
            status=self.status,
            logs=[LogEntry(timestamp=e.timestamp, message=e.message) for e in self.logs],
            version=self.version,
            source=self.source,
            is_duplicate=self.is_duplicate,
            duplicate_of=self.duplicate_of,
            exception_reason=self.exception_reason,
            fix_suggestion=self.fix_suggestion,
            review_notes=list(self.review_notes),
            posted_ledger_entry_ids=list(self.posted_ledger_entry_ids),
        )


class StoredLedgerEntry(BaseModel):
    id: str
    date: dt.date
    narration: str
    debit_account: str
    credit_account: str
    amount: float = Field(gt=0, allow_inf_nan=False)
    source_document_id: str

    @classmethod
    def from_entity(cls, entry: LedgerEntry) -> "StoredLedgerEntry":
        return cls(
            id=entry.id,
            date=entry.date,
            narration=entry.narration,
            debit_account=entry.debit_account,
            credit_account=entry.credit_account,
            amount=entry.amount,
            source_document_id=entry.source_document_id,
        )

    def to_entity(self) -> LedgerEntry:
        return LedgerEntry(
            id=self.id,
            date=self.date,
            narration=self.narration,
            debit_account=self.debit_account,
            credit_account=self.credit_account,
            amount=self.amount,
            source_document_id=self.source_document_id,
        )


class StoredLedgerMapping(BaseModel):
    account: LedgerAccount
    ledger_code: str
