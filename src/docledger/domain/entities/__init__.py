"""Domain entities."""

from docledger.domain.entities.document import DocumentRecord, LogEntry, make_document_id
from docledger.domain.entities.ledger_entry import LedgerEntry
from docledger.domain.entities.ledger_mapping import LedgerMapping

__all__ = [
    "DocumentRecord",
    "LedgerEntry",
    "LedgerMapping",
    "LogEntry",
    "make_document_id",
]
