"""Ledger entry entity."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class LedgerEntry:
    """Double-entry journal line created by posting a document."""

    id: str
    date: date
    narration: str
    debit_account: str
    credit_account: str
    amount: float
    source_document_id: str
