"""Persistence port - bulk load/save of content-free metadata."""

from typing import Protocol

from docledger.domain.entities import DocumentRecord, LedgerEntry, LedgerMapping


class PersistenceAdapter(Protocol):
    """Whole-collection reads and writes; no partial updates."""

    def load_documents(self) -> list[DocumentRecord]: ...

    def save_documents(self, documents: list[DocumentRecord]) -> None: ...

    def load_ledger(self) -> list[LedgerEntry]: ...

    def save_ledger(self, entries: list[LedgerEntry]) -> None: ...

    def load_ledger_mappings(self) -> list[LedgerMapping]: ...

    def save_ledger_mappings(self, mappings: list[LedgerMapping]) -> None: ...
