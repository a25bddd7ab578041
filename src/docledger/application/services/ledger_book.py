"""Ledger entries and the account-to-code mapping table."""

import logging

from docledger.application.ports import PersistenceAdapter
from docledger.domain.entities import LedgerEntry, LedgerMapping
from docledger.domain.value_objects import LedgerAccount
from docledger.domain.value_objects.ledger_account import DEFAULT_LEDGER_CODES

logger = logging.getLogger(__name__)


def default_mappings() -> list[LedgerMapping]:
    return [LedgerMapping(account=a, ledger_code=c) for a, c in DEFAULT_LEDGER_CODES.items()]


class LedgerBook:
    """Append-only ledger plus the user-editable mapping table."""

    def __init__(self, persistence: PersistenceAdapter) -> None:
        self._persistence = persistence
        self._entries: list[LedgerEntry] = []
        self._mappings: dict[LedgerAccount, str] = dict(DEFAULT_LEDGER_CODES)

    def load(self) -> None:
        self._entries = self._persistence.load_ledger()
        stored = self._persistence.load_ledger_mappings()
        self._mappings = dict(DEFAULT_LEDGER_CODES)
        for mapping in stored:
            self._mappings[mapping.account] = mapping.ledger_code
        logger.info("Loaded %d ledger entries", len(self._entries))

    @property
    def entries(self) -> list[LedgerEntry]:
        return list(self._entries)

    def entries_for_document(self, document_id: str) -> list[LedgerEntry]:
        return [e for e in self._entries if e.source_document_id == document_id]

    def append(self, entry: LedgerEntry) -> None:
        """Add an entry and save; nothing is kept when the save fails."""
        entries = [*self._entries, entry]
        self._persistence.save_ledger(entries)
        self._entries = entries

    def retract(self, entry_id: str) -> None:
        """Drop an entry whose posting could not be completed."""
        entries = [e for e in self._entries if e.id != entry_id]
        self._persistence.save_ledger(entries)
        self._entries = entries

    def mappings(self) -> list[LedgerMapping]:
        return [LedgerMapping(account=a, ledger_code=c) for a, c in self._mappings.items()]

    def code_for(self, account: LedgerAccount) -> str:
        """Configured ledger code, or the built-in default when unset."""
        return self._mappings.get(account) or DEFAULT_LEDGER_CODES[account]

    def update_mapping(self, account: LedgerAccount, ledger_code: str) -> LedgerMapping:
        code = ledger_code.strip()
        if not code:
            raise ValueError("Ledger code must not be empty")
        self._mappings[account] = code
        self._persistence.save_ledger_mappings(self.mappings())
        return LedgerMapping(account=account, ledger_code=code)
