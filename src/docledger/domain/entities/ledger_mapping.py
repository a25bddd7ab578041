"""Ledger mapping entity."""

from dataclasses import dataclass

from docledger.domain.value_objects import LedgerAccount


@dataclass
class LedgerMapping:
    """Account name to ledger code, editable by the user."""

    account: LedgerAccount
    ledger_code: str
