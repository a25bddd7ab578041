"""Accounts that can be mapped to ledger codes."""

from enum import StrEnum


class LedgerAccount(StrEnum):
    """Configurable accounts used when posting documents."""

    SALES = "Sales"
    PURCHASES = "Purchases"
    IGST_PAYABLE = "IGST Payable"
    CGST_PAYABLE = "CGST Payable"
    SGST_PAYABLE = "SGST Payable"
    ACCOUNTS_RECEIVABLE = "Accounts Receivable"
    ACCOUNTS_PAYABLE = "Accounts Payable"


DEFAULT_LEDGER_CODES: dict[LedgerAccount, str] = {
    LedgerAccount.SALES: "4000",
    LedgerAccount.PURCHASES: "5000",
    LedgerAccount.IGST_PAYABLE: "2101",
    LedgerAccount.CGST_PAYABLE: "2102",
    LedgerAccount.SGST_PAYABLE: "2103",
    LedgerAccount.ACCOUNTS_RECEIVABLE: "1200",
    LedgerAccount.ACCOUNTS_PAYABLE: "2000",
}
