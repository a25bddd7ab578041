"""Closed set of document categories produced by classification."""

from enum import StrEnum


class DocumentType(StrEnum):
    """Document categories. Anything unrecognised is OTHER."""

    INVOICE = "Invoice"
    BANK_STATEMENT = "Bank Statement"
    GST_FILING = "GST Filing"
    TDS_CERTIFICATE = "TDS Certificate"
    PAYROLL_REGISTER = "Payroll Register"
    CONTRACT_AGREEMENT = "Contract/Agreement"
    SALES_REGISTER = "Sales Register"
    PURCHASE_REGISTER = "Purchase Register"
    PURCHASE_ORDER = "Purchase Order"
    GOODS_RECEIPT_NOTE = "Goods Receipt Note"
    GSTR_2B = "GSTR-2B"
    JOURNAL_LEDGER = "Journal & Ledger"
    OTHER = "Other"

    @classmethod
    def parse(cls, label: str | None) -> "DocumentType":
        """Map a free-form label onto the enumeration, falling back to OTHER."""
        if not label:
            return cls.OTHER
        wanted = label.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return cls.OTHER
