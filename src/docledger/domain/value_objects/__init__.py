"""Domain value objects."""

from docledger.domain.value_objects.content_hash import ContentHash
from docledger.domain.value_objects.document_source import DocumentSource
from docledger.domain.value_objects.document_status import (
    IN_FLIGHT_STATUSES,
    PASSWORD_STATUSES,
    RESTING_STATUSES,
    DocumentStatus,
)
from docledger.domain.value_objects.document_type import DocumentType
from docledger.domain.value_objects.ledger_account import LedgerAccount

__all__ = [
    "IN_FLIGHT_STATUSES",
    "PASSWORD_STATUSES",
    "RESTING_STATUSES",
    "ContentHash",
    "DocumentSource",
    "DocumentStatus",
    "DocumentType",
    "LedgerAccount",
]
