"""Application services shared by use cases."""

from docledger.application.services.byte_cache import ByteCache, CachedFile
from docledger.application.services.document_registry import DocumentRegistry
from docledger.application.services.ledger_book import LedgerBook
from docledger.application.services.session_notices import Notice, SessionNotices

__all__ = [
    "ByteCache",
    "CachedFile",
    "DocumentRegistry",
    "LedgerBook",
    "Notice",
    "SessionNotices",
]
