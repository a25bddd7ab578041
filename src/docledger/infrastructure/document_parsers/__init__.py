"""Document parsers: extract text from uploaded files."""

from docledger.infrastructure.document_parsers.registry import (
    DocumentFileExtractor,
    detect_kind,
    extract_file,
    supported_extensions,
)

__all__ = [
    "DocumentFileExtractor",
    "detect_kind",
    "extract_file",
    "supported_extensions",
]
