"""File extractor port - text extraction and PDF page operations."""

from typing import Protocol

from docledger.application.dto.extraction_dto import ExtractionResult


class FileExtractor(Protocol):
    """Port for extracting text from raw file bytes."""

    def extract(
        self,
        data: bytes,
        filename: str,
        content_type: str | None = None,
        password: str | None = None,
    ) -> ExtractionResult: ...

    def page_count(self, data: bytes, password: str | None = None) -> int: ...

    def extract_pages(
        self,
        data: bytes,
        from_page: int,
        to_page: int,
        password: str | None = None,
    ) -> bytes: ...
