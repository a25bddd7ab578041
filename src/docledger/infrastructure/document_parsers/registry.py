"""Registry: select parser by extension/MIME and extract text."""

from pathlib import Path

from docledger.application.dto.extraction_dto import ExtractionResult, FileKind
from docledger.infrastructure.document_parsers.pdf_parser import (
    count_pages,
    extract_page_range,
    parse_pdf,
)
from docledger.infrastructure.document_parsers.text_parser import parse_text
from docledger.infrastructure.document_parsers.xlsx_parser import parse_xlsx

_KIND_BY_EXT: dict[str, FileKind] = {
    "xlsx": FileKind.SPREADSHEET,
    "xlsm": FileKind.SPREADSHEET,
    "pdf": FileKind.PDF,
    "txt": FileKind.TEXT,
    "csv": FileKind.TEXT,
    "tsv": FileKind.TEXT,
    "md": FileKind.TEXT,
    "json": FileKind.TEXT,
    "xml": FileKind.TEXT,
}

_KIND_BY_MIME: dict[str, FileKind] = {
    "application/pdf": FileKind.PDF,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": FileKind.SPREADSHEET,
    "application/vnd.ms-excel.sheet.macroenabled.12": FileKind.SPREADSHEET,
}


def detect_kind(filename: str | None, content_type: str | None = None) -> FileKind:
    """Pick the extraction capability by extension, then MIME; anything else is text."""
    if filename:
        ext = Path(filename).suffix.lstrip(".").lower()
        if ext in _KIND_BY_EXT:
            return _KIND_BY_EXT[ext]
    if content_type:
        mime = content_type.split(";")[0].strip().lower()
        if mime in _KIND_BY_MIME:
            return _KIND_BY_MIME[mime]
    return FileKind.TEXT


def extract_file(
    data: bytes,
    filename: str | None = None,
    content_type: str | None = None,
    password: str | None = None,
) -> ExtractionResult:
    """
    Select parser by filename (extension) or content_type, run it, return the text.
    Raises ExtractionError subclasses on failure.
    """
    kind = detect_kind(filename, content_type)
    if kind == FileKind.PDF:
        return parse_pdf(data, filename, password=password)
    if kind == FileKind.SPREADSHEET:
        return parse_xlsx(data, filename)
    return parse_text(data, filename)


def supported_extensions() -> list[str]:
    """Extensions with a dedicated parser; other files are read as text."""
    return sorted(_KIND_BY_EXT.keys())


class DocumentFileExtractor:
    """File extractor backed by pypdf and openpyxl."""

    def extract(
        self,
        data: bytes,
        filename: str,
        content_type: str | None = None,
        password: str | None = None,
    ) -> ExtractionResult:
        return extract_file(data, filename, content_type, password)

    def page_count(self, data: bytes, password: str | None = None) -> int:
        return count_pages(data, password)

    def extract_pages(
        self,
        data: bytes,
        from_page: int,
        to_page: int,
        password: str | None = None,
    ) -> bytes:
        return extract_page_range(data, from_page, to_page, password)
