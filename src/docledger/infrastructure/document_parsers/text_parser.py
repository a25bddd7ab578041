"""Parser for plain and delimited text."""

from docledger.application.dto.extraction_dto import ExtractionResult, FileKind


def decode_text(data: bytes) -> str:
    """UTF-8 first, then cp1252, then UTF-8 with replacement characters."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    try:
        return data.decode("cp1252")
    except UnicodeDecodeError:
        return data.decode("utf-8", errors="replace")


def parse_text(data: bytes, filename: str | None = None) -> ExtractionResult:
    """Raw text as-is; CSV/TSV are not reflowed."""
    return ExtractionResult(text=decode_text(data), kind=FileKind.TEXT)
