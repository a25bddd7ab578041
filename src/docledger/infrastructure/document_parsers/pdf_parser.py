"""Parser for PDF, password aware."""

import io

from pypdf import PasswordType, PdfReader, PdfWriter

from docledger.application.dto.extraction_dto import ExtractionResult, FileKind
from docledger.domain.exceptions import (
    ExtractionFailure,
    InvalidPassword,
    PageRangeError,
    PasswordRequired,
)


def open_pdf(data: bytes, password: str | None = None) -> PdfReader:
    """
    Open PDF bytes, decrypting when needed.

    An encrypted file that the empty user password opens is treated as
    unencrypted. Raises PasswordRequired when no password was given,
    InvalidPassword when the given one is wrong.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
    except Exception as e:
        raise ExtractionFailure(f"Invalid or corrupted PDF: {e}") from e
    if not reader.is_encrypted:
        return reader
    try:
        result = reader.decrypt(password or "")
    except Exception as e:
        raise ExtractionFailure(f"Cannot decrypt PDF: {e}") from e
    if result == PasswordType.NOT_DECRYPTED:
        if password:
            raise InvalidPassword()
        raise PasswordRequired()
    return reader


def parse_pdf(
    data: bytes, filename: str | None = None, password: str | None = None
) -> ExtractionResult:
    """Concatenate per-page text in page order."""
    reader = open_pdf(data, password)
    parts: list[str] = []
    try:
        for page in reader.pages:
            t = page.extract_text()
            if t and t.strip():
                parts.append(t.strip())
    except Exception as e:
        raise ExtractionFailure(f"Failed to read PDF pages: {e}") from e
    return ExtractionResult(
        text="\n\n".join(parts),
        kind=FileKind.PDF,
        page_count=len(reader.pages),
    )


def count_pages(data: bytes, password: str | None = None) -> int:
    """Number of pages in a PDF."""
    return len(open_pdf(data, password).pages)


def extract_page_range(
    data: bytes, from_page: int, to_page: int, password: str | None = None
) -> bytes:
    """Copy pages from_page..to_page (1-based, inclusive) into a new PDF."""
    if from_page < 1 or from_page > to_page:
        raise PageRangeError(f"Invalid page range {from_page}-{to_page}")
    reader = open_pdf(data, password)
    total = len(reader.pages)
    if to_page > total:
        raise PageRangeError(
            f"Invalid page range {from_page}-{to_page}: document has {total} pages"
        )
    writer = PdfWriter()
    for index in range(from_page - 1, to_page):
        writer.add_page(reader.pages[index])
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()
