"""Parser for .xlsx (Excel)."""

import csv
import io
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from docledger.application.dto.extraction_dto import ExtractionResult, FileKind
from docledger.domain.exceptions import ExtractionFailure

SHEET_MARKER = "--- SHEET: {name} ---"


def _cell_to_str(value: object) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def parse_xlsx(data: bytes, filename: str | None = None) -> ExtractionResult:
    """Flatten every sheet to CSV text, each preceded by a sheet marker."""
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
        raise ExtractionFailure(f"Invalid or corrupted xlsx file: {e}") from e
    sections: list[str] = []
    try:
        for sheet in wb.worksheets:
            buf = io.StringIO()
            writer = csv.writer(buf, lineterminator="\n")
            for row in sheet.iter_rows(values_only=True):
                writer.writerow([_cell_to_str(c) for c in row])
            sections.append(SHEET_MARKER.format(name=sheet.title) + "\n" + buf.getvalue())
    finally:
        wb.close()
    return ExtractionResult(text="\n".join(sections), kind=FileKind.SPREADSHEET)
