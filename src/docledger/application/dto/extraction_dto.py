"""Extraction DTOs."""

from dataclasses import dataclass
from enum import StrEnum


class FileKind(StrEnum):
    """Extraction capability selected for a file."""

    SPREADSHEET = "spreadsheet"
    PDF = "pdf"
    TEXT = "text"


@dataclass(frozen=True)
class ExtractionResult:
    """Text extracted from a file."""

    text: str
    kind: FileKind
    page_count: int | None = None
