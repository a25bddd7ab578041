"""Document DTOs."""

from dataclasses import dataclass, field
from enum import StrEnum

from docledger.domain.value_objects import DocumentSource


@dataclass(frozen=True)
class UploadedFile:
    """Raw file as received from the caller."""

    filename: str
    data: bytes
    content_type: str | None = None
    source: DocumentSource = DocumentSource.UPLOAD


@dataclass
class BatchResult:
    """Outcome of a fan-out operation over several documents."""

    processed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


class InboxFilter(StrEnum):
    """Inbox views over document status."""

    ALL = "All"
    ENCRYPTED = "Encrypted"
    ERRORS = "Errors"
    REVIEW = "Review"
    POSTED = "Posted"


class InboxSort(StrEnum):
    """Inbox ordering."""

    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
