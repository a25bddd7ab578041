"""Document lifecycle status."""

from enum import StrEnum


class DocumentStatus(StrEnum):
    """States of the per-document processing machine."""

    UPLOADED = "Uploaded"
    EXTRACTING_TEXT = "Extracting Text"
    CLASSIFYING = "Classifying"
    VALIDATING = "Validating"
    VALIDATED = "Validated"
    REVIEW_REQUIRED = "Review Required"
    AWAITING_PASSWORD = "Awaiting Password"
    UNLOCKING = "Unlocking"
    INVALID_PASSWORD = "Invalid Password"
    ERROR = "Error"
    POSTED = "Posted"


# Pipeline stopped, waiting for a user action.
RESTING_STATUSES = frozenset(
    {
        DocumentStatus.VALIDATED,
        DocumentStatus.REVIEW_REQUIRED,
        DocumentStatus.AWAITING_PASSWORD,
        DocumentStatus.INVALID_PASSWORD,
        DocumentStatus.ERROR,
    }
)

PASSWORD_STATUSES = frozenset(
    {DocumentStatus.AWAITING_PASSWORD, DocumentStatus.INVALID_PASSWORD}
)

IN_FLIGHT_STATUSES = frozenset(
    {
        DocumentStatus.EXTRACTING_TEXT,
        DocumentStatus.CLASSIFYING,
        DocumentStatus.VALIDATING,
        DocumentStatus.UNLOCKING,
    }
)
