"""Local content validation rule."""

from dataclasses import dataclass

from docledger.domain.value_objects import DocumentStatus

LOW_CONTENT_REASON = "Low content detected, please verify."


@dataclass(frozen=True)
class ValidationOutcome:
    """Resting status chosen by validation and the reason when flagged."""

    status: DocumentStatus
    reason: str | None = None

    @property
    def flagged(self) -> bool:
        return self.status == DocumentStatus.REVIEW_REQUIRED


def validate_content(content: str, min_length: int) -> ValidationOutcome:
    """Flag content shorter than min_length for review; never fails."""
    if len(content) < min_length:
        return ValidationOutcome(DocumentStatus.REVIEW_REQUIRED, LOW_CONTENT_REASON)
    return ValidationOutcome(DocumentStatus.VALIDATED)
