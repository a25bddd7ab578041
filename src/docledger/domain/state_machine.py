"""Allowed status transitions of the document processing machine."""

from docledger.domain.exceptions import IllegalTransition
from docledger.domain.value_objects import DocumentStatus

S = DocumentStatus

TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    S.UPLOADED: frozenset({S.EXTRACTING_TEXT}),
    S.EXTRACTING_TEXT: frozenset(
        {S.CLASSIFYING, S.AWAITING_PASSWORD, S.INVALID_PASSWORD, S.ERROR}
    ),
    S.CLASSIFYING: frozenset({S.VALIDATING}),
    S.VALIDATING: frozenset({S.VALIDATED, S.REVIEW_REQUIRED}),
    S.AWAITING_PASSWORD: frozenset({S.UNLOCKING}),
    S.INVALID_PASSWORD: frozenset({S.UNLOCKING}),
    S.UNLOCKING: frozenset({S.EXTRACTING_TEXT}),
    S.VALIDATED: frozenset({S.POSTED}),
    S.ERROR: frozenset({S.UPLOADED}),
    S.REVIEW_REQUIRED: frozenset(),
    S.POSTED: frozenset(),
}

# Statuses a record may be created in. Duplicates rest in REVIEW_REQUIRED.
INITIAL_STATUSES = frozenset({S.UPLOADED, S.REVIEW_REQUIRED})


def can_transition(current: DocumentStatus, target: DocumentStatus) -> bool:
    """True when the machine allows current -> target."""
    return target in TRANSITIONS.get(current, frozenset())


def check_transition(current: DocumentStatus, target: DocumentStatus) -> None:
    """Raise IllegalTransition unless current -> target is allowed."""
    if not can_transition(current, target):
        raise IllegalTransition(f"Cannot move from '{current}' to '{target}'")
