"""Domain exceptions."""


class DocLedgerError(Exception):
    """Base exception for docledger."""

    pass


class ExtractionError(DocLedgerError):
    """Text could not be extracted from a file."""

    pass


class PasswordRequired(ExtractionError):
    """The PDF is encrypted and no password was supplied."""

    def __init__(self, message: str = "This PDF is password-protected.") -> None:
        super().__init__(message)


class InvalidPassword(ExtractionError):
    """The supplied password does not open the PDF."""

    def __init__(self, message: str = "The provided password was incorrect.") -> None:
        super().__init__(message)


class ExtractionFailure(ExtractionError):
    """Any other extraction failure (corrupted or unreadable file)."""

    pass


class ClassificationFailure(DocLedgerError):
    """Classifier call failed or returned an unusable label."""

    pass


class PostingConflict(DocLedgerError):
    """Document was already posted to the ledger."""

    pass


class PageRangeError(DocLedgerError):
    """Requested page range is outside the document."""

    pass


class ResourceUnavailable(DocLedgerError):
    """Original file bytes are not resident in this session."""

    pass


class UnsupportedDocument(DocLedgerError):
    """Operation is not supported for this kind of document."""

    pass


class NotFound(DocLedgerError):
    """Requested resource was not found."""

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(f"{resource} not found: {identifier}")
        self.resource = resource
        self.identifier = identifier


class IllegalTransition(DocLedgerError):
    """Status change is not allowed by the document state machine."""

    pass


class PipelineBusy(DocLedgerError):
    """A pipeline run is already in flight for the document."""

    pass
