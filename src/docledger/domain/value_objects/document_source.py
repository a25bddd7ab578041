"""How a document entered the system."""

from enum import StrEnum


class DocumentSource(StrEnum):
    """Origin of a document record."""

    UPLOAD = "upload"
    EMAIL = "email"
    SCAN = "scan"
    SPLIT = "split"
