"""Classifier port - best-effort document type inference."""

from typing import Protocol

from docledger.domain.value_objects import DocumentType


class Classifier(Protocol):
    """Port for inferring a document's type from its name and a content excerpt."""

    async def classify(self, name: str, excerpt: str) -> DocumentType: ...
