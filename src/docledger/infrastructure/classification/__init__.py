"""Document classification adapters."""

from docledger.infrastructure.classification.openai_classifier import (
    OpenAIDocumentClassifier,
    UnavailableClassifier,
)

__all__ = ["OpenAIDocumentClassifier", "UnavailableClassifier"]
