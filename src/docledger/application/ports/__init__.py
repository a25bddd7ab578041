"""Application ports - interfaces for external adapters."""

from docledger.application.ports.classifier import Classifier
from docledger.application.ports.file_extractor import FileExtractor
from docledger.application.ports.persistence import PersistenceAdapter

__all__ = [
    "Classifier",
    "FileExtractor",
    "PersistenceAdapter",
]
