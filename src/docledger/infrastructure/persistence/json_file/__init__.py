"""JSON file persistence of content-free metadata."""

from docledger.infrastructure.persistence.json_file.store import JsonFileStore

__all__ = ["JsonFileStore"]
