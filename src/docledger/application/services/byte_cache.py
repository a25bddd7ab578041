"""Session-scoped cache of raw file bytes keyed by document id."""

from dataclasses import dataclass


@dataclass
class CachedFile:
    """Original upload payload. Never persisted."""

    filename: str
    data: bytes
    content_type: str | None = None
    password: str | None = None


class ByteCache:
    """
    Ephemeral store of original bytes.

    Lives for the process only; after a restart records exist without bytes,
    which is why retry and split can fail with ResourceUnavailable.
    """

    def __init__(self) -> None:
        self._files: dict[str, CachedFile] = {}

    def put(self, document_id: str, file: CachedFile) -> None:
        self._files[document_id] = file

    def get(self, document_id: str) -> CachedFile | None:
        return self._files.get(document_id)

    def has(self, document_id: str) -> bool:
        return document_id in self._files

    def evict(self, document_id: str) -> None:
        self._files.pop(document_id, None)

    def remember_password(self, document_id: str, password: str) -> None:
        """Keep the password that unlocked a file, for later page operations."""
        cached = self._files.get(document_id)
        if cached is not None:
            cached.password = password

    def __len__(self) -> int:
        return len(self._files)
