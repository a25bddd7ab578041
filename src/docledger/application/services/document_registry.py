"""Authoritative in-memory store of document records."""

import copy
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import fields
from datetime import UTC, datetime

from docledger.application.dto.document_dto import InboxFilter, InboxSort
from docledger.application.ports import PersistenceAdapter
from docledger.domain.entities import DocumentRecord, LogEntry
from docledger.domain.exceptions import (
    IllegalTransition,
    NotFound,
    PipelineBusy,
    PostingConflict,
)
from docledger.domain.state_machine import INITIAL_STATUSES, check_transition
from docledger.domain.value_objects import PASSWORD_STATUSES, DocumentStatus

logger = logging.getLogger(__name__)

# Fields only the registry's own commands may change.
_PROTECTED_FIELDS = frozenset(
    {"id", "status", "logs", "version", "posted_ledger_entry_ids", "content_hash"}
)
_RECORD_FIELDS = frozenset(f.name for f in fields(DocumentRecord))

_FILTERS: dict[InboxFilter, frozenset[DocumentStatus] | None] = {
    InboxFilter.ALL: None,
    InboxFilter.ENCRYPTED: PASSWORD_STATUSES,
    InboxFilter.ERRORS: frozenset({DocumentStatus.ERROR}),
    InboxFilter.REVIEW: frozenset({DocumentStatus.REVIEW_REQUIRED}),
    InboxFilter.POSTED: frozenset({DocumentStatus.POSTED}),
}

EXCEPTION_STATUSES = frozenset({DocumentStatus.ERROR, DocumentStatus.REVIEW_REQUIRED})


def _now() -> datetime:
    return datetime.now(UTC)


class DocumentRegistry:
    """
    Map of document id to DocumentRecord, mutated only through commands.

    Every command is synchronous, so on the event loop it is atomic with
    respect to the record; it bumps the record version and re-serializes the
    whole collection through the persistence adapter. Queries return copies.
    The registry also tracks which ids have a pipeline run in flight.
    """

    def __init__(self, persistence: PersistenceAdapter) -> None:
        self._persistence = persistence
        self._documents: dict[str, DocumentRecord] = {}
        self._in_flight: dict[str, object] = {}

    def load(self) -> int:
        """Replace the in-memory state with persisted metadata. Content is empty."""
        self._documents = {d.id: d for d in self._persistence.load_documents()}
        logger.info("Loaded %d document records", len(self._documents))
        return len(self._documents)

    # --- Queries ---

    def get(self, document_id: str) -> DocumentRecord:
        """Copy of a record. Raises NotFound."""
        return copy.deepcopy(self._require(document_id))

    def find(self, document_id: str) -> DocumentRecord | None:
        record = self._documents.get(document_id)
        return copy.deepcopy(record) if record else None

    def contains(self, document_id: str) -> bool:
        return document_id in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def list_documents(
        self,
        inbox_filter: InboxFilter = InboxFilter.ALL,
        sort: InboxSort = InboxSort.DATE_DESC,
    ) -> list[DocumentRecord]:
        """Records in an inbox view, ordered."""
        statuses = _FILTERS[inbox_filter]
        items = [
            d for d in self._documents.values() if statuses is None or d.status in statuses
        ]
        if sort == InboxSort.NAME_ASC:
            items.sort(key=lambda d: d.name.lower())
        elif sort == InboxSort.NAME_DESC:
            items.sort(key=lambda d: d.name.lower(), reverse=True)
        elif sort == InboxSort.DATE_ASC:
            items.sort(key=lambda d: d.uploaded_at)
        else:
            items.sort(key=lambda d: d.uploaded_at, reverse=True)
        return [copy.deepcopy(d) for d in items]

    def counts(self) -> dict[str, int]:
        """Number of records per inbox view."""
        return {
            f.value: sum(
                1
                for d in self._documents.values()
                if statuses is None or d.status in statuses
            )
            for f, statuses in _FILTERS.items()
        }

    def exceptions(self) -> list[DocumentRecord]:
        """Records needing attention: Error and Review Required."""
        return [
            copy.deepcopy(d) for d in self._documents.values() if d.status in EXCEPTION_STATUSES
        ]

    def ids_with_status(self, statuses: frozenset[DocumentStatus]) -> list[str]:
        return [d.id for d in self._documents.values() if d.status in statuses]

    def find_original(self, content_hash: str, exclude_id: str) -> DocumentRecord | None:
        """Earliest non-duplicate record with the same content and a different id."""
        for record in self._documents.values():
            if (
                record.content_hash == content_hash
                and record.id != exclude_id
                and not record.is_duplicate
            ):
                return copy.deepcopy(record)
        return None

    # --- Commands ---

    def insert(self, record: DocumentRecord) -> DocumentRecord:
        """Add a new record. Its id must be unused."""
        if record.id in self._documents:
            raise IllegalTransition(f"Document already exists: {record.id}")
        if record.status not in INITIAL_STATUSES:
            raise IllegalTransition(f"Documents cannot be created in '{record.status}'")
        stored = copy.deepcopy(record)
        stored.version = 0
        return self._commit(stored)

    def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        message: str,
        **changes: object,
    ) -> DocumentRecord:
        """Apply one state-machine transition, log it and set any extra fields."""
        record = self._working_copy(document_id)
        check_transition(record.status, status)
        self._check_changes(changes)
        record.status = status
        for name, value in changes.items():
            setattr(record, name, value)
        record.logs.append(LogEntry(timestamp=_now(), message=message))
        return self._commit(record)

    def update_fields(self, document_id: str, **changes: object) -> DocumentRecord:
        """Set non-lifecycle fields (content, type, reasons, notes)."""
        record = self._working_copy(document_id)
        self._check_changes(changes)
        for name, value in changes.items():
            setattr(record, name, value)
        return self._commit(record)

    def append_log(self, document_id: str, message: str) -> DocumentRecord:
        record = self._working_copy(document_id)
        record.logs.append(LogEntry(timestamp=_now(), message=message))
        return self._commit(record)

    def mark_posted(self, document_id: str, entry_id: str, message: str) -> DocumentRecord:
        """Validated -> Posted, linking exactly one ledger entry."""
        record = self._working_copy(document_id)
        if record.status == DocumentStatus.POSTED or record.posted_ledger_entry_ids:
            raise PostingConflict(f"Document already posted: {document_id}")
        check_transition(record.status, DocumentStatus.POSTED)
        record.status = DocumentStatus.POSTED
        record.posted_ledger_entry_ids = [entry_id]
        record.logs.append(LogEntry(timestamp=_now(), message=message))
        return self._commit(record)

    def remove(self, document_id: str) -> DocumentRecord:
        """
        Delete a record at any point.

        A run holding the id loses its claim, so a re-upload of the same file
        can be processed while the old run winds down.
        """
        record = self._documents.pop(document_id, None)
        if record is None:
            raise NotFound("Document", document_id)
        try:
            self._save()
        except Exception:
            self._documents[document_id] = record
            raise
        self._in_flight.pop(document_id, None)
        return record

    # --- In-flight marker ---

    @contextmanager
    def claim(self, document_id: str) -> Iterator[object]:
        """Hold the single pipeline slot for a document id, yielding its token."""
        if document_id in self._in_flight:
            raise PipelineBusy(f"Pipeline already running for {document_id}")
        token = object()
        self._in_flight[document_id] = token
        try:
            yield token
        finally:
            if self._in_flight.get(document_id) is token:
                del self._in_flight[document_id]

    def is_in_flight(self, document_id: str) -> bool:
        return document_id in self._in_flight

    def holds(self, document_id: str, token: object) -> bool:
        """True while the claim behind token still owns the record."""
        return self._in_flight.get(document_id) is token and document_id in self._documents

    # --- Internals ---

    def _require(self, document_id: str) -> DocumentRecord:
        record = self._documents.get(document_id)
        if record is None:
            raise NotFound("Document", document_id)
        return record

    def _working_copy(self, document_id: str) -> DocumentRecord:
        return copy.deepcopy(self._require(document_id))

    @staticmethod
    def _check_changes(changes: dict[str, object]) -> None:
        for name in changes:
            if name not in _RECORD_FIELDS or name in _PROTECTED_FIELDS:
                raise ValueError(f"Field cannot be updated directly: {name}")

    def _commit(self, record: DocumentRecord) -> DocumentRecord:
        """Swap in the changed record; restore the previous one if saving fails."""
        previous = self._documents.get(record.id)
        record.version += 1
        self._documents[record.id] = record
        try:
            self._save()
        except Exception:
            if previous is None:
                del self._documents[record.id]
            else:
                self._documents[record.id] = previous
            raise
        return copy.deepcopy(record)

    def _save(self) -> None:
        self._persistence.save_documents(list(self._documents.values()))
