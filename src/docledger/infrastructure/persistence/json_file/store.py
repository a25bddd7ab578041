"""JSON file store - one file per collection under a state directory."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from docledger.domain.entities import DocumentRecord, LedgerEntry, LedgerMapping
from docledger.infrastructure.persistence.json_file.schemas import (
    StoredDocument,
    StoredLedgerEntry,
    StoredLedgerMapping,
)

logger = logging.getLogger(__name__)

DOCUMENTS_FILE = "documents.json"
LEDGER_FILE = "ledger.json"
LEDGER_MAPPINGS_FILE = "ledger_mappings.json"

_documents_adapter = TypeAdapter(list[StoredDocument])
_ledger_adapter = TypeAdapter(list[StoredLedgerEntry])
_mappings_adapter = TypeAdapter(list[StoredLedgerMapping])
_rows_adapter = TypeAdapter(list[dict[str, Any]])


class JsonFileStore:
    """
    Persistence adapter writing whole collections as JSON.

    Writes go to a temporary file in the same directory and are moved into
    place, so a crash never leaves a half-written file. A missing or
    unreadable file loads as an empty collection, and a row that fails
    validation is skipped on its own.
    """

    def __init__(self, state_dir: str | Path) -> None:
        self._dir = Path(state_dir)

    @property
    def state_dir(self) -> Path:
        return self._dir

    def load_documents(self) -> list[DocumentRecord]:
        stored = self._read(DOCUMENTS_FILE, StoredDocument)
        return [s.to_entity() for s in stored]

    def save_documents(self, documents: list[DocumentRecord]) -> None:
        stored = [StoredDocument.from_entity(d) for d in documents]
        self._write(DOCUMENTS_FILE, _documents_adapter.dump_json(stored, indent=2))

    def load_ledger(self) -> list[LedgerEntry]:
        return [s.to_entity() for s in self._read(LEDGER_FILE, StoredLedgerEntry)]

    def save_ledger(self, entries: list[LedgerEntry]) -> None:
        stored = [StoredLedgerEntry.from_entity(e) for e in entries]
        self._write(LEDGER_FILE, _ledger_adapter.dump_json(stored, indent=2))

    def load_ledger_mappings(self) -> list[LedgerMapping]:
        stored = self._read(LEDGER_MAPPINGS_FILE, StoredLedgerMapping)
        return [LedgerMapping(account=s.account, ledger_code=s.ledger_code) for s in stored]

    def save_ledger_mappings(self, mappings: list[LedgerMapping]) -> None:
        stored = [
            StoredLedgerMapping(account=m.account, ledger_code=m.ledger_code) for m in mappings
        ]
        self._write(LEDGER_MAPPINGS_FILE, _mappings_adapter.dump_json(stored, indent=2))

    def _read(self, filename: str, model: type[BaseModel]) -> list:
        path = self._dir / filename
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning("Cannot read %s, starting empty: %s", path, e)
            return []
        try:
            rows = _rows_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Discarding unreadable %s (%d errors)", path, e.error_count()
            )
            return []
        items = []
        for index, row in enumerate(rows):
            try:
                items.append(model.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    "Skipping row %d of %s (%d errors)", index, path, e.error_count()
                )
        return items

    def _write(self, filename: str, payload: bytes) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._dir, prefix=f".{filename}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
            os.replace(tmp_path, self._dir / filename)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
