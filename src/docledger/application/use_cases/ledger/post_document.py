"""Post a validated document to the ledger, at most once."""

import logging
import math
from datetime import date
from uuid import uuid4

from docledger.application.services import DocumentRegistry, LedgerBook
from docledger.domain.entities import LedgerEntry
from docledger.domain.exceptions import IllegalTransition, PostingConflict
from docledger.domain.value_objects import DocumentStatus, LedgerAccount

logger = logging.getLogger(__name__)


class LedgerPoster:
    """Creates exactly one ledger entry per validated document."""

    def __init__(
        self,
        registry: DocumentRegistry,
        ledger: LedgerBook,
        default_amount: float = 1000.0,
    ) -> None:
        self._registry = registry
        self._ledger = ledger
        self._default_amount = default_amount

    def post(self, document_id: str, amount: float | None = None) -> LedgerEntry:
        """
        Post a Validated document.

        Raises PostingConflict when the document was already posted and
        IllegalTransition for any other non-validated status; neither
        changes any state.
        """
        record = self._registry.get(document_id)
        if record.status == DocumentStatus.POSTED or record.posted_ledger_entry_ids:
            raise PostingConflict(f"Document already posted: {record.name}")
        if record.status != DocumentStatus.VALIDATED:
            raise IllegalTransition(
                f"Only validated documents can be posted; '{record.name}' is {record.status}"
            )
        value = self._default_amount if amount is None else amount
        if not (math.isfinite(value) and value > 0):
            raise ValueError("Posting amount must be a positive finite number")

        entry = LedgerEntry(
            id=f"entry-{uuid4().hex}",
            date=date.today(),
            narration=f"Posted from {record.name}",
            debit_account=self._ledger.code_for(LedgerAccount.ACCOUNTS_RECEIVABLE),
            credit_account=self._ledger.code_for(LedgerAccount.SALES),
            amount=value,
            source_document_id=document_id,
        )
        # The entry is saved first so a Posted document always has its entry.
        self._ledger.append(entry)
        try:
            self._registry.mark_posted(
                document_id,
                entry.id,
                f"Transaction posted to ledger with entry ID {entry.id}.",
            )
        except Exception:
            logger.error("Posting %s failed, retracting %s", document_id, entry.id)
            self._ledger.retract(entry.id)
            raise
        logger.info("Posted %s as %s", document_id, entry.id)
        return entry
