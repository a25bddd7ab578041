"""OpenAI-compatible document classifier."""

import json
import logging

from openai import AsyncOpenAI, OpenAIError

from docledger.domain.exceptions import ClassificationFailure
from docledger.domain.value_objects import DocumentType

logger = logging.getLogger(__name__)

_CATEGORY_HINTS: dict[DocumentType, str] = {
    DocumentType.INVOICE: "sales, purchase or expense invoices and bills",
    DocumentType.BANK_STATEMENT: "bank transaction statements with Debit, Credit and Balance columns",
    DocumentType.GST_FILING: "GSTR-1, GSTR-3B and other GST returns",
    DocumentType.GSTR_2B: "GSTR-2B reconciliation reports from the GST portal",
    DocumentType.TDS_CERTIFICATE: "Form 16, 16A and other TDS/TCS certificates",
    DocumentType.PAYROLL_REGISTER: "salary sheets, payroll summaries, employee compensation",
    DocumentType.CONTRACT_AGREEMENT: "contracts, agreements and MOUs",
    DocumentType.SALES_REGISTER: "ledgers or reports of sales transactions",
    DocumentType.PURCHASE_REGISTER: "ledgers or reports of purchase transactions",
    DocumentType.JOURNAL_LEDGER: "general journal, ledger or trial balance exports",
    DocumentType.PURCHASE_ORDER: "purchase orders placed with vendors",
    DocumentType.GOODS_RECEIPT_NOTE: "GRNs or delivery challans confirming receipt of goods",
    DocumentType.OTHER: "anything that does not clearly fit the categories above",
}

SYSTEM_PROMPT = (
    "You classify financial documents. Reply with a single JSON object "
    '{"type": "<category>"} where <category> is exactly one of:\n'
    + "\n".join(f'- "{t.value}": {hint}' for t, hint in _CATEGORY_HINTS.items())
)


def build_user_prompt(name: str, excerpt: str) -> str:
    return f"File Name: {name}\nFile Content (excerpt):\n---\n{excerpt}\n---"


def parse_label(raw: str | None) -> DocumentType:
    """Extract the category from a JSON reply; anything unusable is Other."""
    if not raw:
        return DocumentType.OTHER
    try:
        payload = json.loads(raw)
    except ValueError:
        return DocumentType.OTHER
    if not isinstance(payload, dict):
        return DocumentType.OTHER
    label = payload.get("type")
    return DocumentType.parse(label if isinstance(label, str) else None)


class OpenAIDocumentClassifier:
    """Classifier using an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
    ) -> None:
        self._client = AsyncOpenAI(base_url=base_url, api_key=api_key)
        self._model = model

    async def classify(self, name: str, excerpt: str) -> DocumentType:
        """Best-effort type; failures degrade to Other and are logged."""
        try:
            return await self._request(name, excerpt)
        except ClassificationFailure as e:
            logger.warning("Classification failed for %s, using Other: %s", name, e)
            return DocumentType.OTHER

    async def _request(self, name: str, excerpt: str) -> DocumentType:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                temperature=0,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(name, excerpt)},
                ],
            )
            raw = response.choices[0].message.content
        except (OpenAIError, IndexError, AttributeError) as e:
            raise ClassificationFailure(f"Classifier request failed: {e}") from e
        return parse_label(raw)


class UnavailableClassifier:
    """Used when no classifier endpoint is configured."""

    async def classify(self, name: str, excerpt: str) -> DocumentType:
        return DocumentType.OTHER
