"""Pytest fixtures for docledger tests."""

from __future__ import annotations

import asyncio
import copy
import io
from datetime import UTC, datetime, timedelta

import pytest
from openpyxl import Workbook
from pypdf import PdfWriter

from docledger.application.dto.document_dto import UploadedFile
from docledger.application.services import (
    ByteCache,
    DocumentRegistry,
    LedgerBook,
    SessionNotices,
)
from docledger.application.use_cases.document.process_document import ProcessingPipeline
from docledger.application.use_cases.document.remove_document import RemoveDocumentUseCase
from docledger.application.use_cases.document.retry_document import RetryReprocessCoordinator
from docledger.application.use_cases.document.split_document import SplitDocumentUseCase
from docledger.application.use_cases.document.upload_documents import UploadDocumentsUseCase
from docledger.application.use_cases.export.create_evidence_bundle import EvidenceBundler
from docledger.application.use_cases.ledger.post_document import LedgerPoster
from docledger.domain.entities import DocumentRecord, LedgerEntry, LedgerMapping
from docledger.domain.value_objects import DocumentStatus, DocumentType
from docledger.infrastructure.document_parsers import DocumentFileExtractor

INVOICE_TEXT = (
    "Tax Invoice INV-2024-001 issued by Acme Traders to Globex Retail "
    "for consulting services rendered in March."
)


# --- File builders ---


def _escape_pdf_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def make_pdf(pages: list[str]) -> bytes:
    """Minimal PDF with one line of Helvetica text per page."""
    n = len(pages)
    page_ids = [4 + 2 * i for i in range(n)]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)
    objects: list[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {n} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for page_id, text in zip(page_ids, pages, strict=True):
        stream = f"BT /F1 12 Tf 72 720 Td ({_escape_pdf_text(text)}) Tj ET".encode("latin-1")
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {page_id + 1} 0 R >>"
            ).encode()
        )
        objects.append(
            b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets: list[int] = []
    for num, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{num} 0 obj\n".encode() + body + b"\nendobj\n"
    xref_pos = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_pos}\n%%EOF\n"
    ).encode()
    return bytes(out)


def encrypt_pdf(data: bytes, password: str = "secret") -> bytes:
    writer = PdfWriter(clone_from=io.BytesIO(data))
    writer.encrypt(user_password=password, owner_password=password)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def make_xlsx(sheets: dict[str, list[list[object]]]) -> bytes:
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets.items():
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def text_file(name: str, text: str = INVOICE_TEXT) -> UploadedFile:
    return UploadedFile(filename=name, data=text.encode("utf-8"))


def pdf_file(name: str, pages: list[str], password: str | None = None) -> UploadedFile:
    data = make_pdf(pages)
    if password:
        data = encrypt_pdf(data, password)
    return UploadedFile(filename=name, data=data, content_type="application/pdf")


# --- Fakes ---


class InMemoryPersistence:
    """Persistence adapter keeping deep copies of what was saved."""

    def __init__(self) -> None:
        self.documents: list[DocumentRecord] = []
        self.ledger: list[LedgerEntry] = []
        self.mappings: list[LedgerMapping] = []
        self.document_saves = 0

    def load_documents(self) -> list[DocumentRecord]:
        return copy.deepcopy(self.documents)

    def save_documents(self, documents: list[DocumentRecord]) -> None:
        self.documents = copy.deepcopy(documents)
        self.document_saves += 1

    def load_ledger(self) -> list[LedgerEntry]:
        return list(self.ledger)

    def save_ledger(self, entries: list[LedgerEntry]) -> None:
        self.ledger = list(entries)

    def load_ledger_mappings(self) -> list[LedgerMapping]:
        return copy.deepcopy(self.mappings)

    def save_ledger_mappings(self, mappings: list[LedgerMapping]) -> None:
        self.mappings = copy.deepcopy(mappings)


class FakeClassifier:
    """Classifier returning a fixed type; can fail or block on demand."""

    def __init__(self, result: DocumentType = DocumentType.INVOICE) -> None:
        self.result = result
        self.error: Exception | None = None
        self.calls: list[tuple[str, str]] = []
        self.started = asyncio.Event()
        self.release: asyncio.Event | None = None

    async def classify(self, name: str, excerpt: str) -> DocumentType:
        self.calls.append((name, excerpt))
        self.started.set()
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.result


# --- Fixtures ---


@pytest.fixture
def persistence() -> InMemoryPersistence:
    return InMemoryPersistence()


@pytest.fixture
def registry(persistence: InMemoryPersistence) -> DocumentRegistry:
    return DocumentRegistry(persistence)


@pytest.fixture
def byte_cache() -> ByteCache:
    return ByteCache()


@pytest.fixture
def notices() -> SessionNotices:
    return SessionNotices()


@pytest.fixture
def classifier() -> FakeClassifier:
    return FakeClassifier()


@pytest.fixture
def extractor() -> DocumentFileExtractor:
    return DocumentFileExtractor()


@pytest.fixture
def pipeline(registry, byte_cache, extractor, classifier, notices) -> ProcessingPipeline:
    return ProcessingPipeline(
        registry=registry,
        byte_cache=byte_cache,
        extractor=extractor,
        classifier=classifier,
        notices=notices,
        min_content_length=50,
        excerpt_chars=500,
    )


@pytest.fixture
def upload_documents(registry, byte_cache, pipeline) -> UploadDocumentsUseCase:
    return UploadDocumentsUseCase(registry=registry, byte_cache=byte_cache, pipeline=pipeline)


@pytest.fixture
def coordinator(registry, byte_cache, pipeline, notices) -> RetryReprocessCoordinator:
    return RetryReprocessCoordinator(
        registry=registry, byte_cache=byte_cache, pipeline=pipeline, notices=notices
    )


@pytest.fixture
def split_document(
    registry, byte_cache, extractor, upload_documents, notices
) -> SplitDocumentUseCase:
    return SplitDocumentUseCase(
        registry=registry,
        byte_cache=byte_cache,
        extractor=extractor,
        upload_documents=upload_documents,
        notices=notices,
    )


@pytest.fixture
def remove_document(registry, byte_cache) -> RemoveDocumentUseCase:
    return RemoveDocumentUseCase(registry=registry, byte_cache=byte_cache)


@pytest.fixture
def ledger(persistence) -> LedgerBook:
    book = LedgerBook(persistence)
    book.load()
    return book


@pytest.fixture
def poster(registry, ledger) -> LedgerPoster:
    return LedgerPoster(registry=registry, ledger=ledger, default_amount=1000.0)


@pytest.fixture
def bundler(registry) -> EvidenceBundler:
    return EvidenceBundler(registry)


def make_record(
    doc_id: str,
    name: str | None = None,
    content_hash: str = "a" * 64,
    status: DocumentStatus = DocumentStatus.UPLOADED,
    minutes: int = 0,
    is_duplicate: bool = False,
) -> DocumentRecord:
    """Bare record for registry-level tests."""
    return DocumentRecord(
        id=doc_id,
        name=name or doc_id,
        size=10,
        mime_type="text/plain",
        content_hash=content_hash,
        uploaded_at=datetime(2024, 4, 1, tzinfo=UTC) + timedelta(minutes=minutes),
        status=status,
        is_duplicate=is_duplicate,
    )
