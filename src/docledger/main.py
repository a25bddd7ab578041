"""Application entry point and composition root."""

import logging

from docledger import __version__
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
from docledger.config import Settings, get_settings
from docledger.infrastructure.classification import (
    OpenAIDocumentClassifier,
    UnavailableClassifier,
)
from docledger.infrastructure.document_parsers import DocumentFileExtractor
from docledger.infrastructure.persistence.json_file import JsonFileStore
from docledger.interfaces.api.app import create_app
from docledger.interfaces.api.resources.document_actions import (
    DocumentActionsResource,
    DocumentBatchResource,
)
from docledger.interfaces.api.resources.documents import (
    DocumentResource,
    DocumentsResource,
    DocumentsSummaryResource,
)
from docledger.interfaces.api.resources.evidence_bundles import EvidenceBundlesResource
from docledger.interfaces.api.resources.exceptions_center import ExceptionsResource
from docledger.interfaces.api.resources.health import HealthResource
from docledger.interfaces.api.resources.ledger import LedgerMappingsResource, LedgerResource
from docledger.interfaces.api.resources.notices import NoticesResource

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_docledger_app(settings: Settings | None = None):
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    configure_logging(settings)

    store = JsonFileStore(settings.state_dir)
    registry = DocumentRegistry(store)
    registry.load()
    ledger = LedgerBook(store)
    ledger.load()
    byte_cache = ByteCache()
    notices = SessionNotices()

    if settings.classifier_api_key:
        classifier = OpenAIDocumentClassifier(
            base_url=settings.classifier_api_url,
            api_key=settings.classifier_api_key,
            model=settings.classifier_model,
        )
    else:
        logger.warning("No classifier API key configured; documents will be typed as Other")
        classifier = UnavailableClassifier()
    extractor = DocumentFileExtractor()

    pipeline = ProcessingPipeline(
        registry=registry,
        byte_cache=byte_cache,
        extractor=extractor,
        classifier=classifier,
        notices=notices,
        min_content_length=settings.min_content_length,
        excerpt_chars=settings.classifier_excerpt_chars,
    )
    upload_documents = UploadDocumentsUseCase(
        registry=registry,
        byte_cache=byte_cache,
        pipeline=pipeline,
    )
    coordinator = RetryReprocessCoordinator(
        registry=registry,
        byte_cache=byte_cache,
        pipeline=pipeline,
        notices=notices,
    )
    split_document = SplitDocumentUseCase(
        registry=registry,
        byte_cache=byte_cache,
        extractor=extractor,
        upload_documents=upload_documents,
        notices=notices,
    )
    remove_document = RemoveDocumentUseCase(registry=registry, byte_cache=byte_cache)
    poster = LedgerPoster(
        registry=registry,
        ledger=ledger,
        default_amount=settings.default_posting_amount,
    )
    bundler = EvidenceBundler(registry)

    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    return create_app(
        documents_resource=DocumentsResource(upload_documents, registry),
        documents_summary_resource=DocumentsSummaryResource(registry),
        document_resource=DocumentResource(registry, remove_document),
        document_actions_resource=DocumentActionsResource(
            registry, coordinator, poster, split_document
        ),
        document_batch_resource=DocumentBatchResource(coordinator),
        exceptions_resource=ExceptionsResource(registry),
        evidence_bundles_resource=EvidenceBundlesResource(bundler),
        ledger_resource=LedgerResource(ledger),
        ledger_mappings_resource=LedgerMappingsResource(ledger),
        notices_resource=NoticesResource(notices),
        health_resource=HealthResource(registry, state_dir=settings.state_dir),
        cors_origins=cors_origins,
    )


def run_server(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run uvicorn server."""
    import uvicorn

    app = create_docledger_app()
    uvicorn.run(app, host=host, port=port)


def main() -> None:
    """CLI entry point."""
    print(f"docledger v{__version__}")
    run_server()
