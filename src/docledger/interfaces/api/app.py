"""Falcon ASGI application."""

import logging

import falcon
import falcon.asgi
from falcon.asgi import App

from docledger.domain.exceptions import (
    IllegalTransition,
    NotFound,
    PageRangeError,
    PipelineBusy,
    PostingConflict,
    ResourceUnavailable,
    UnsupportedDocument,
)
from docledger.interfaces.api.middleware.cors import CORSMiddleware
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

ERROR_STATUS: dict[type[Exception], str] = {
    NotFound: falcon.HTTP_404,
    PostingConflict: falcon.HTTP_409,
    IllegalTransition: falcon.HTTP_409,
    PipelineBusy: falcon.HTTP_409,
    ResourceUnavailable: falcon.HTTP_410,
    PageRangeError: falcon.HTTP_422,
    UnsupportedDocument: falcon.HTTP_422,
}


def _domain_error_handler(status: str):
    async def handler(req, resp, ex, params):
        resp.status = status
        resp.media = {"error": str(ex)}

    return handler


async def _log_exception(req, resp, ex, params):
    logger.error(
        "Unhandled error on %s %s", req.method, req.path, exc_info=(type(ex), ex, ex.__traceback__)
    )
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def create_app(
    documents_resource: DocumentsResource,
    documents_summary_resource: DocumentsSummaryResource,
    document_resource: DocumentResource,
    document_actions_resource: DocumentActionsResource,
    document_batch_resource: DocumentBatchResource,
    exceptions_resource: ExceptionsResource,
    evidence_bundles_resource: EvidenceBundlesResource,
    ledger_resource: LedgerResource,
    ledger_mappings_resource: LedgerMappingsResource,
    notices_resource: NoticesResource,
    health_resource: HealthResource,
    cors_origins: list[str] | None = None,
) -> App:
    """Create Falcon ASGI app with routes and error mapping."""
    app = falcon.asgi.App(middleware=[CORSMiddleware(cors_origins or [])])

    app.add_error_handler(Exception, _log_exception)
    for exc_type, status in ERROR_STATUS.items():
        app.add_error_handler(exc_type, _domain_error_handler(status))

    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/documents", documents_resource)
    app.add_route("/v1/documents/summary", documents_summary_resource)
    app.add_route("/v1/documents/batch-unlock", document_batch_resource, suffix="unlock")
    app.add_route("/v1/documents/reprocess", document_batch_resource, suffix="reprocess")
    app.add_route("/v1/documents/{document_id}", document_resource)
    app.add_route(
        "/v1/documents/{document_id}/retry", document_actions_resource, suffix="retry"
    )
    app.add_route(
        "/v1/documents/{document_id}/unlock", document_actions_resource, suffix="unlock"
    )
    app.add_route("/v1/documents/{document_id}/post", document_actions_resource, suffix="post")
    app.add_route(
        "/v1/documents/{document_id}/split", document_actions_resource, suffix="split"
    )
    app.add_route("/v1/exceptions", exceptions_resource)
    app.add_route("/v1/evidence-bundles", evidence_bundles_resource)
    app.add_route("/v1/ledger", ledger_resource)
    app.add_route("/v1/ledger/mappings", ledger_mappings_resource)
    app.add_route("/v1/notices", notices_resource)
    return app
