"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

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

BOUNDARY = "docledger-test-boundary"


def multipart_body(files: list[tuple[str, bytes, str]]) -> tuple[bytes, dict[str, str]]:
    """Encode (filename, data, content_type) triples as a `files` multipart form."""
    body = b""
    for filename, data, content_type in files:
        body += (
            f"--{BOUNDARY}\r\n"
            f'Content-Disposition: form-data; name="files"; filename="{filename}"\r\n'
            f"Content-Type: {content_type}\r\n\r\n"
        ).encode() + data + b"\r\n"
    body += f"--{BOUNDARY}--\r\n".encode()
    return body, {"Content-Type": f"multipart/form-data; boundary={BOUNDARY}"}


@pytest.fixture
def app(
    registry,
    upload_documents,
    remove_document,
    coordinator,
    poster,
    split_document,
    bundler,
    ledger,
    notices,
):
    """Falcon ASGI app over in-memory services."""
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
        health_resource=HealthResource(registry),
        cors_origins=["http://localhost:3000"],
    )


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)


@pytest.fixture
def upload(client):
    """Upload files through the API and return the created documents."""

    def _upload(*files: tuple[str, bytes, str]) -> list[dict]:
        body, headers = multipart_body(list(files))
        result = client.simulate_post("/v1/documents", body=body, headers=headers)
        assert result.status_code == 201, result.text
        return result.json["documents"]

    return _upload
