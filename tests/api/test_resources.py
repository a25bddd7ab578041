"""API resource tests."""

import base64
import io
import zipfile

import falcon.asgi
import pytest
from falcon.testing import TestClient

from docledger.application.services import ByteCache
from docledger.interfaces.api.middleware.cors import CORSMiddleware
from docledger.interfaces.api.resources.documents import (
    _decode_filename,
    _get_part_filename,
    _parse_filename_star_from_header,
)
from docledger.interfaces.api.resources.health import HealthResource

from tests.api.conftest import multipart_body
from tests.conftest import INVOICE_TEXT, encrypt_pdf, make_pdf

TEXT = INVOICE_TEXT.encode()


class TestDecodeFilename:
    def test_none_or_empty(self) -> None:
        assert _decode_filename(None) == ""
        assert _decode_filename("   ") == ""

    def test_ascii_unchanged(self) -> None:
        assert _decode_filename("invoice.pdf") == "invoice.pdf"

    def test_non_latin_unchanged(self) -> None:
        assert _decode_filename("Счёт.pdf") == "Счёт.pdf"

    def test_mojibake_utf8_as_latin1(self) -> None:
        mojibake = "Счёт".encode("utf-8").decode("latin-1")
        assert _decode_filename(mojibake) == "Счёт"


class TestPartFilename:
    def test_filename_star_from_header(self) -> None:
        raw = b"form-data; name=\"files\"; filename*=UTF-8''%E2%82%B9_bill.pdf"
        assert _parse_filename_star_from_header(raw) == "₹_bill.pdf"
        assert _parse_filename_star_from_header(b'form-data; filename="a.txt"') is None

    def test_fallback_name(self) -> None:
        part = type("Part", (), {"filename": "", "_headers": {}})()
        assert _get_part_filename(part, 2) == "file_2"

    def test_prefers_part_filename(self) -> None:
        part = type("Part", (), {"filename": "given.txt", "_headers": {}})()
        assert _get_part_filename(part, 1) == "given.txt"


class TestHealth:
    def test_health_ok(self, client: TestClient) -> None:
        r = client.simulate_get("/v1/health")
        assert r.status_code == 200
        assert r.json["status"] == "ok"

    def test_ready_reports_document_count(self, client: TestClient, upload) -> None:
        upload(("a.txt", TEXT, "text/plain"))
        r = client.simulate_get("/v1/health/ready")
        assert r.json == {"status": "ready", "documents": 1}


class TestDocuments:
    def test_upload_and_list(self, client: TestClient, upload) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        assert doc["status"] == "Validated"
        assert doc["document_type"] == "Invoice"
        assert doc["logs"][0]["message"] == "File added to queue."
        assert "content" not in doc

        r = client.simulate_get("/v1/documents", params={"filter": "All", "sort": "name-asc"})
        assert r.status_code == 200
        assert [d["id"] for d in r.json["items"]] == [doc["id"]]

    def test_upload_requires_multipart(self, client: TestClient) -> None:
        r = client.simulate_post("/v1/documents", json={"files": []})
        assert r.status_code == 400

    def test_upload_requires_files(self, client: TestClient) -> None:
        body, headers = multipart_body([])
        r = client.simulate_post("/v1/documents", body=body, headers=headers)
        assert r.status_code == 400

    def test_invalid_filter(self, client: TestClient) -> None:
        r = client.simulate_get("/v1/documents", params={"filter": "Everything"})
        assert r.status_code == 400

    def test_get_includes_content(self, client: TestClient, upload) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        r = client.simulate_get(f"/v1/documents/{doc['id']}")
        assert r.status_code == 200
        assert r.json["content"] == INVOICE_TEXT

    def test_unknown_document_404(self, client: TestClient) -> None:
        r = client.simulate_get("/v1/documents/nope")
        assert r.status_code == 404
        assert "nope" in r.json["error"]

    def test_delete(self, client: TestClient, upload) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        assert client.simulate_delete(f"/v1/documents/{doc['id']}").status_code == 204
        assert client.simulate_get(f"/v1/documents/{doc['id']}").status_code == 404

    def test_summary_and_exceptions(self, client: TestClient, upload) -> None:
        upload(("a.csv", TEXT, "text/csv"), ("b.csv", TEXT, "text/csv"))
        summary = client.simulate_get("/v1/documents/summary").json
        assert summary["total"] == 2
        assert summary["counts"]["Review"] == 1

        items = client.simulate_get("/v1/exceptions").json["items"]
        assert [d["name"] for d in items] == ["b.csv"]
        assert items[0]["is_duplicate"] is True
        assert items[0]["exception_reason"] == "Potential duplicate of existing file."


class TestActions:
    def test_post_then_conflict(self, client: TestClient, upload) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        r = client.simulate_post(f"/v1/documents/{doc['id']}/post")
        assert r.status_code == 201
        assert r.json["document"]["status"] == "Posted"
        assert r.json["ledger_entry"]["amount"] == 1000.0

        again = client.simulate_post(f"/v1/documents/{doc['id']}/post")
        assert again.status_code == 409
        assert len(client.simulate_get("/v1/ledger").json["items"]) == 1

    def test_post_bad_amount(self, client: TestClient, upload) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        r = client.simulate_post(f"/v1/documents/{doc['id']}/post", json={"amount": "lots"})
        assert r.status_code == 400

    @pytest.mark.parametrize("amount", ["nan", "inf", "-1"])
    def test_post_non_finite_or_negative_amount(
        self, client: TestClient, upload, amount: str
    ) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        r = client.simulate_post(f"/v1/documents/{doc['id']}/post", json={"amount": amount})
        assert r.status_code == 400
        assert client.simulate_get("/v1/ledger").json["items"] == []
        assert client.simulate_get(f"/v1/documents/{doc['id']}").json["status"] == "Validated"

    def test_retry_without_bytes_410_and_notice(
        self, client: TestClient, upload, byte_cache: ByteCache
    ) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        byte_cache.evict(doc["id"])
        r = client.simulate_post(f"/v1/documents/{doc['id']}/retry")
        assert r.status_code == 410

        notice = client.simulate_get("/v1/notices").json["notice"]
        assert notice["message"].startswith("Cannot retry")
        assert client.simulate_delete("/v1/notices").status_code == 204
        assert client.simulate_get("/v1/notices").json["notice"] is None

    def test_unlock_and_batch_unlock(self, client: TestClient, upload) -> None:
        locked = encrypt_pdf(make_pdf([INVOICE_TEXT]), "secret")
        [doc] = upload(("locked.pdf", locked, "application/pdf"))
        assert doc["status"] == "Awaiting Password"

        r = client.simulate_post(
            f"/v1/documents/{doc['id']}/unlock", json={"password": "wrong"}
        )
        assert r.status_code == 200
        assert r.json["status"] == "Invalid Password"

        assert client.simulate_post(
            f"/v1/documents/{doc['id']}/unlock", json={}
        ).status_code == 400

        r = client.simulate_post("/v1/documents/batch-unlock", json={"password": "secret"})
        assert r.status_code == 200
        assert r.json["processed"] == [doc["id"]]
        status = client.simulate_get(f"/v1/documents/{doc['id']}").json["status"]
        assert status == "Validated"

    def test_reprocess(self, client: TestClient, upload) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        r = client.simulate_post("/v1/documents/reprocess", json={"document_ids": [doc["id"]]})
        assert r.status_code == 200
        assert r.json == {"processed": [], "skipped": [doc["id"]], "failed": {}}

    def test_split(self, client: TestClient, upload) -> None:
        pages = [f"{INVOICE_TEXT} Page {i}" for i in range(1, 11)]
        [doc] = upload(("bundle.pdf", make_pdf(pages), "application/pdf"))

        bad = client.simulate_post(
            f"/v1/documents/{doc['id']}/split",
            json={"from_page": 3, "to_page": 2, "name": "x"},
        )
        assert bad.status_code == 422

        r = client.simulate_post(
            f"/v1/documents/{doc['id']}/split",
            json={"from_page": 1, "to_page": 3, "name": "part"},
        )
        assert r.status_code == 201
        assert r.json["name"] == "part.pdf"
        assert r.json["source"] == "split"

    def test_split_text_document_422(self, client: TestClient, upload) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        r = client.simulate_post(
            f"/v1/documents/{doc['id']}/split",
            json={"from_page": 1, "to_page": 1, "name": "x"},
        )
        assert r.status_code == 422


class TestEvidenceBundles:
    def test_zip_download(self, client: TestClient, upload) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        r = client.simulate_post("/v1/evidence-bundles", json={"document_ids": [doc["id"]]})
        assert r.status_code == 201
        assert r.headers["content-type"] == "application/zip"
        assert "Evidence_Bundle_" in r.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(r.content)) as zf:
            assert "inv.txt.txt" in zf.namelist()

    def test_base64_download(self, client: TestClient, upload) -> None:
        [doc] = upload(("inv.txt", TEXT, "text/plain"))
        r = client.simulate_post(
            "/v1/evidence-bundles",
            params={"encoding": "base64"},
            json={"document_ids": [doc["id"]]},
        )
        assert r.status_code == 201
        assert r.json["file_type"] == "zip"
        data = base64.b64decode(r.json["content"])
        assert zipfile.is_zipfile(io.BytesIO(data))

    def test_requires_ids(self, client: TestClient) -> None:
        r = client.simulate_post("/v1/evidence-bundles", json={"document_ids": []})
        assert r.status_code == 400


class TestLedgerMappings:
    def test_get_defaults(self, client: TestClient) -> None:
        mappings = client.simulate_get("/v1/ledger/mappings").json["mappings"]
        assert mappings["Sales"] == "4000"
        assert mappings["Accounts Receivable"] == "1200"

    def test_put_updates(self, client: TestClient) -> None:
        r = client.simulate_put("/v1/ledger/mappings", json={"mappings": {"Sales": "4100"}})
        assert r.status_code == 200
        assert r.json["mappings"]["Sales"] == "4100"

    def test_put_rejects_unknown_account(self, client: TestClient) -> None:
        r = client.simulate_put("/v1/ledger/mappings", json={"mappings": {"Cash": "1000"}})
        assert r.status_code == 400
        assert client.simulate_get("/v1/ledger/mappings").json["mappings"]["Sales"] == "4000"


class TestCors:
    def test_preflight(self, client: TestClient) -> None:
        r = client.simulate_options(
            "/v1/documents", headers={"Origin": "http://localhost:3000"}
        )
        assert r.status_code == 204
        assert r.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert "DELETE" in r.headers["access-control-allow-methods"]

    def test_error_response_keeps_headers(self, client: TestClient) -> None:
        r = client.simulate_get(
            "/v1/documents/missing", headers={"Origin": "http://localhost:3000"}
        )
        assert r.status_code == 404
        assert r.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert r.headers["access-control-expose-headers"] == "Content-Disposition"

    def test_unlisted_origin_gets_no_allow_origin(self, client: TestClient) -> None:
        r = client.simulate_get("/v1/health", headers={"Origin": "http://evil.example"})
        assert r.status_code == 200
        assert "access-control-allow-origin" not in r.headers
        assert r.headers["vary"] == "Origin"

    def test_wildcard_echoes_any_origin(self) -> None:
        app = falcon.asgi.App(middleware=[CORSMiddleware(["*"])])
        app.add_route("/v1/health", HealthResource())
        r = TestClient(app).simulate_get(
            "/v1/health", headers={"Origin": "https://books.example"}
        )
        assert r.headers["access-control-allow-origin"] == "https://books.example"
