"""Evidence bundle export resource."""

import falcon.asgi

from docledger.application.use_cases.export.create_evidence_bundle import EvidenceBundler


class EvidenceBundlesResource:
    """POST /v1/evidence-bundles - zip of selected documents' text plus manifest."""

    def __init__(self, bundler: EvidenceBundler) -> None:
        self._bundler = bundler

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Body: {"document_ids": [...]}. ?encoding=base64 returns a FileDownload JSON."""
        try:
            body = await req.get_media()
            ids = body["document_ids"]
            if not isinstance(ids, list) or not ids:
                raise ValueError("document_ids must be a non-empty list")
        except (KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        bundle = self._bundler.bundle([str(i) for i in ids])
        if req.get_param("encoding") == "base64":
            resp.media = bundle.as_download().to_payload()
        else:
            resp.content_type = "application/zip"
            resp.downloadable_as = bundle.file_name
            resp.data = bundle.data
        resp.status = falcon.HTTP_201
