"""Session notice resource."""

import falcon.asgi

from docledger.application.services import SessionNotices


class NoticesResource:
    """GET/DELETE /v1/notices - current session notice and its dismissal."""

    def __init__(self, notices: SessionNotices) -> None:
        self._notices = notices

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        notice = self._notices.current
        resp.media = {
            "notice": (
                {"message": notice.message, "raised_at": notice.raised_at.isoformat()}
                if notice
                else None
            )
        }
        resp.status = falcon.HTTP_200

    async def on_delete(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        self._notices.dismiss()
        resp.status = falcon.HTTP_204
