"""CORS middleware for browser clients of the document inbox."""

import falcon.asgi

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type"
# Evidence bundle downloads carry their file name here.
EXPOSED_HEADERS = "Content-Disposition"
PREFLIGHT_MAX_AGE = "86400"


class CORSMiddleware:
    """
    Adds CORS headers to every response and answers OPTIONS preflight.

    ``origins`` comes from the comma separated ``cors_origins`` setting. A
    listed origin is echoed back; ``*`` allows any origin. Requests from an
    unlisted origin get no Allow-Origin header, so the browser blocks them.
    """

    def __init__(self, origins: list[str]) -> None:
        self._allow_any = "*" in origins
        self._origins = frozenset(o for o in origins if o != "*")

    def _allowed_origin(self, origin: str | None) -> str | None:
        if not origin:
            return None
        if self._allow_any or origin in self._origins:
            return origin
        return None

    def _apply(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.set_header("Vary", "Origin")
        origin = self._allowed_origin(req.get_header("Origin"))
        if origin is None:
            return
        resp.set_header("Access-Control-Allow-Origin", origin)
        resp.set_header("Access-Control-Allow-Methods", ALLOWED_METHODS)
        resp.set_header("Access-Control-Allow-Headers", ALLOWED_HEADERS)
        resp.set_header("Access-Control-Expose-Headers", EXPOSED_HEADERS)
        resp.set_header("Access-Control-Max-Age", PREFLIGHT_MAX_AGE)

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        if req.method == "OPTIONS":
            self._apply(req, resp)
            resp.status = falcon.HTTP_204
            resp.complete = True

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        """Set headers last, after any error handler has built the response."""
        self._apply(req, resp)
