"""Echo endpoint router returning the escaped request path and body."""

import html

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

ECHO_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def api_create_echo_router() -> APIRouter:
    """Create router echoing request path and body under `/echo/`.

    Returns:
        APIRouter: Router exposing `/echo/{echo_path}` for common methods.
    """

    router = APIRouter(tags=["echo"])

    @router.api_route("/echo/{echo_path:path}", methods=ECHO_METHODS, response_class=PlainTextResponse)
    async def api_echo(request: Request, echo_path: str) -> PlainTextResponse:
        """Return the HTML-escaped request path on the first line, then the raw body."""

        _ = echo_path
        body = await request.body()
        escaped_path = html.escape(request.url.path)
        return PlainTextResponse(f"{escaped_path}\n".encode("utf-8") + body)

    return router
