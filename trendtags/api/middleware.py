from collections.abc import Awaitable, Callable

from fastapi import Request, status
from fastapi.responses import Response

from .exceptions import error_response

Middleware = Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]


def body_size_limit(max_bytes: int) -> Middleware:
    """Reject requests whose declared Content-Length exceeds ``max_bytes``."""

    async def middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > max_bytes:
            return error_response(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Request body too large")
        return await call_next(request)

    return middleware
