"""
Per-client rate limiting with slowapi.

One application-wide limit covers every route: ``points`` requests per
``duration`` seconds per remote address. Requests over the limit are
rejected with 429, never queued.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from ..models import RateLimitSettings


def build_limiter(settings: RateLimitSettings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        application_limits=[settings.limit_string],
        storage_uri=settings.storage_uri,
        enabled=settings.enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # Called synchronously by SlowAPIMiddleware.
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": "Too many requests"},
    )
