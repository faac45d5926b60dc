from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..models import Settings
from ..pipeline.storage import DuckDBTrendStore, TrendStore
from .exceptions import http_exception_handler, unhandled_exception_handler, validation_exception_handler
from .middleware import body_size_limit
from .rate_limit import build_limiter, rate_limit_exceeded_handler
from .routes import register_routes

_DESCRIPTION = """
Hashtag recommendations from free text, matched against scraped trending hashtags.

* **POST /generate**: keywords from the text, matched against the country's trend snapshot.
* **GET /trending**: the latest stored snapshot for a country.

Errors return `{"error": "<message>"}`.
"""


def create_app(settings: Optional[Settings] = None, store: Optional[TrendStore] = None) -> FastAPI:
    """Build the API with its settings, store and rate limiter attached to ``app.state``."""
    settings = settings or Settings()
    app = FastAPI(
        title="trendtags",
        version="0.1.0",
        description=_DESCRIPTION,
    )

    app.state.settings = settings
    app.state.store = store or DuckDBTrendStore(settings.storage)
    app.state.limiter = build_limiter(settings.rate_limit)

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Middleware (applied in reverse-registration order: last added = outermost)
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(body_size_limit(settings.server.max_body_bytes))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app
