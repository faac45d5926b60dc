import logging
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Query
from pydantic import BaseModel

from ..errors import InvalidTextError
from ..models import GenerateRequest, GenerateResponse, Settings
from ..pipeline.recommend import recommend
from ..pipeline.storage import TrendStore
from .dependencies import get_settings, get_store
from .exceptions import GenerationFailed, TextRequired, TrendsUnavailable

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    service: str


def health() -> HealthResponse:
    return HealthResponse(status="ok", service="trendtags")


def trending(
    country: Optional[str] = Query(None, description="Country code, defaults to the configured default"),
    settings: Settings = Depends(get_settings),
    store: TrendStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Latest trend snapshot for a country.

    Unknown countries return an empty snapshot with ``updatedAt: null``.
    """
    key = (country or settings.recommend.default_country).lower()
    try:
        snapshot = store.get(key)
    except Exception as exc:
        logger.exception("Trend lookup failed", extra={"country": key})
        raise TrendsUnavailable() from exc
    return snapshot.dict_for_response()


def generate(
    payload: Optional[GenerateRequest] = None,
    settings: Settings = Depends(get_settings),
    store: TrendStore = Depends(get_store),
) -> GenerateResponse:
    """
    Recommend hashtags for free text.

    - **text**: at least 3 characters after trimming
    - **country**: trend snapshot to match against (default: global)
    - **limit**: maximum hashtags returned (default: 12)
    """
    try:
        return recommend(payload or GenerateRequest(), store, settings.recommend)
    except InvalidTextError as exc:
        raise TextRequired(exc.message) from exc
    except Exception as exc:
        logger.exception("Hashtag generation failed")
        raise GenerationFailed() from exc


def register_routes(app: FastAPI) -> None:
    """Attach the endpoints to ``app`` itself.

    SlowAPIMiddleware resolves the endpoint by scanning ``app.routes``, so the
    routes live on the app rather than on an included router.
    """
    app.add_api_route("/health", health, methods=["GET"], response_model=HealthResponse, tags=["system"])
    app.add_api_route("/trending", trending, methods=["GET"], tags=["trends"])
    app.add_api_route("/generate", generate, methods=["POST"], response_model=GenerateResponse, tags=["hashtags"])
