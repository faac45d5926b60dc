from __future__ import annotations

from typing import Optional

from ..errors import InvalidTextError
from ..models import GenerateRequest, GenerateResponse, RecommendSettings
from ..utils.logging import get_logger
from ..utils.text import extract_keywords
from .assemble import assemble
from .candidates import generate_candidates
from .storage import TrendStore

KEYWORD_TOP = 10
MIN_TEXT_LENGTH = 3


def validate_text(text: Optional[str]) -> str:
    if not text or len(text.strip()) < MIN_TEXT_LENGTH:
        raise InvalidTextError("Provide text")
    return text


def recommend(
    request: GenerateRequest,
    store: TrendStore,
    settings: Optional[RecommendSettings] = None,
) -> GenerateResponse:
    """Turn free text plus the country's trend snapshot into hashtags."""

    settings = settings or RecommendSettings()
    text = validate_text(request.text)
    country = request.country or settings.default_country
    limit = request.limit if request.limit is not None else settings.default_limit

    keywords = extract_keywords(text, KEYWORD_TOP)
    snapshot = store.get(country)
    trend_tags = [entry.tag.lower() for entry in snapshot.hashtags]

    candidates = generate_candidates(keywords, trend_tags, limit)
    generated = assemble(candidates, limit)
    get_logger(__name__).debug(
        "Generated hashtags",
        extra={"country": snapshot.country, "keywords": len(keywords), "candidates": len(candidates), "returned": len(generated)},
    )
    return GenerateResponse(
        generated=generated,
        keywords=keywords,
        source_updated_at=snapshot.updated_at,
    )
