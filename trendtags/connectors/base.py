from __future__ import annotations

import abc
from typing import Any, Dict, List, Tuple

from ..models import ScraperSettings, TrendSnapshot
from ..pipeline.scoring import rank_hashtags
from ..utils.logging import get_logger


class BaseTrendConnector(abc.ABC):
    """Abstract trend source producing one ranked snapshot per country."""

    source_name = "unknown"

    def __init__(self, settings: ScraperSettings):
        self.settings = settings

    @abc.abstractmethod
    async def fetch(self, country: str) -> Dict[str, Any]:
        """Return the raw page payload (``url``, ``html``, ``text``)."""

    @abc.abstractmethod
    def extract(self, payload: Dict[str, Any]) -> Tuple[Dict[str, int], List[str]]:
        """Return hashtag counts from page text and hashtags found in trending nodes."""

    async def run(self, country: str) -> TrendSnapshot:
        payload = await self.fetch(country)
        text_counts, dom_tags = self.extract(payload)
        hashtags = rank_hashtags(
            text_counts,
            dom_tags,
            dom_weight=self.settings.dom_weight,
            cap=self.settings.max_hashtags,
        )
        get_logger(__name__).info(
            "Extracted hashtags",
            extra={"country": country, "text_tags": len(text_counts), "dom_tags": len(dom_tags), "kept": len(hashtags)},
        )
        return TrendSnapshot(
            country=country.lower(),
            hashtags=hashtags,
            count=len(hashtags),
            source=self.source_name,
        )
