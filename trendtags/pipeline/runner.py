from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Type

from ..connectors.base import BaseTrendConnector
from ..connectors.tiktok import TikTokDiscoverConnector
from ..errors import TrendStoreError
from ..models import ScraperSettings, Settings, TrendSnapshot
from ..utils.logging import get_logger
from .storage import TrendStore

CONNECTOR_REGISTRY: Dict[str, Type[BaseTrendConnector]] = {
    "tiktok": TikTokDiscoverConnector,
}


def build_connector(settings: ScraperSettings) -> BaseTrendConnector:
    connector_cls = CONNECTOR_REGISTRY.get(settings.source)
    if not connector_cls:
        raise ValueError(f"No connector registered for source {settings.source!r}")
    return connector_cls(settings)


async def refresh_country(connector: BaseTrendConnector, store: TrendStore, country: str) -> Optional[TrendSnapshot]:
    """Scrape one country and replace its stored snapshot.

    A failed scrape or write is logged and leaves the previous snapshot in
    place, so the remaining countries still run.
    """

    logger = get_logger(__name__)
    try:
        snapshot = await connector.run(country)
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("Scrape failed", extra={"country": country, "error": str(exc)})
        return None
    try:
        stored = store.put(country, snapshot)
    except TrendStoreError as exc:
        logger.error("Saving hashtags failed", extra={"country": country, "error": str(exc)})
        return None
    logger.info("Saved hashtags", extra={"country": stored.country, "count": stored.count})
    return stored


async def refresh_async(
    settings: Settings,
    store: TrendStore,
    countries: Optional[Iterable[str]] = None,
    connector: Optional[BaseTrendConnector] = None,
) -> List[TrendSnapshot]:
    connector = connector or build_connector(settings.scraper)
    written: List[TrendSnapshot] = []
    for country in countries or settings.scraper.countries:
        snapshot = await refresh_country(connector, store, country)
        if snapshot is not None:
            written.append(snapshot)
    return written


def interval_seconds(settings: ScraperSettings) -> int:
    return max(1, settings.interval_minutes) * 60


async def run_schedule(
    settings: Settings,
    store: TrendStore,
    iterations: Optional[int] = None,
    connector: Optional[BaseTrendConnector] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """Refresh now, then every ``interval_minutes`` until ``iterations`` runs are done."""

    logger = get_logger(__name__)
    connector = connector or build_connector(settings.scraper)
    delay = interval_seconds(settings.scraper)
    logger.info("Refresh scheduled", extra={"every_minutes": delay // 60})
    runs = 0
    while True:
        try:
            await refresh_async(settings, store, connector=connector)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Scheduled refresh failed")
        runs += 1
        if iterations is not None and runs >= iterations:
            return
        await sleep(delay)
