from __future__ import annotations

from typing import Any, Dict, List, Tuple

import httpx
from bs4 import BeautifulSoup
from playwright.async_api import async_playwright

from ..utils.logging import get_logger
from ..utils.text import count_hashtags
from .base import BaseTrendConnector

TRENDING_SELECTORS = (
    "[data-e2e='trending-item'] a",
    "[data-e2e='suggested-hashtag']",
    ".tiktok-1qb12g8-SpanText",
    "a[href*='/tag/']",
)
MAX_TAG_LENGTH = 50
CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
]


class TikTokDiscoverConnector(BaseTrendConnector):
    """Scrape trending hashtags from the TikTok discover page."""

    source_name = "tiktok"

    def page_url(self, country: str) -> str:
        return self.settings.url.format(country=country)

    async def fetch(self, country: str) -> Dict[str, Any]:
        url = self.page_url(country)
        get_logger(__name__).info("Starting scrape", extra={"country": country, "url": url, "render": self.settings.render})
        if self.settings.render:
            html, text = await self._render_with_playwright(url)
        else:
            html = await self._fetch_html(url)
            text = BeautifulSoup(html, "lxml").get_text(separator="\n", strip=True)
        return {"url": url, "html": html, "text": text}

    def extract(self, payload: Dict[str, Any]) -> Tuple[Dict[str, int], List[str]]:
        text_counts = count_hashtags(payload.get("text") or "")
        dom_tags = extract_trending_tags(payload.get("html") or "")
        return text_counts, dom_tags

    async def _render_with_playwright(self, url: str) -> Tuple[str, str]:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=self.settings.headless, args=CHROMIUM_ARGS)
            try:
                page = await browser.new_page(user_agent=self.settings.user_agent)
                await page.goto(url, wait_until="networkidle", timeout=self.settings.timeout_ms)
                await page.wait_for_timeout(self.settings.settle_ms)
                text = await page.inner_text("body")
                html = await page.content()
            finally:
                await browser.close()
        return html, text

    async def _fetch_html(self, url: str) -> str:
        headers = {"User-Agent": self.settings.user_agent}
        timeout = self.settings.timeout_ms / 1000.0
        async with httpx.AsyncClient(timeout=timeout, headers=headers, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.text


def extract_trending_tags(html: str) -> List[str]:
    """Hashtag texts of the trending nodes, one entry per matching node."""

    if not html:
        return []
    soup = BeautifulSoup(html, "lxml")
    found: List[str] = []
    for selector in TRENDING_SELECTORS:
        for node in soup.select(selector):
            text = node.get_text()
            if text and text.startswith("#") and len(text) < MAX_TAG_LENGTH:
                found.append(text.strip())
    return found
