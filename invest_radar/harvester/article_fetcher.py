"""
Article page-text fetcher.

Pulls the readable body text of each discovered article so extraction and
attestation can run against more than the headline. A failed fetch is not
an error: the item keeps text="" and is processed headline-only.
"""

import asyncio
import httpx
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from .base_scraper import DiscoveredItem, html_to_text
from ..common.http_client import create_article_client
from ..common.outcome import Outcome
from ..config.settings import settings

logger = logging.getLogger(__name__)

# Article content selectors (ordered by specificity)
ARTICLE_SELECTORS = [
    # News site specific
    '[data-testid="article-body"]',
    '.article__body', '.article-content', '.article-text', '.articlebodycontent',
    '.story-body', '.story-content', '.story__body', '.story-details',
    '.post-content', '.entry-content', '.artText', '._s30J',
    # Generic content areas
    '[role="article"]', 'article', 'main', '#content',
]

NOISE_TAGS = ["script", "style", "noscript", "iframe", "svg", "nav", "header", "footer", "aside", "form"]

# Shorter selector hits are usually teaser boxes, not the story
MIN_ARTICLE_CHARS = 200


def extract_article_text(html: str, max_chars: int) -> str:
    """Best-effort main text: first content selector with enough text, else the whole page."""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(NOISE_TAGS):
        tag.decompose()

    for selector in ARTICLE_SELECTORS:
        element = soup.select_one(selector)
        if element:
            text = re.sub(r"\s+", " ", element.get_text(separator=" ", strip=True)).strip()
            if len(text) > MIN_ARTICLE_CHARS:
                return text[:max_chars]

    return html_to_text(str(soup))[:max_chars]


class ArticleFetcher:
    """Concurrent page fetcher bounded by a semaphore."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        max_concurrent: Optional[int] = None,
        max_chars: Optional[int] = None,
    ):
        self._client = client
        self.max_concurrent = max_concurrent or settings.max_concurrent_articles
        self.max_chars = max_chars or settings.page_text_max_chars

    async def fetch(self, url: str, client: Optional[httpx.AsyncClient] = None) -> Outcome[str]:
        client = client or self._client
        if client is None:
            async with create_article_client() as own_client:
                return await self.fetch(url, own_client)

        try:
            response = await client.get(url, headers={"Accept": "text/html,application/xhtml+xml"})
        except httpx.HTTPError as e:
            logger.debug(f"Error fetching {url}: {e}")
            return Outcome.empty(f"http-error: {type(e).__name__}")

        if response.status_code != 200:
            logger.debug(f"HTTP {response.status_code} for {url}")
            return Outcome.empty(f"http-{response.status_code}")

        content_type = response.headers.get("content-type", "")
        if content_type and "html" not in content_type and "xml" not in content_type:
            return Outcome.empty(f"not-html: {content_type}")

        text = extract_article_text(response.text, self.max_chars)
        if not text:
            return Outcome.empty("empty-page")
        return Outcome.success(text)

    async def fetch_all(self, items: List[DiscoveredItem]) -> List[DiscoveredItem]:
        """Return items with page text merged in (same order; failures keep text="")."""
        if not items:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent)
        client = self._client or create_article_client()

        async def fetch_with_limit(item: DiscoveredItem) -> Outcome[str]:
            async with semaphore:
                return await self.fetch(item.url, client)

        try:
            outcomes = await asyncio.gather(*(fetch_with_limit(item) for item in items))
        finally:
            if self._client is None:
                await client.aclose()

        fetched = [item.with_text(outcome.unwrap_or("")) for item, outcome in zip(items, outcomes)]
        success_count = sum(1 for outcome in outcomes if outcome.ok)
        logger.info(
            f"Article fetch: {success_count} with page text, "
            f"{len(items) - success_count} headline-only (still processed)"
        )
        return fetched
