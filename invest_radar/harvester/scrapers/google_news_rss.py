"""
Google News RSS discovery (India locale).

One broad keyword query per state; the relevance classifier filters noise
later, so discovery stays deliberately wide.

RSS Format:
https://news.google.com/rss/search?q=(investment OR ...) "Gujarat" when:30d&hl=en-IN&gl=IN&ceid=IN:en
"""

import asyncio
import feedparser
import httpx
import logging
import re
from typing import List, Optional
from urllib.parse import urlencode

from ..base_scraper import (
    DiscoveryProvider,
    DiscoveredItem,
    merge_discovered,
    parse_iso_date,
    window_days,
)
from ...common.http_client import create_discovery_client
from ...common.outcome import Outcome
from ...common.url_utils import clean_host, resolve_source_domain, unwrap_redirect

logger = logging.getLogger(__name__)

QUERY_KEYWORDS = (
    '(investment OR invest OR FDI OR capex OR "crore" OR "Rs" OR plant OR factory OR unit OR '
    'manufacturing OR greenfield OR brownfield OR expansion OR MoU OR "memorandum of understanding" OR '
    '"industrial park" OR "data centre" OR "data center" OR SEZ OR cluster OR corridor)'
)

# Optional headline filter (off by default to avoid empty discovery)
STRICT_NEGATIVE = re.compile(r"\b(election|cabinet reshuffle|politics|minister oath|campaign)\b", re.IGNORECASE)
STRICT_POSITIVE = re.compile(
    r"\b(invest\w*|fdi|capex|crore|plant|factory|unit|manufactur\w*|greenfield|brownfield|expansion|mou|"
    r"memorandum|industrial park|data cent(?:re|er)|sez|cluster|corridor)\b",
    re.IGNORECASE,
)


def likely_investment_title(title: str) -> bool:
    if STRICT_NEGATIVE.search(title):
        return False
    return STRICT_POSITIVE.search(title) is not None


def per_state_cap(max_records: int) -> int:
    return max(15, min(25, max_records // 2))


class GoogleNewsRSSProvider(DiscoveryProvider):
    """Discovery via Google News RSS search feeds."""

    name = "gnews"

    def __init__(self, strict_titles: bool = False, client: Optional[httpx.AsyncClient] = None):
        self.strict_titles = strict_titles
        self._client = client

    def build_feed_url(self, state: str, window: str) -> str:
        """Build Google News RSS URL for a state query."""
        params = {
            "q": f'{QUERY_KEYWORDS} "{state}" when:{window_days(window)}d',
            "hl": "en-IN",
            "gl": "IN",
            "ceid": "IN:en",
        }
        return f"https://news.google.com/rss/search?{urlencode(params)}"

    async def fetch_feed(self, client: httpx.AsyncClient, state: str, window: str) -> Outcome[str]:
        feed_url = self.build_feed_url(state, window)
        try:
            response = await client.get(feed_url)
        except httpx.HTTPError as e:
            logger.warning(f"HTTP error fetching Google News for '{state}': {e}")
            return Outcome.empty(f"http-error: {e}")
        if response.status_code != 200:
            logger.warning(f"HTTP {response.status_code} fetching Google News feed for '{state}'")
            return Outcome.empty(f"http-{response.status_code}")
        return Outcome.success(response.text)

    def parse_feed(self, xml: str, state: str, cap: int) -> List[DiscoveredItem]:
        feed = feedparser.parse(xml)

        if feed.bozo and not feed.entries:
            logger.warning(f"Malformed Google News feed for '{state}': {feed.bozo_exception}")
            return []

        items = []
        for entry in feed.entries:
            link = entry.get("link", "")
            title = (entry.get("title", "") or "").strip()
            if not link or not title:
                continue
            if self.strict_titles and not likely_investment_title(title):
                continue

            url = unwrap_redirect(link)
            source_entry = entry.get("source", {}) or {}
            publisher = source_entry.get("title") if hasattr(source_entry, "get") else None
            publisher_href = source_entry.get("href") if hasattr(source_entry, "get") else None
            published = entry.get("published")

            items.append(DiscoveredItem(
                title=title,
                url=url,
                published_at=published,
                iso_date=parse_iso_date(published),
                source=resolve_source_domain(url, publisher_href or publisher) or clean_host(url),
                tagged_states=(state,),
            ))
            if len(items) >= cap:
                break
        return items

    async def discover(self, states: List[str], max_records: int, window: str) -> List[DiscoveredItem]:
        cap = per_state_cap(max_records)
        logger.info(f"[gnews] Processing {len(states)} states with per_state_cap={cap}")

        client = self._client or create_discovery_client()
        try:
            outcomes = await asyncio.gather(*(self.fetch_feed(client, s, window) for s in states))
        finally:
            if self._client is None:
                await client.aclose()

        items: List[DiscoveredItem] = []
        for state, outcome in zip(states, outcomes):
            if not outcome.ok:
                continue
            parsed = self.parse_feed(outcome.value, state, cap)
            logger.info(f"[gnews] State {state}: kept={len(parsed)}")
            items.extend(parsed)

        return merge_discovered(items)
