"""
httpx clients for discovery feeds and publisher pages.

Discovery (Google News RSS, GDELT JSON) sends a bot User-Agent; article
fetches send a desktop browser User-Agent with Indian English preferred.
"""

import httpx
from typing import Optional

from ..config.settings import settings


DISCOVERY_USER_AGENT = "InvestRadar/1.0 (India Investment News Monitor)"

ARTICLE_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

FEED_ACCEPT = "application/rss+xml, application/json, text/xml;q=0.9, */*;q=0.8"
ARTICLE_ACCEPT_LANGUAGE = "en-IN,en;q=0.9"


def build_client(
    user_agent: str,
    timeout: float,
    headers: Optional[dict] = None,
    pool_size: int = 20,
) -> httpx.AsyncClient:
    """Redirect-following AsyncClient; keepalive pool is half of pool_size."""
    merged = {"User-Agent": user_agent, **(headers or {})}
    return httpx.AsyncClient(
        timeout=timeout,
        headers=merged,
        limits=httpx.Limits(max_connections=pool_size, max_keepalive_connections=max(1, pool_size // 2)),
        follow_redirects=True,
    )


def create_discovery_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    """Client for RSS/JSON discovery endpoints."""
    return build_client(
        DISCOVERY_USER_AGENT,
        timeout or settings.request_timeout,
        headers={"Accept": FEED_ACCEPT},
    )


def create_article_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    # Pool is twice the article fetch concurrency
    return build_client(
        ARTICLE_USER_AGENT,
        timeout or settings.article_fetch_timeout,
        headers={"Accept-Language": ARTICLE_ACCEPT_LANGUAGE},
        pool_size=settings.max_concurrent_articles * 2,
    )
