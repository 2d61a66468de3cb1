from .base_scraper import DiscoveryProvider, DiscoveredItem, merge_discovered
from .scrapers.google_news_rss import GoogleNewsRSSProvider
from .scrapers.gdelt import GdeltProvider
from .article_fetcher import ArticleFetcher
from .orchestrator import DiscoveryResult, discover_all, providers_for_source

__all__ = [
    "DiscoveryProvider",
    "DiscoveredItem",
    "merge_discovered",
    "GoogleNewsRSSProvider",
    "GdeltProvider",
    "ArticleFetcher",
    "DiscoveryResult",
    "discover_all",
    "providers_for_source",
]
