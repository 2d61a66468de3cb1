"""News discovery provider implementations."""

from .google_news_rss import GoogleNewsRSSProvider
from .gdelt import GdeltProvider

__all__ = [
    "GoogleNewsRSSProvider",
    "GdeltProvider",
]
