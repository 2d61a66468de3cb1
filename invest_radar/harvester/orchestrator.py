"""
Discovery Orchestrator - Runs the configured discovery providers.

Handles:
- Choosing providers from the discovery source ("gnews", "gdelt", "both")
- Running them concurrently and merging results by normalized URL
- Metrics logging per run

A provider that raises is logged and contributes nothing; the other
providers' results are still returned.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from .base_scraper import DiscoveryProvider, DiscoveredItem, merge_discovered
from .scrapers.gdelt import GdeltProvider
from .scrapers.google_news_rss import GoogleNewsRSSProvider

logger = logging.getLogger(__name__)

DISCOVERY_SOURCES = ("gnews", "gdelt", "both")


class DiscoveryResult:
    """Result of a discovery run."""

    def __init__(self, source: str):
        self.source = source
        self.items: List[DiscoveredItem] = []
        self.per_provider: dict[str, int] = {}
        self.errors: List[str] = []
        self.started_at = datetime.now(timezone.utc)
        self.completed_at: Optional[datetime] = None

    def complete(self):
        self.completed_at = datetime.now(timezone.utc)

    @property
    def duration_seconds(self) -> float:
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return 0

    def log_metrics(self):
        """Log discovery metrics."""
        per_provider = " ".join(f"{name}={count}" for name, count in self.per_provider.items())
        logger.info(
            f"METRICS discovery source={self.source} "
            f"{per_provider} "
            f"merged={len(self.items)} "
            f"errors={len(self.errors)} "
            f"duration_sec={self.duration_seconds:.2f}"
        )


def providers_for_source(source: str) -> List[DiscoveryProvider]:
    """Provider instances for a discovery source name (unknown names fall back to gnews)."""
    source = (source or "").strip().lower()
    if source == "gdelt":
        return [GdeltProvider()]
    if source == "both":
        return [GoogleNewsRSSProvider(), GdeltProvider()]
    if source != "gnews":
        logger.warning(f"Unknown discovery source '{source}', using gnews")
    return [GoogleNewsRSSProvider()]


async def discover_all(
    states: List[str],
    max_records: int,
    window: str,
    source: str = "gnews",
    providers: Optional[Sequence[DiscoveryProvider]] = None,
) -> DiscoveryResult:
    """
    Run every provider for the source and merge their items.

    Args:
        states: State names to query
        max_records: Record budget for the request
        window: Lookback window such as "30d"
        source: Discovery source name (ignored when providers are given)
        providers: Explicit providers (tests inject fakes here)
    """
    result = DiscoveryResult(source)
    providers = list(providers) if providers is not None else providers_for_source(source)

    outcomes = await asyncio.gather(
        *(p.discover(states, max_records, window) for p in providers),
        return_exceptions=True,
    )

    batches = []
    for provider, outcome in zip(providers, outcomes):
        if isinstance(outcome, Exception):
            logger.error(f"Discovery provider {provider.name} failed: {type(outcome).__name__}: {outcome}")
            result.errors.append(f"{provider.name}: {outcome}")
            result.per_provider[provider.name] = 0
            continue
        result.per_provider[provider.name] = len(outcome)
        batches.append(outcome)

    result.items = merge_discovered(*batches)
    result.complete()
    result.log_metrics()
    return result
