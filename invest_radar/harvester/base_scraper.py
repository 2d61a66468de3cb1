"""
Base Scraper - Abstract interface for discovery providers.

Every provider implements one operation:
- discover(states, max_records, window) -> list[DiscoveredItem]

Providers never raise on upstream failures; a broken feed or API yields an
empty (or partial) list and a log line. Duplicate URLs across states are
allowed here and merged later by the orchestrator.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Comment
from dateutil import parser as date_parser

from ..common.url_utils import normalize_url

logger = logging.getLogger(__name__)

WINDOW_PATTERN = re.compile(r"^\s*(\d+)\s*d\s*$", re.IGNORECASE)
DEFAULT_WINDOW_DAYS = 30
MAX_WINDOW_DAYS = 90


@dataclass(frozen=True)
class DiscoveredItem:
    """One candidate article. Immutable: use with_text()/with_states() to derive copies."""
    title: str
    url: str
    published_at: Optional[str] = None
    iso_date: Optional[str] = None  # YYYY-MM-DD
    source: Optional[str] = None  # Domain or publisher name
    tagged_states: tuple[str, ...] = field(default_factory=tuple)
    text: str = ""  # Page text ("" until fetched, or when the fetch failed)

    @property
    def full_text(self) -> str:
        """Title and body, the text every attestation check runs against."""
        return f"{self.title or ''} {self.text or ''}".strip()

    def with_text(self, text: str) -> "DiscoveredItem":
        return replace(self, text=text or "")

    def with_states(self, states: Iterable[str]) -> "DiscoveredItem":
        merged = list(self.tagged_states)
        for state in states:
            if state and state not in merged:
                merged.append(state)
        return replace(self, tagged_states=tuple(merged))


class DiscoveryProvider(ABC):
    """
    Abstract base class for news discovery providers.

    Subclasses must implement:
    - discover(): Query the upstream source once per state
    """

    name: str = "base"

    @abstractmethod
    async def discover(self, states: List[str], max_records: int, window: str) -> List[DiscoveredItem]:
        """
        Discover candidate articles for the given states.

        Args:
            states: State names to query (each result is tagged with its state)
            max_records: Overall record budget for the request
            window: Lookback window such as "30d"

        Returns:
            List of DiscoveredItem (possibly empty, never raises on upstream errors)
        """
        pass


def window_days(window: Optional[str]) -> int:
    """Parse "30d" style windows, clamped to 1..90 days."""
    match = WINDOW_PATTERN.match(window or "")
    if not match:
        return DEFAULT_WINDOW_DAYS
    return max(1, min(MAX_WINDOW_DAYS, int(match.group(1))))


def parse_iso_date(value: Optional[str]) -> Optional[str]:
    """Attempt to parse various date formats into YYYY-MM-DD."""
    if not value:
        return None
    compact = re.match(r"^(\d{4})(\d{2})(\d{2})(?:T?\d{6}Z?)?$", value.strip())
    try:
        if compact:
            return date(int(compact.group(1)), int(compact.group(2)), int(compact.group(3))).isoformat()
        return date_parser.parse(value).date().isoformat()
    except (ValueError, TypeError, OverflowError):
        return None


def html_to_text(html: str) -> str:
    """Extract clean, single-spaced text from HTML."""
    soup = BeautifulSoup(html, "lxml")

    # Remove script and style elements
    for element in soup(["script", "style", "noscript", "iframe", "svg"]):
        element.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    text = soup.get_text(separator=" ", strip=True)
    return re.sub(r"\s+", " ", text).strip()


def merge_discovered(*batches: Iterable[DiscoveredItem]) -> List[DiscoveredItem]:
    """
    Union discovery results by normalized URL.

    The first-seen item for a URL is kept; tagged states from later duplicates
    are unioned into it in first-seen order.
    """
    by_key: dict[str, DiscoveredItem] = {}
    for batch in batches:
        for item in batch:
            if not item.url:
                continue
            key = normalize_url(item.url)
            existing = by_key.get(key)
            by_key[key] = existing.with_states(item.tagged_states) if existing else item
    return list(by_key.values())
