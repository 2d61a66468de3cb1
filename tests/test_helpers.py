"""
Shared test helpers: record/item builders and fake collaborators.

This module can be explicitly imported by test files.
For pytest fixtures, see conftest.py.

Usage:
    from tests.test_helpers import make_item, make_record, FakeCompletionProvider
"""

import json
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from invest_radar.analyst.schemas import InvestmentRecord
from invest_radar.common.outcome import Outcome
from invest_radar.harvester.base_scraper import DiscoveredItem, DiscoveryProvider


# =============================================================================
# Builders
# =============================================================================
def make_item(
    title: str,
    url: str = "https://economictimes.indiatimes.com/news/story-1",
    states: Iterable[str] = ("Gujarat",),
    text: str = "",
    source: Optional[str] = "economictimes.indiatimes.com",
    iso_date: Optional[str] = "2025-01-10",
) -> DiscoveredItem:
    return DiscoveredItem(
        title=title,
        url=url,
        published_at=iso_date,
        iso_date=iso_date,
        source=source,
        tagged_states=tuple(states),
        text=text,
    )


def make_record(**fields) -> InvestmentRecord:
    defaults = {
        "source_url": "https://economictimes.indiatimes.com/news/story-1",
        "source_name": "economictimes.indiatimes.com",
        "announcement_date": "2025-01-10",
    }
    defaults.update(fields)
    return InvestmentRecord(**defaults)


def llm_json(*elements: dict) -> str:
    """Completion text the way Claude tends to return it (fenced JSON)."""
    return f"Here is the extraction:\n```json\n{json.dumps(list(elements))}\n```"


# =============================================================================
# Fake collaborators
# =============================================================================
CompletionHandler = Callable[[str, int], Union[str, Outcome]]


class FakeCompletionProvider:
    """
    CompletionProvider fake.

    `responses` is either a list consumed call by call, or a handler
    called with (prompt, call_number). Strings become successful outcomes.
    """

    def __init__(self, responses: Union[Sequence[Union[str, Outcome]], CompletionHandler]):
        self._responses = responses
        self.prompts: List[str] = []

    async def complete(self, prompt: str, temperature: float = 0.0) -> Outcome[str]:
        call_number = len(self.prompts)
        self.prompts.append(prompt)
        if callable(self._responses):
            response = self._responses(prompt, call_number)
        else:
            response = self._responses[min(call_number, len(self._responses) - 1)]
        if isinstance(response, Outcome):
            return response
        return Outcome.success(response)


class FakeDiscoveryProvider(DiscoveryProvider):
    def __init__(self, items: Sequence[DiscoveredItem], name: str = "fake"):
        self.items = list(items)
        self.name = name
        self.calls = 0

    async def discover(self, states, max_records, window):
        self.calls += 1
        return list(self.items)


class FailingDiscoveryProvider(DiscoveryProvider):
    name = "broken"

    async def discover(self, states, max_records, window):
        raise RuntimeError("feed exploded")


class FakeFetcher:
    """ArticleFetcher stand-in: page text looked up by URL."""

    def __init__(self, texts: Optional[Dict[str, str]] = None):
        self.texts = texts or {}

    async def fetch_all(self, items: List[DiscoveredItem]) -> List[DiscoveredItem]:
        return [item.with_text(self.texts.get(item.url, item.text)) for item in items]


class FakeEmbeddingProvider:
    """Embeddings chosen by a function of the input text."""

    def __init__(self, embed_fn: Callable[[str], List[float]], fail: bool = False):
        self.embed_fn = embed_fn
        self.fail = fail
        self.calls = 0

    async def embed(self, texts: List[str]) -> Outcome[List[List[float]]]:
        self.calls += 1
        if self.fail:
            return Outcome.empty("embedding-error: APIConnectionError")
        return Outcome.success([self.embed_fn(t) for t in texts])
