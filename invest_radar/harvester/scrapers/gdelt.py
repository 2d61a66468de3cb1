"""
GDELT DOC 2.0 API discovery.

Queried once per state with sourceCountry:IN. GDELT answers malformed or
rate-limited queries with a plain-text message instead of JSON; those are
logged and treated as "no articles" for that state.
"""

import asyncio
import json
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
from ...common.url_utils import resolve_source_domain
from ...config.settings import settings

logger = logging.getLogger(__name__)

GDELT_DOC_API = "https://api.gdeltproject.org/api/v2/doc/doc"

# GDELT only allows parentheses around OR'd terms
OR_BLOCK = (
    '("investment" OR invest OR FDI OR capex OR crore OR cr OR plant OR factory OR unit OR '
    "manufacturing OR greenfield OR brownfield OR expansion)"
)

# Headline must look investment-related to be kept
POSITIVE_TITLE = re.compile(
    r"(invest|investment|fdi|capex|crore|cr|plant|factory|unit|manufactur|facility|park|sez|industrial|"
    r"cluster|greenfield|brownfield|expansion|commissioned|jobs|employment|semiconductor|chip|pcb|ev|"
    r"battery|steel|cement|refinery|petrochem|chemical|textile|pharma|biotech|solar|module|ingot|wafer)",
    re.IGNORECASE,
)
# Political/education headlines dropped early
NEGATIVE_TITLE = re.compile(
    r"(cabinet expansion|cabinet reshuffle|election|polls|politics|minister sworn|unesco|ncert|school|"
    r"teacher education|curriculum|students|festival|religion)",
    re.IGNORECASE,
)


class GdeltProvider(DiscoveryProvider):
    """Discovery via the GDELT document search API."""

    name = "gdelt"

    def __init__(self, max_records_cap: Optional[int] = None, client: Optional[httpx.AsyncClient] = None):
        self.max_records_cap = max_records_cap or settings.gdelt_max_records
        self._client = client

    def build_url(self, state: str, max_records: int, window: str) -> str:
        query = f'{OR_BLOCK} AND "{state}" AND sourceCountry:IN'
        params = {
            "query": query,
            "timespan": f"{window_days(window)}d",
            "maxrecords": min(max_records, self.max_records_cap),
            "format": "json",
        }
        return f"{GDELT_DOC_API}?{urlencode(params)}"

    async def fetch_state(self, client: httpx.AsyncClient, state: str, max_records: int, window: str) -> Outcome[dict]:
        url = self.build_url(state, max_records, window)
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"HTTP error fetching GDELT for '{state}': {e}")
            return Outcome.empty(f"http-error: {e}")
        if response.status_code != 200:
            logger.warning(f"HTTP {response.status_code} fetching GDELT for '{state}'")
            return Outcome.empty(f"http-{response.status_code}")
        try:
            return Outcome.success(json.loads(response.text))
        except json.JSONDecodeError:
            note = (response.text or "")[:300]
            logger.warning(f"GDELT_ERROR for '{state}': {note}")
            return Outcome.empty(f"gdelt-text-error: {note}")

    def parse_articles(self, payload: dict, state: str) -> List[DiscoveredItem]:
        if not isinstance(payload, dict):
            return []
        docs = payload.get("articles") or payload.get("docs") or []
        items = []
        for doc in docs:
            if not isinstance(doc, dict):
                continue
            url = doc.get("url") or doc.get("urlArticle") or doc.get("sourceUrl") or ""
            title = (doc.get("title") or "").strip()
            if not url or not title:
                continue
            if NEGATIVE_TITLE.search(title) or not POSITIVE_TITLE.search(title):
                continue
            seen = doc.get("seendate") or doc.get("publishtime") or doc.get("publishedAt")
            items.append(DiscoveredItem(
                title=title,
                url=url,
                published_at=seen,
                iso_date=parse_iso_date(seen),
                source=resolve_source_domain(url, doc.get("domain") or doc.get("sourceDomain")),
                tagged_states=(state,),
            ))
        return items

    async def discover(self, states: List[str], max_records: int, window: str) -> List[DiscoveredItem]:
        client = self._client or create_discovery_client()
        try:
            outcomes = await asyncio.gather(
                *(self.fetch_state(client, s, max_records, window) for s in states)
            )
        finally:
            if self._client is None:
                await client.aclose()

        items: List[DiscoveredItem] = []
        for state, outcome in zip(states, outcomes):
            if outcome.ok:
                parsed = self.parse_articles(outcome.value, state)
                logger.info(f"[gdelt] State {state}: kept={len(parsed)}")
                items.extend(parsed)

        return merge_discovered(items)[:max_records]
