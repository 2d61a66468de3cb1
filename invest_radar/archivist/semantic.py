"""
Optional semantic dedupe pass (embedding similarity).

Catches reports of the same deal that the structural passes miss: different
URLs, different headline wording, amount written differently. Each record is
embedded from its title and key fields; pairs at or above the cosine
threshold merge. The winner keeps its values and back-fills its null fields
from the record it absorbs.

If embeddings cannot be fetched, the pass is skipped and records are
returned unchanged.
"""

import asyncio
import logging
from typing import List, Mapping, Optional, Protocol, Sequence

from openai import AsyncOpenAI, APIError

from ..analyst.schemas import CONTENT_FIELDS, InvestmentRecord, evolve
from ..common.errors import MissingCredentialError
from ..common.outcome import Outcome
from ..common.url_utils import normalize_url
from ..config.settings import settings

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    async def embed(self, texts: List[str]) -> Outcome[List[List[float]]]:
        ...


class OpenAIEmbeddingProvider:
    """OpenAI embeddings API, requests split into batches."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        batch_size: Optional[int] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        key = api_key if api_key is not None else settings.openai_api_key
        if client is None and not key:
            raise MissingCredentialError("OPENAI_API_KEY")
        self._client = client or AsyncOpenAI(api_key=key, timeout=settings.request_timeout)
        self.model = model or settings.embedding_model
        self.batch_size = max(1, batch_size or settings.embedding_batch_size)

    async def _embed_batch(self, texts: List[str]) -> List[List[float]]:
        response = await self._client.embeddings.create(model=self.model, input=texts)
        return [item.embedding for item in response.data]

    async def embed(self, texts: List[str]) -> Outcome[List[List[float]]]:
        if not texts:
            return Outcome.success([])
        batches = [texts[i:i + self.batch_size] for i in range(0, len(texts), self.batch_size)]
        try:
            results = await asyncio.gather(*(self._embed_batch(b) for b in batches))
        except APIError as e:
            logger.warning(f"Embedding request failed: {type(e).__name__}: {e}")
            return Outcome.empty(f"embedding-error: {type(e).__name__}")
        return Outcome.success([vector for batch in results for vector in batch])


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute cosine similarity between two vectors."""
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = sum(x * x for x in a) ** 0.5
    norm_b = sum(x * x for x in b) ** 0.5
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


def record_fingerprint(record: InvestmentRecord, title: str = "") -> str:
    """Text embedded for a record: headline plus the fields that identify a deal."""
    parts = [
        title,
        record.company or "",
        record.sector or "",
        record.state or "",
        f"{record.amount_in_inr_crore:g} crore" if record.amount_in_inr_crore else "",
    ]
    return " | ".join(p for p in parts if p)


def _semantic_winner(a: InvestmentRecord, b: InvestmentRecord) -> InvestmentRecord:
    """Larger amount -> has company -> has source name -> a."""
    aa = a.amount_in_inr_crore or 0.0
    ab = b.amount_in_inr_crore or 0.0
    if aa != ab:
        return a if aa > ab else b
    if (a.company is None) != (b.company is None):
        return a if a.company else b
    if (a.source_name is None) != (b.source_name is None):
        return a if a.source_name else b
    return a


def _backfill(winner: InvestmentRecord, loser: InvestmentRecord) -> InvestmentRecord:
    fills = {
        name: getattr(loser, name)
        for name in CONTENT_FIELDS
        if getattr(winner, name) is None and getattr(loser, name) is not None
    }
    if not fills:
        return winner
    return evolve(winner, **fills)


async def semantic_dedupe(
    records: Sequence[InvestmentRecord],
    provider: EmbeddingProvider,
    threshold: Optional[float] = None,
    titles_by_url: Optional[Mapping[str, str]] = None,
) -> List[InvestmentRecord]:
    """Greedy clustering in input order; each record joins the first cluster it is similar to."""
    records = list(records)
    if len(records) < 2:
        return records
    threshold = settings.semantic_similarity_threshold if threshold is None else threshold
    titles_by_url = titles_by_url or {}

    texts = [record_fingerprint(r, titles_by_url.get(normalize_url(r.source_url), "")) for r in records]
    outcome = await provider.embed(texts)
    if not outcome.ok or len(outcome.value) != len(records):
        logger.warning(f"Semantic dedupe skipped: {outcome.reason or 'embedding count mismatch'}")
        return records
    vectors = outcome.value

    # cluster anchor index -> merged record
    merged: dict[int, InvestmentRecord] = {}
    anchors: List[int] = []
    for i, record in enumerate(records):
        for anchor in anchors:
            if cosine_similarity(vectors[anchor], vectors[i]) >= threshold:
                current = merged[anchor]
                winner = _semantic_winner(current, record)
                loser = record if winner is current else current
                merged[anchor] = _backfill(winner, loser)
                break
        else:
            anchors.append(i)
            merged[i] = record

    result = [merged[a] for a in anchors]
    if len(result) < len(records):
        logger.info(f"Semantic dedupe: {len(records)} -> {len(result)} (threshold={threshold})")
    return result
