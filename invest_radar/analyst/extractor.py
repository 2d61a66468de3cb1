"""
Investment Record Extractor - LLM extraction with text verification.

Uses Claude for batched structured extraction of investment announcements.
One prompt carries up to `extraction_batch_size` articles and asks for a JSON
array with one element per article, in order.

Nothing the model returns is trusted as-is:
- Responses are parsed into lenient ExtractedRecord slots (never raises)
- Every claimed field is checked against the article text and nulled when
  the text does not support it (verify_extracted)
- Batches that fail (API error, unparseable output) are retried once after a
  fixed delay; batches still failing are reported so the caller can fall
  back to regex heuristics for exactly those articles

Usage:
    provider = AnthropicCompletionProvider()
    extractor = LLMExtractor(provider)
    run = await extractor.extract_all(items)
    for item, slot in zip(items, run.slots):
        ...
"""

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

import httpx
from anthropic import AsyncAnthropic, APIError, APITimeoutError, RateLimitError
from pydantic import ValidationError

from ..common.errors import MissingCredentialError
from ..common.outcome import Outcome
from ..config.sectors import SECTOR_EVIDENCE_RULES
from ..config.settings import settings
from ..harvester.base_scraper import DiscoveredItem
from .amounts import amount_is_attested
from .geo import StateMatcher, default_matcher
from .schemas import ExtractedRecord, ProjectStatus, ProjectType

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a precise, non-hallucinating information extraction engine."

_PROJECT_TYPE_CHOICES = ",".join(f'"{t.value}"' for t in ProjectType)
_STATUS_CHOICES = ",".join(f'"{s.value}"' for s in ProjectStatus)

EXTRACTION_INSTRUCTIONS = f"""You are an information extraction system for Indian investment news.
Extract ONLY when facts are explicit in the article/title. If unsure, set the field to null.

CRITICAL ANTI-HALLUCINATION RULES:
- Company: MUST appear verbatim in the article/title as the primary investor.
  Do NOT infer companies from context. If no specific company is named, set company=null.
- State: MUST be explicitly mentioned as the project location.
  Do NOT assume the state from the target state given for the article.
- Amount: MUST be explicitly written with numbers in the article (₹X crore, X lakh crore, ...).
  Convert to crore: 1 lakh crore = 100000 crore, 100 lakh = 1 crore. Never make up numbers.
- Sector: MUST be clearly indicated in the text. Do NOT infer it from the company name.
- VERIFICATION: Before extracting any field, verify it exists in the article text.
  If you cannot find explicit evidence in the text, set the field to null.

FIELD RULES:
- project_type: one of [{_PROJECT_TYPE_CHOICES}]
- status: one of [{_STATUS_CHOICES}]
- announcement_date: YYYY-MM-DD if explicit; else null
- If the article is mainly policy/grants with no specific investable project, return null for unclear fields

OUTPUT SHAPE (a JSON array with exactly one object per article, in article order):
[
  {{
    "company": string|null,
    "sector": string|null,
    "amount_in_inr_crore": number|null,
    "jobs": number|null,
    "state": string|null,
    "district": string|null,
    "project_type": string|null,
    "status": string|null,
    "announcement_date": "YYYY-MM-DD"|null,
    "source_url": string,
    "source_name": string|null
  }}, ...
]
Return ONLY the JSON array."""

JSON_FENCE_PATTERN = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)


# =============================================================================
# Prompt building
# =============================================================================

def _format_article(index: int, item: DiscoveredItem, max_chars: int) -> str:
    target_state = item.tagged_states[0] if item.tagged_states else "unknown"
    return (
        f"### ARTICLE {index}\n"
        f"URL: {item.url}\n"
        f"STATE (target): {target_state}\n"
        f"TITLE: {item.title}\n"
        f"TEXT:\n{(item.text or '')[:max_chars]}"
    )


def build_extraction_prompt(articles: Sequence[DiscoveredItem], max_chars: Optional[int] = None) -> str:
    """One prompt for the whole batch; each article's text truncated to max_chars."""
    max_chars = max_chars or settings.article_prompt_chars
    blocks = "\n\n".join(_format_article(i + 1, item, max_chars) for i, item in enumerate(articles))
    return f"{EXTRACTION_INSTRUCTIONS}\n\nARTICLES ({len(articles)}):\n{blocks}\n"


def build_prompt_preview(articles: Sequence[DiscoveredItem], max_chars: Optional[int] = None) -> str:
    """Prompt as it would be sent, capped for the debug response."""
    return build_extraction_prompt(articles)[: max_chars or settings.prompt_preview_chars]


# =============================================================================
# Completion providers
# =============================================================================

class CompletionProvider(Protocol):
    """Anything that turns a prompt into completion text."""

    async def complete(self, prompt: str, temperature: float = 0.0) -> Outcome[str]:
        ...


class AnthropicCompletionProvider:
    """Claude messages API behind the CompletionProvider protocol."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        client: Optional[AsyncAnthropic] = None,
    ):
        key = api_key if api_key is not None else settings.anthropic_api_key
        if client is None and not key:
            raise MissingCredentialError("ANTHROPIC_API_KEY")
        self.model = model or settings.llm_model
        self.max_tokens = max_tokens or settings.llm_max_tokens
        # Timeout configured at client level for reliable timeout handling
        self._client = client or AsyncAnthropic(
            api_key=key,
            timeout=httpx.Timeout(settings.llm_timeout, connect=settings.llm_connect_timeout),
            max_retries=0,
        )

    async def complete(self, prompt: str, temperature: float = 0.0) -> Outcome[str]:
        try:
            message = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=temperature,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except APITimeoutError as e:
            logger.warning(f"Claude API timeout (prompt_len={len(prompt)}): {e}")
            return Outcome.empty("llm-timeout")
        except RateLimitError as e:
            logger.warning(f"Claude API rate limit: {e}")
            return Outcome.empty("llm-rate-limited")
        except APIError as e:
            logger.error(f"Claude API error: {e}")
            return Outcome.empty(f"llm-api-error: {type(e).__name__}")

        text = "".join(
            getattr(block, "text", "") for block in message.content if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            return Outcome.empty("llm-empty-completion")
        return Outcome.success(text)


# =============================================================================
# Response parsing & verification
# =============================================================================

def pick_json(text: Optional[str]) -> Optional[str]:
    """Fenced ```json block, else the span from the first '[' to the last ']'."""
    if not text:
        return None
    fence = JSON_FENCE_PATTERN.search(text)
    if fence and fence.group(1).strip():
        return fence.group(1).strip()
    first = text.find("[")
    last = text.rfind("]")
    if first >= 0 and last > first:
        return text[first:last + 1].strip()
    return None


def parse_extraction_response(
    text: Optional[str],
    articles: Sequence[DiscoveredItem],
) -> Outcome[List[Optional[ExtractedRecord]]]:
    """
    Parse a batch completion into one slot per input article.

    Slot i belongs to article i and has its source_url forced to that
    article's URL. Missing or malformed elements become None slots; an
    unparseable response is an empty Outcome. Never raises.
    """
    raw = pick_json(text) or (text or "")
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"LLM response is not valid JSON ({e}); first 200 chars: {raw[:200]!r}")
        return Outcome.empty("unparseable-json")

    if isinstance(parsed, dict):
        # Single-article batches sometimes come back as a bare object
        parsed = [parsed]
    if not isinstance(parsed, list):
        return Outcome.empty(f"unexpected-json-type: {type(parsed).__name__}")

    if len(parsed) != len(articles):
        logger.warning(f"LLM returned {len(parsed)} elements for {len(articles)} articles")

    slots: List[Optional[ExtractedRecord]] = []
    for i, article in enumerate(articles):
        element = parsed[i] if i < len(parsed) else None
        if not isinstance(element, dict):
            slots.append(None)
            continue
        data = dict(element)
        data["source_url"] = article.url
        try:
            slots.append(ExtractedRecord.model_validate(data))
        except ValidationError as e:
            logger.warning(f"Dropping malformed extraction for {article.url}: {e.error_count()} errors")
            slots.append(None)
    return Outcome.success(slots)


def _number_appears(value: int, text: str) -> bool:
    digits = text.replace(",", "")
    return re.search(rf"(?<![\d.]){value}(?![\d])", digits) is not None


def verify_extracted(
    record: ExtractedRecord,
    title: Optional[str],
    text: Optional[str],
    matcher: StateMatcher = default_matcher,
) -> ExtractedRecord:
    """Null every field the article text does not attest."""
    full_text = f"{title or ''} {text or ''}"
    lowered = full_text.lower()
    nulls: dict = {}
    notes: list[str] = []

    if record.company and record.company.lower() not in lowered:
        nulls["company"] = None
        notes.append(f"company '{record.company}' not in text")
    if record.state and not matcher.state_is_attested(record.state, full_text):
        nulls["state"] = None
        notes.append(f"state '{record.state}' not in text")
    if record.sector and not SECTOR_EVIDENCE_RULES.matches(record.sector, full_text):
        nulls["sector"] = None
        notes.append(f"sector '{record.sector}' not supported by keywords")
    if record.district and record.district.lower() not in lowered:
        nulls["district"] = None
        notes.append(f"district '{record.district}' not in text")
    if record.amount_in_inr_crore is not None and not amount_is_attested(record.amount_in_inr_crore, full_text):
        nulls["amount_in_inr_crore"] = None
        notes.append(f"amount {record.amount_in_inr_crore} not in text")
    if record.jobs is not None and not _number_appears(record.jobs, full_text):
        nulls["jobs"] = None
        notes.append(f"jobs {record.jobs} not in text")

    if not nulls:
        return record
    logger.info(f"[VERIFY] {record.source_url}: " + "; ".join(notes))
    return record.model_copy(update=nulls)


# =============================================================================
# Batched extraction
# =============================================================================

@dataclass
class ExtractionRun:
    """Per-article extraction slots plus the articles whose batch failed."""

    slots: List[Optional[ExtractedRecord]] = field(default_factory=list)
    failed_indices: List[int] = field(default_factory=list)
    batches_total: int = 0
    batches_failed: int = 0

    @property
    def extracted_count(self) -> int:
        return sum(1 for slot in self.slots if slot is not None)


class LLMExtractor:
    """Batch extractor over any CompletionProvider."""

    def __init__(
        self,
        provider: CompletionProvider,
        batch_size: Optional[int] = None,
        retry_delay: Optional[float] = None,
        temperature: Optional[float] = None,
        prompt_chars: Optional[int] = None,
        matcher: StateMatcher = default_matcher,
    ):
        self.provider = provider
        self.batch_size = max(1, batch_size or settings.extraction_batch_size)
        self.retry_delay = settings.extraction_retry_delay if retry_delay is None else retry_delay
        self.temperature = settings.llm_temperature if temperature is None else temperature
        self.prompt_chars = prompt_chars or settings.article_prompt_chars
        self.matcher = matcher

    async def extract_batch(self, batch: Sequence[DiscoveredItem]) -> Outcome[List[Optional[ExtractedRecord]]]:
        prompt = build_extraction_prompt(batch, self.prompt_chars)
        completion = await self.provider.complete(prompt, temperature=self.temperature)
        if not completion.ok:
            return Outcome.empty(completion.reason)
        return parse_extraction_response(completion.value, batch)

    async def _run_batches(self, batches: Sequence[Sequence[DiscoveredItem]]) -> list[Outcome]:
        results = await asyncio.gather(*(self.extract_batch(b) for b in batches), return_exceptions=True)
        outcomes = []
        for batch, result in zip(batches, results):
            if isinstance(result, Exception):
                logger.error(f"Extraction batch of {len(batch)} raised {type(result).__name__}: {result}")
                outcomes.append(Outcome.empty(f"exception: {type(result).__name__}"))
            else:
                outcomes.append(result)
        return outcomes

    async def extract_all(self, articles: Sequence[DiscoveredItem]) -> ExtractionRun:
        """
        Extract every article in batches, concurrently.

        Returns:
            ExtractionRun whose slots line up with `articles`; failed_indices
            lists articles whose batch failed on both attempts.
        """
        articles = list(articles)
        n = self.batch_size
        batches = [articles[i:i + n] for i in range(0, len(articles), n)]
        if not batches:
            return ExtractionRun()

        outcomes = await self._run_batches(batches)

        failed = [i for i, outcome in enumerate(outcomes) if not outcome.ok]
        if failed:
            logger.warning(
                f"{len(failed)}/{len(batches)} extraction batches failed "
                f"({', '.join(sorted({outcomes[i].reason for i in failed}))}); "
                f"retrying once in {self.retry_delay}s"
            )
            await asyncio.sleep(self.retry_delay)
            retried = await self._run_batches([batches[i] for i in failed])
            for i, outcome in zip(failed, retried):
                outcomes[i] = outcome

        run = ExtractionRun(batches_total=len(batches))
        for b, (batch, outcome) in enumerate(zip(batches, outcomes)):
            start = b * n
            if not outcome.ok:
                run.batches_failed += 1
                run.slots.extend([None] * len(batch))
                run.failed_indices.extend(range(start, start + len(batch)))
                continue
            for article, slot in zip(batch, outcome.value):
                run.slots.append(
                    verify_extracted(slot, article.title, article.text, self.matcher) if slot else None
                )

        if run.batches_failed:
            logger.warning(
                f"{run.batches_failed} extraction batches failed after retry; "
                f"{len(run.failed_indices)} articles fall back to heuristics"
            )
        return run
