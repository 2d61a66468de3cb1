"""
Missing-field booster.

After batch extraction and heuristics, some records still lack a company or
an amount. For a capped number of them, one single-article structured call
(Instructor + Claude) asks only for the missing fields. The patch goes
through the same text verification as batch extraction and can only fill
null fields.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
import instructor
from anthropic import AsyncAnthropic, APIError, APITimeoutError, RateLimitError
from instructor.core import InstructorRetryException
from pydantic import BaseModel, Field, field_validator

from ..common.errors import MissingCredentialError
from ..common.outcome import Outcome
from ..config.settings import settings
from ..harvester.base_scraper import DiscoveredItem
from .extractor import verify_extracted
from .geo import StateMatcher, default_matcher
from .schemas import (
    ExtractedRecord,
    InvestmentRecord,
    clean_text,
    coerce_amount,
    coerce_jobs,
    coerce_sector,
    with_note,
)

logger = logging.getLogger(__name__)

BOOST_MAX_TOKENS = 400
BOOSTED_FIELDS = ("company", "amount_in_inr_crore", "jobs", "sector")


class BoostPatch(BaseModel):
    """Fields the booster may fill. Unknown or placeholder values become null."""

    company: Optional[str] = Field(default=None, description="Primary investing company, verbatim from the article")
    amount_in_inr_crore: Optional[float] = Field(default=None, description="Investment amount in INR crore")
    jobs: Optional[int] = Field(default=None, description="Number of jobs explicitly mentioned")
    sector: Optional[str] = Field(default=None, description="Industry sector if clearly stated")

    @field_validator("company", mode="before")
    @classmethod
    def clean_company(cls, v: Any) -> Optional[str]:
        return clean_text(v)

    @field_validator("amount_in_inr_crore", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> Optional[float]:
        return coerce_amount(v)

    @field_validator("jobs", mode="before")
    @classmethod
    def validate_jobs(cls, v: Any) -> Optional[int]:
        return coerce_jobs(v)

    @field_validator("sector", mode="before")
    @classmethod
    def narrow_sector(cls, v: Any) -> Optional[str]:
        return coerce_sector(v)


def build_boost_prompt(item: DiscoveredItem, max_chars: int) -> str:
    return f"""From the article below, fill ONLY the missing fields (company, amount_in_inr_crore, jobs, sector).
Rules:
- If unsure, keep null.
- Do NOT invent numbers or names.
- If amount is like "₹500 crore" => amount_in_inr_crore = 500.
- If in lakh, convert: 100 lakh = 1 crore.

TITLE: {item.title}
URL: {item.url}
TEXT: {(item.text or '')[:max_chars]}"""


def needs_boost(record: InvestmentRecord) -> bool:
    return bool(record.source_url) and (record.company is None or record.amount_in_inr_crore is None)


class MissingFieldBooster:
    """Fills missing company/amount/jobs/sector with capped single-article calls."""

    def __init__(
        self,
        client: Optional[Any] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        cap: Optional[int] = None,
        max_chars: Optional[int] = None,
        matcher: StateMatcher = default_matcher,
    ):
        key = api_key if api_key is not None else settings.anthropic_api_key
        if client is None:
            if not key:
                raise MissingCredentialError("ANTHROPIC_API_KEY")
            client = instructor.from_anthropic(
                AsyncAnthropic(
                    api_key=key,
                    timeout=httpx.Timeout(settings.llm_timeout, connect=settings.llm_connect_timeout),
                )
            )
        self._client = client
        self.model = model or settings.llm_model
        self.cap = settings.booster_cap if cap is None else cap
        self.max_chars = max_chars or settings.article_prompt_chars
        self.matcher = matcher

    async def boost_one(self, item: DiscoveredItem) -> Outcome[BoostPatch]:
        try:
            patch = await self._client.messages.create(
                model=self.model,
                max_tokens=BOOST_MAX_TOKENS,
                temperature=0.0,
                messages=[{"role": "user", "content": build_boost_prompt(item, self.max_chars)}],
                response_model=BoostPatch,
                max_retries=1,
            )
        except InstructorRetryException as e:
            logger.warning(f"Booster validation failed for {item.url}: {e}")
            return Outcome.empty("boost-validation-failed")
        except APITimeoutError:
            logger.warning(f"Booster timeout for {item.url}")
            return Outcome.empty("boost-timeout")
        except RateLimitError:
            logger.warning(f"Booster rate limited for {item.url}")
            return Outcome.empty("boost-rate-limited")
        except APIError as e:
            logger.error(f"Booster API error for {item.url}: {e}")
            return Outcome.empty(f"boost-api-error: {type(e).__name__}")
        return Outcome.success(patch)

    def apply_patch(self, record: InvestmentRecord, patch: BoostPatch, item: DiscoveredItem) -> InvestmentRecord:
        """Verify the patch against the article, then fill null fields only."""
        candidate = ExtractedRecord(source_url=record.source_url, **patch.model_dump())
        verified = verify_extracted(candidate, item.title, item.text, self.matcher)
        fills = {
            name: getattr(verified, name)
            for name in BOOSTED_FIELDS
            if getattr(record, name) is None and getattr(verified, name) is not None
        }
        if not fills:
            return record
        return with_note(record, f"Boosted: {', '.join(sorted(fills))}", **fills)

    async def boost(
        self,
        records: Sequence[InvestmentRecord],
        items_by_url: Dict[str, DiscoveredItem],
    ) -> List[InvestmentRecord]:
        """Return records in the same order, up to `cap` of them patched."""
        records = list(records)
        targets = [
            i for i, record in enumerate(records)
            if needs_boost(record) and record.source_url in items_by_url
        ][: max(0, self.cap)]
        if not targets:
            return records

        outcomes = await asyncio.gather(
            *(self.boost_one(items_by_url[records[i].source_url]) for i in targets)
        )

        boosted = 0
        for i, outcome in zip(targets, outcomes):
            if not outcome.ok:
                continue
            updated = self.apply_patch(records[i], outcome.value, items_by_url[records[i].source_url])
            if updated is not records[i]:
                boosted += 1
            records[i] = updated

        logger.info(f"Booster: {boosted}/{len(targets)} records gained fields")
        return records
