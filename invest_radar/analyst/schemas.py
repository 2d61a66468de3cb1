"""
Pydantic schemas for investment records.

ExtractedRecord is the lenient shape parsed from LLM JSON; InvestmentRecord
is the frozen canonical output unit. Both share the same field coercion:
placeholders become None, enums are narrowed, unknown sectors/states become
None and amounts must be finite and strictly positive.

Records are never mutated. Use evolve() to get a validated copy:

    record = evolve(record, amount_in_inr_crore=500.0)
    record = with_note(record, "amount fixed from page text")
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Any
from enum import Enum
from datetime import date, datetime
from uuid import uuid4
import logging
import math
import re

from dateutil import parser as date_parser

from ..config.sectors import SECTORS
from .geo import canonical_state

logger = logging.getLogger(__name__)

# Placeholder values that LLMs sometimes generate instead of null
PLACEHOLDER_VALUES = {
    "", "null", "none", "n/a", "na", "n.a.", "unknown", "not mentioned", "not specified",
    "not available", "undefined", "-", "tbd", "tba",
}

_SECTOR_LOOKUP = {s.lower(): s for s in SECTORS}
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ProjectType(str, Enum):
    """Kind of project being announced."""
    GREENFIELD = "Greenfield"
    BROWNFIELD = "Brownfield"
    EXPANSION = "Expansion"
    MOU = "MoU"
    PROPOSAL = "Proposal"
    ANNOUNCEMENT = "Announcement"


class ProjectStatus(str, Enum):
    """Stage the project has reached."""
    MOU = "MoU"
    ANNOUNCED = "Announced"
    APPROVED = "Approved"
    CONSTRUCTION = "Construction"
    OPERATIONAL = "Operational"


class InvestmentCategory(str, Enum):
    """Coarse dashboard category assigned by the relevance classifier."""
    INTENT = "intent"
    MOU = "mou"
    PROPOSAL = "proposal"
    EXPANSION = "expansion"
    OTHER = "other"


def _narrow_enum(enum_cls: type[Enum], value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value.value
    text = str(value).strip().lower()
    for member in enum_cls:
        if member.value.lower() == text:
            return member.value
    return None


def clean_text(value: Any) -> Optional[str]:
    """Trim strings; placeholders and non-strings become None."""
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = re.sub(r"\s+", " ", value).strip()
    if value.lower() in PLACEHOLDER_VALUES:
        return None
    return value


def coerce_amount(value: Any) -> Optional[float]:
    """Finite, strictly positive float or None ("1,200" -> 1200.0)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").replace("₹", "").strip()
        if not value:
            return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def coerce_jobs(value: Any) -> Optional[int]:
    """Non-negative integer or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return None
    try:
        jobs = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(jobs) or jobs < 0:
        return None
    return int(round(jobs))


def coerce_iso_date(value: Any) -> Optional[str]:
    """YYYY-MM-DD string or None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = clean_text(value)
    if not text:
        return None
    if ISO_DATE_PATTERN.match(text):
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            return None
    try:
        return date_parser.parse(text, fuzzy=False).date().isoformat()
    except (ValueError, OverflowError, TypeError):
        return None


def coerce_sector(value: Any) -> Optional[str]:
    text = clean_text(value)
    if not text:
        return None
    return _SECTOR_LOOKUP.get(text.lower())


class _RecordFields(BaseModel):
    """Content fields shared by extracted and canonical records."""

    company: Optional[str] = None
    sector: Optional[str] = None
    amount_in_inr_crore: Optional[float] = None
    jobs: Optional[int] = None
    state: Optional[str] = None
    district: Optional[str] = None
    project_type: Optional[ProjectType] = None
    status: Optional[ProjectStatus] = None
    announcement_date: Optional[str] = None
    source_url: str = ""
    source_name: Optional[str] = None

    @field_validator("company", "district", "source_name", mode="before")
    @classmethod
    def clean_strings(cls, v: Any) -> Optional[str]:
        return clean_text(v)

    @field_validator("sector", mode="before")
    @classmethod
    def narrow_sector(cls, v: Any) -> Optional[str]:
        return coerce_sector(v)

    @field_validator("state", mode="before")
    @classmethod
    def narrow_state(cls, v: Any) -> Optional[str]:
        return canonical_state(clean_text(v))

    @field_validator("amount_in_inr_crore", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> Optional[float]:
        return coerce_amount(v)

    @field_validator("jobs", mode="before")
    @classmethod
    def validate_jobs(cls, v: Any) -> Optional[int]:
        return coerce_jobs(v)

    @field_validator("project_type", mode="before")
    @classmethod
    def narrow_project_type(cls, v: Any) -> Optional[str]:
        return _narrow_enum(ProjectType, v)

    @field_validator("status", mode="before")
    @classmethod
    def narrow_status(cls, v: Any) -> Optional[str]:
        return _narrow_enum(ProjectStatus, v)

    @field_validator("announcement_date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> Optional[str]:
        return coerce_iso_date(v)

    @field_validator("source_url", mode="before")
    @classmethod
    def validate_source_url(cls, v: Any) -> str:
        return clean_text(v) or ""


class ExtractedRecord(_RecordFields):
    """One LLM extraction result (lenient: unknown keys ignored)."""

    model_config = ConfigDict(extra="ignore", use_enum_values=True)


def new_record_id() -> str:
    return uuid4().hex


class InvestmentRecord(_RecordFields):
    """Canonical structured output unit. Immutable."""

    model_config = ConfigDict(frozen=True, extra="ignore", use_enum_values=True)

    opportunity_score: int = Field(default=0, ge=0, le=100)
    rationale: str = ""
    # Stable identity used by the dedup passes; never serialized to callers
    record_id: str = Field(default_factory=new_record_id, exclude=True)

    @field_validator("opportunity_score", mode="before")
    @classmethod
    def clamp_score(cls, v: Any) -> int:
        try:
            score = float(v)
        except (TypeError, ValueError):
            return 0
        if not math.isfinite(score):
            return 0
        return int(min(100, max(0, round(score))))

    @field_validator("rationale", mode="before")
    @classmethod
    def clean_rationale(cls, v: Any) -> str:
        return clean_text(v) or ""


CONTENT_FIELDS = (
    "company", "sector", "amount_in_inr_crore", "jobs", "state", "district",
    "project_type", "status", "announcement_date",
)


def evolve(record: InvestmentRecord, **changes: Any) -> InvestmentRecord:
    """Return a validated copy of record with changes applied (record_id kept unless given)."""
    data = record.model_dump()
    data["record_id"] = record.record_id
    data.update(changes)
    return InvestmentRecord.model_validate(data)


def with_note(record: InvestmentRecord, note: str, **changes: Any) -> InvestmentRecord:
    """evolve() and append a note to the rationale audit trail."""
    rationale = f"{record.rationale}; {note}" if record.rationale else note
    return evolve(record, rationale=rationale, **changes)


def filled_field_count(record: _RecordFields) -> int:
    return sum(1 for name in CONTENT_FIELDS if getattr(record, name) is not None)


def to_output(record: InvestmentRecord) -> dict:
    """JSON-ready dict for API callers (record_id excluded)."""
    return record.model_dump(mode="json")
