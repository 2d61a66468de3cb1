"""
Regex heuristics that backfill record fields from the article itself.

Used when LLM extraction is disabled or failed for a batch, and after
extraction to fill whatever the model left null. Heuristics only ever fill
null fields; a value from a higher-confidence source is never overwritten.
"""

import logging
import re
from typing import Optional

from ..config.entities import GENERIC_SUBJECTS
from ..config.sectors import HEURISTIC_SECTOR_RULES
from ..common.rules import RuleTable
from ..harvester.base_scraper import DiscoveredItem
from .amounts import max_amount_crore
from .geo import StateMatcher, default_matcher
from .schemas import InvestmentRecord, ProjectStatus, ProjectType, evolve

logger = logging.getLogger(__name__)

# Leading subject of a headline: "<Company> signs/invests/plans ..."
TITLE_COMPANY_PATTERN = re.compile(
    r"^(.*?)(?:\s+signs|\s+inks|\s+to\s+invest|\s+invests|\s+announces|\s+plans|"
    r"\s+set(?:s)?\s+up|\s+proposes|\s+builds|\s+expands)\b",
    re.IGNORECASE,
)
TITLE_MOU_PARTNER_PATTERN = re.compile(r"^(.*?)\s+and\s+.*\bMoU\b", re.IGNORECASE)

TITLE_PREFIX_PATTERN = re.compile(r"^(?:breaking|update|good news for)\s*[:,]?\s*", re.IGNORECASE)
TITLE_OFFICIAL_PATTERN = re.compile(r"\s*official\s*[:\-].*$", re.IGNORECASE)
HONORIFIC_PATTERN = re.compile(r"\b(?:ceo|minister|cm|pm|mr|ms|mrs|dr|shri|smt)\b.*$", re.IGNORECASE)
TRAILING_PUNCT_PATTERN = re.compile(r"[“”\"':.,‘’]+$")

# Capitalized token run ending in a corporate suffix (case-sensitive)
BODY_ORG_PATTERN = re.compile(
    r"\b([A-Z][A-Za-z&.\- ]{2,40}?(?:Ltd|Limited|Corporation|Corp|Industries|Energy|Power|Steel|"
    r"Cement|Enterprises|Group|Authority|Ministry|Commission|Board))\b"
)

JOBS_PATTERN = re.compile(
    r"(?<![\d,.])(\d{1,3}(?:,\d{2,3})+|\d+)\s+(?:new\s+|direct\s+|indirect\s+)?"
    r"(?:jobs?|employment|employees|job opportunities)\b",
    re.IGNORECASE,
)

MAX_COMPANY_LENGTH = 60

_MOU = re.compile(r"\bmou\b|memorandum of understanding", re.IGNORECASE)
_EXPANSION = re.compile(r"\bexpan(?:sion|d|ds|ding)\b", re.IGNORECASE)
_GREENFIELD = re.compile(r"\bgreenfield\b", re.IGNORECASE)
_BROWNFIELD = re.compile(r"\bbrownfield\b", re.IGNORECASE)
_PROPOSAL = re.compile(r"\bproposals?\b|\bproposed\b", re.IGNORECASE)
_OPERATIONAL = re.compile(r"\binaugurat\w*|\blaunch\w*|\boperational\b", re.IGNORECASE)
_CONSTRUCTION = re.compile(r"\bconstruction\b|\bgroundbreaking\b|\bbhumi pujan\b", re.IGNORECASE)
_APPROVED = re.compile(r"\bapprov(?:e|ed|es|al)\b", re.IGNORECASE)


def _clean_company(raw: str) -> Optional[str]:
    cleaned = TITLE_PREFIX_PATTERN.sub("", raw)
    cleaned = TITLE_OFFICIAL_PATTERN.sub("", cleaned).strip()
    cleaned = HONORIFIC_PATTERN.sub("", cleaned)
    cleaned = TRAILING_PUNCT_PATTERN.sub("", cleaned.strip()).strip()
    if not cleaned or len(cleaned) > MAX_COMPANY_LENGTH:
        return None
    if cleaned.lower() in GENERIC_SUBJECTS or not re.search(r"[A-Za-z]", cleaned):
        return None
    # "Gujarat signs MoU with ..." names the host state, not the investor
    if default_matcher.canonical_state(cleaned):
        return None
    return cleaned


def infer_company(title: Optional[str], text: Optional[str]) -> Optional[str]:
    """Headline subject before an investment verb, else a suffixed org name in the body."""
    title = title or ""
    match = TITLE_COMPANY_PATTERN.match(title) or TITLE_MOU_PARTNER_PATTERN.match(title)
    if match and match.group(1):
        company = _clean_company(match.group(1))
        if company:
            return company
    org = BODY_ORG_PATTERN.search(text or "")
    if org:
        return org.group(1).strip()
    return None


def infer_project_type(title: Optional[str], text: Optional[str] = None) -> Optional[str]:
    title = title or ""
    if _MOU.search(title):
        return ProjectType.MOU.value
    if _EXPANSION.search(title):
        return ProjectType.EXPANSION.value
    if _GREENFIELD.search(title) or _GREENFIELD.search(text or ""):
        return ProjectType.GREENFIELD.value
    if _BROWNFIELD.search(title) or _BROWNFIELD.search(text or ""):
        return ProjectType.BROWNFIELD.value
    if _PROPOSAL.search(title):
        return ProjectType.PROPOSAL.value
    return None


def infer_status(title: Optional[str], text: Optional[str]) -> str:
    title = title or ""
    text = text or ""
    if _MOU.search(title):
        return ProjectStatus.MOU.value
    if _OPERATIONAL.search(text):
        return ProjectStatus.OPERATIONAL.value
    if _CONSTRUCTION.search(text):
        return ProjectStatus.CONSTRUCTION.value
    if _APPROVED.search(text):
        return ProjectStatus.APPROVED.value
    return ProjectStatus.ANNOUNCED.value


def infer_sector(
    title: Optional[str],
    text: Optional[str],
    rules: RuleTable = HEURISTIC_SECTOR_RULES,
) -> Optional[str]:
    """First matching family wins (table order), title checked before body."""
    return rules.first_match(title, text)


def infer_jobs(text: Optional[str]) -> Optional[int]:
    """Largest 'N jobs/employees' figure in text."""
    best = None
    for match in JOBS_PATTERN.finditer(text or ""):
        try:
            value = int(match.group(1).replace(",", ""))
        except ValueError:
            continue
        if best is None or value > best:
            best = value
    return best


def infer_state(
    item: DiscoveredItem,
    matcher: StateMatcher = default_matcher,
) -> Optional[str]:
    """First tagged state the article explicitly mentions, else the first tagged state."""
    full_text = item.full_text
    for state in item.tagged_states:
        if matcher.is_explicit_for_state(full_text, state):
            return state
    return item.tagged_states[0] if item.tagged_states else None


def base_record(item: DiscoveredItem, rationale: str = "") -> InvestmentRecord:
    """Record carrying only the discovery facts (url, publisher, date, state)."""
    return InvestmentRecord(
        source_url=item.url,
        source_name=item.source,
        announcement_date=item.iso_date,
        state=infer_state(item),
        rationale=rationale,
    )


def enrich_from_heuristics(
    item: DiscoveredItem,
    record: InvestmentRecord,
    matcher: StateMatcher = default_matcher,
) -> InvestmentRecord:
    """Fill only the null fields of record from the article's title and text."""
    title = item.title or ""
    text = item.text or ""
    full_text = item.full_text
    fills: dict = {}

    if record.company is None:
        company = infer_company(title, text)
        if company:
            fills["company"] = company
    if record.amount_in_inr_crore is None:
        amount = max_amount_crore(full_text)
        if amount is not None:
            fills["amount_in_inr_crore"] = amount
    if record.jobs is None:
        jobs = infer_jobs(full_text)
        if jobs is not None:
            fills["jobs"] = jobs
    if record.project_type is None:
        project_type = infer_project_type(title, text)
        if project_type:
            fills["project_type"] = project_type
    if record.status is None:
        fills["status"] = infer_status(title, text)
    if record.sector is None:
        sector = infer_sector(title, text)
        if sector:
            fills["sector"] = sector
    if record.state is None:
        state = infer_state(item, matcher)
        if state:
            fills["state"] = state
    if record.announcement_date is None and item.iso_date:
        fills["announcement_date"] = item.iso_date
    if not record.source_url:
        fills["source_url"] = item.url
    if record.source_name is None and item.source:
        fills["source_name"] = item.source
    if not record.rationale:
        is_mou = fills.get("project_type", record.project_type) == ProjectType.MOU.value
        fills["rationale"] = "MoU detected in title" if is_mou else "Heuristic enrichment"

    if not fills:
        return record
    return evolve(record, **fills)
