"""
Sector refinement and company canonicalization.

refine_sector() is the company-aware second sector pass: oil & gas majors
and power utilities get family-specific labels, everything else is checked
against keyword evidence and refined from coarse labels to finer ones.

canonicalize_company() replaces company values that are not usable names
(sentence fragments, ministers, unattested strings) with a dictionary label
found in the article, or clears them.
"""

import logging
import re
from typing import Optional

from ..analyst.schemas import InvestmentRecord, with_note
from ..config.entities import (
    COMPANY_FAMILY_RULES,
    CONGLOMERATE_RULES,
    PSU_RULES,
    is_recognized_label,
)
from ..config.sectors import (
    COARSE_SECTORS,
    OIL_GAS_DEFAULT,
    OIL_GAS_OVERRIDES,
    POWER_UTILITY_DEFAULT,
    POWER_UTILITY_OVERRIDES,
    SECTOR_EVIDENCE_RULES,
    SECTOR_REFINEMENT_RULES,
    SOFTWARE_COMPANY_RULE,
)
from .repairs import company_is_attested

logger = logging.getLogger(__name__)

CEMENT_PATTERN = re.compile(r"\bcement\b", re.IGNORECASE)

BAD_COMPANY_PATTERN = re.compile(
    r"\bas an? (?:investment|hub)\b|\b(?:govt|government|ministry|minister|ministers|cabinet|department)\b",
    re.IGNORECASE,
)
MAX_COMPANY_TOKENS = 7


def _family_sector(family: str, text: str) -> Optional[str]:
    if family == "oil_gas_major":
        return OIL_GAS_OVERRIDES.first_match(text) or OIL_GAS_DEFAULT
    if family == "power_utility":
        return POWER_UTILITY_OVERRIDES.first_match(text) or POWER_UTILITY_DEFAULT
    return None


def refine_sector(record: InvestmentRecord, text: str) -> InvestmentRecord:
    company = record.company or ""
    sector = record.sector

    family = COMPANY_FAMILY_RULES.first_match(company) if company else None
    if family:
        refined = _family_sector(family, text)
        if refined and refined != sector:
            return with_note(record, f"sector refined to {refined} ({family})", sector=refined)
        return record

    if sector == "Steel" and CEMENT_PATTERN.search(text or ""):
        return with_note(record, "sector Steel relabeled to Cement", sector="Cement")
    if sector == "Automobile" and SOFTWARE_COMPANY_RULE.matches(company):
        return with_note(record, "sector Automobile relabeled to IT/Software", sector="IT/Software")

    supported = bool(sector) and SECTOR_EVIDENCE_RULES.matches(sector, text, company)
    if sector and supported and sector not in COARSE_SECTORS:
        return record

    refined = SECTOR_REFINEMENT_RULES.first_match(text, company)
    if refined:
        if refined == sector:
            return record
        return with_note(record, f"sector refined to {refined}", sector=refined)
    if sector and not supported:
        return with_note(record, f"sector {sector} cleared (no keyword evidence)", sector=None)
    return record


def is_bad_company_name(company: Optional[str]) -> bool:
    """Sentence fragments, officials and over-long strings are not company names."""
    if not company:
        return False
    if not re.search(r"[A-Za-z]", company):
        return True
    if len(company.split()) > MAX_COMPANY_TOKENS:
        return True
    return BAD_COMPANY_PATTERN.search(company) is not None


def canonicalize_company(record: InvestmentRecord, text: str) -> InvestmentRecord:
    company = record.company
    if not company or is_recognized_label(company):
        return record
    if not is_bad_company_name(company) and company_is_attested(company, text):
        return record

    replacement = CONGLOMERATE_RULES.first_match(text) or PSU_RULES.first_match(text)
    if replacement:
        return with_note(record, f"company '{company}' canonicalized to {replacement}", company=replacement)
    return with_note(record, f"company '{company}' cleared (not a usable name)", company=None)
