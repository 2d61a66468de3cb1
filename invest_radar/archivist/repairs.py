"""
Per-record repair passes.

Run in a fixed order on every record before normalization:

    1. repair_amount            page-text amount hint beats a missing or much smaller amount
    2. tag_government           PSU / Central Government / Government of {state}
    3. repair_weird_extraction  Foxconn identity, unattested companies, false "Automobile"

Sector refinement and company canonicalization follow (see canonical.py).
Every repair returns a new record and appends a note to its rationale.
"""

import logging
import re
from typing import Optional

from ..analyst.geo import canonical_state
from ..analyst.schemas import InvestmentRecord, with_note
from ..config.entities import (
    CENTRAL_GOVERNMENT,
    CENTRAL_HINT_RULES,
    FOXCONN_LABEL,
    FOXCONN_PATTERN,
    GENERIC_COMPANY_PATTERN,
    PSU_RULES,
    STATE_HINT_RULES,
    government_of,
    is_recognized_label,
)
from ..config.sectors import ELECTRONICS_RULE, SEMICONDUCTOR_RULE, VEHICLE_RULE

logger = logging.getLogger(__name__)

# Amount below this share of the page's largest figure is treated as a sub-figure
AMOUNT_HINT_RATIO = 0.6


def company_is_attested(company: Optional[str], text: Optional[str]) -> bool:
    """Company appears case-insensitively as a whole word in text."""
    if not company or not text:
        return False
    pattern = rf"(?<!\w){re.escape(company)}(?!\w)"
    return re.search(pattern, text, re.IGNORECASE) is not None


def is_generic_company(company: Optional[str]) -> bool:
    """Missing, a bare state name, or naming an authority (department, board, ...) rather than an investor."""
    if not company or canonical_state(company):
        return True
    if is_recognized_label(company):
        return False
    return GENERIC_COMPANY_PATTERN.search(company) is not None


def repair_amount(record: InvestmentRecord, amount_hint: Optional[float]) -> InvestmentRecord:
    if not amount_hint or amount_hint <= 0:
        return record
    current = record.amount_in_inr_crore
    if current is None or current < AMOUNT_HINT_RATIO * amount_hint:
        return with_note(record, "amount fixed from page text", amount_in_inr_crore=amount_hint)
    return record


def tag_government(record: InvestmentRecord, text: str) -> InvestmentRecord:
    """Attribute authority-led or company-less projects. First matching rule wins."""
    if not is_generic_company(record.company):
        return record

    psu = PSU_RULES.first_match(text)
    if psu:
        return with_note(record, f"tagged as PSU ({psu})", company=psu)

    if CENTRAL_HINT_RULES.first_match(text):
        return with_note(record, "tagged as Central Government project", company=CENTRAL_GOVERNMENT)

    if record.state and STATE_HINT_RULES.first_match(text):
        state_government = government_of(record.state)
        return with_note(record, f"tagged as {state_government}", company=state_government)

    return record


def repair_weird_extraction(record: InvestmentRecord, text: str) -> InvestmentRecord:
    changes: dict = {}
    notes: list[str] = []
    company = record.company
    sector = record.sector

    if FOXCONN_PATTERN.search(text or "") or FOXCONN_PATTERN.search(company or ""):
        company = FOXCONN_LABEL
        if VEHICLE_RULE.matches(text):
            sector = "Automobile"
        elif SEMICONDUCTOR_RULE.matches(text):
            sector = "Semiconductor"
        else:
            sector = "Electronics/EMS"
        if company != record.company or sector != record.sector:
            changes.update(company=company, sector=sector)
            notes.append("Foxconn identity normalized")

    if company and not is_recognized_label(company) and not company_is_attested(company, text):
        changes["company"] = company = None
        notes.append("company cleared (not found in article text)")

    if sector == "Automobile" and not VEHICLE_RULE.matches(text):
        if SEMICONDUCTOR_RULE.matches(text):
            changes["sector"] = "Semiconductor"
        elif ELECTRONICS_RULE.matches(text):
            changes["sector"] = "Electronics/EMS"
        else:
            changes["sector"] = None
        notes.append("Automobile sector without vehicle keywords")

    if not changes:
        return record
    return with_note(record, "; ".join(notes), **changes)
