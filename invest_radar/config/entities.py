"""
Company and government entity dictionaries.

PSU_RULES maps public sector abbreviations/names to their canonical labels.
Bare abbreviations are matched case-sensitively so that "SAIL" tags the
steel PSU but "set sail" does not.
"""

import re
from typing import Optional

from ..common.rules import KeywordRule, RuleTable


PSU_RULES = RuleTable(
    name="psu",
    version="1",
    rules=(
        KeywordRule.terms("NTPC", "NTPC", case_sensitive=True),
        KeywordRule.terms("Indian Oil Corporation", "indian oil"),
        KeywordRule.terms("Indian Oil Corporation", "IOCL", case_sensitive=True),
        KeywordRule.terms("Bharat Petroleum Corporation (BPCL)", "bharat petroleum"),
        KeywordRule.terms("Bharat Petroleum Corporation (BPCL)", "BPCL", case_sensitive=True),
        KeywordRule.terms("Hindustan Petroleum Corporation (HPCL)", "hindustan petroleum"),
        KeywordRule.terms("Hindustan Petroleum Corporation (HPCL)", "HPCL", case_sensitive=True),
        KeywordRule.terms("Bharat Heavy Electricals (BHEL)", "bharat heavy electricals"),
        KeywordRule.terms("Bharat Heavy Electricals (BHEL)", "BHEL", case_sensitive=True),
        KeywordRule.terms("Steel Authority of India (SAIL)", "steel authority of india"),
        KeywordRule.terms("Steel Authority of India (SAIL)", "SAIL", case_sensitive=True),
        KeywordRule.terms("GAIL (India) Limited", "GAIL", case_sensitive=True),
        KeywordRule.terms("Oil and Natural Gas Corporation (ONGC)", "oil and natural gas corporation"),
        KeywordRule.terms("Oil and Natural Gas Corporation (ONGC)", "ONGC", case_sensitive=True),
        KeywordRule.terms("Power Grid Corporation of India (PGCIL)", "power grid corporation", "powergrid"),
        KeywordRule.terms("Power Grid Corporation of India (PGCIL)", "PGCIL", case_sensitive=True),
        KeywordRule.terms("Coal India Limited", "coal india"),
        KeywordRule.terms("NMDC", "NMDC", case_sensitive=True),
        KeywordRule.terms("NALCO", "NALCO", "national aluminium company"),
        KeywordRule.terms("Bharat Electronics (BEL)", "bharat electronics"),
        KeywordRule.terms("Bharat Electronics (BEL)", "BEL", case_sensitive=True),
        KeywordRule.terms("Hindustan Aeronautics (HAL)", "hindustan aeronautics"),
        KeywordRule.terms("Hindustan Aeronautics (HAL)", "HAL", case_sensitive=True),
        KeywordRule.terms("NHPC", "NHPC", case_sensitive=True),
        KeywordRule.terms("SJVN", "SJVN", case_sensitive=True),
    ),
)

PSU_LABELS = frozenset(PSU_RULES.labels)

# Families that get sector overrides during refinement (matched on company name)
COMPANY_FAMILY_RULES = RuleTable(
    name="company-family",
    version="1",
    rules=(
        KeywordRule.terms(
            "oil_gas_major",
            "indian oil*", "iocl", "bpcl", "bharat petroleum", "hpcl", "hindustan petroleum",
            "ongc", "oil and natural gas", "gail", "oil india", "nayara", "mrpl",
        ),
        KeywordRule.terms(
            "power_utility",
            "ntpc", "nhpc", "sjvn", "power grid", "pgcil", "tata power", "adani power",
            "jsw energy", "torrent power", "nlc india", "damodar valley",
        ),
    ),
)

# Well-known conglomerate name variants, matched against title+body.
# More specific group companies come before the group fallback.
CONGLOMERATE_RULES = RuleTable(
    name="conglomerate",
    version="1",
    rules=(
        KeywordRule.terms("Foxconn (Hon Hai Precision Industry)", "foxconn", "hon hai"),
        KeywordRule.terms("Reliance Industries", "reliance industries", "RIL"),
        KeywordRule.terms("Adani Green Energy", "adani green"),
        KeywordRule.terms("Adani Ports and SEZ", "adani ports", "APSEZ"),
        KeywordRule.terms("Adani Enterprises", "adani enterprises"),
        KeywordRule.terms("Adani Group", "adani"),
        KeywordRule.terms("Tata Steel", "tata steel"),
        KeywordRule.terms("Tata Motors", "tata motors"),
        KeywordRule.terms("Tata Power", "tata power"),
        KeywordRule.terms("Tata Electronics", "tata electronics"),
        KeywordRule.terms("Tata Group", "tata sons", "tata group"),
        KeywordRule.terms("JSW Steel", "jsw steel"),
        KeywordRule.terms("JSW Group", "jsw"),
        KeywordRule.terms("UltraTech Cement", "ultratech"),
        KeywordRule.terms("Aditya Birla Group", "aditya birla"),
        KeywordRule.terms("Hindalco Industries", "hindalco"),
        KeywordRule.terms("Vedanta", "vedanta"),
        KeywordRule.terms("Larsen & Toubro", "larsen & toubro", "larsen and toubro", "L&T"),
        KeywordRule.terms("Mahindra & Mahindra", "mahindra & mahindra", "mahindra"),
        KeywordRule.terms("ArcelorMittal Nippon Steel India", "arcelormittal", "AM/NS"),
        KeywordRule.terms("Maruti Suzuki", "maruti"),
        KeywordRule.terms("Hyundai Motor India", "hyundai"),
        KeywordRule.terms("Ola Electric", "ola electric"),
        KeywordRule.terms("Micron Technology", "micron technology"),
    ),
)

CONGLOMERATE_LABELS = frozenset(CONGLOMERATE_RULES.labels)

FOXCONN_LABEL = "Foxconn (Hon Hai Precision Industry)"
FOXCONN_PATTERN = re.compile(r"\b(?:foxconn|hon hai)\b", re.IGNORECASE)

CENTRAL_GOVERNMENT = "Central Government"

CENTRAL_HINT_RULES = RuleTable(
    name="central-government-hints",
    version="1",
    rules=(
        KeywordRule.terms(
            CENTRAL_GOVERNMENT,
            "prime minister", "pm modi", "narendra modi", "union minister", "union ministry",
            "government of india", "central government", "ministry of", "railway minister",
            "nhai", "national highways authority", "iit", "aiims", "niti aayog",
        ),
    ),
)

STATE_HINT_RULES = RuleTable(
    name="state-government-hints",
    version="1",
    rules=(
        KeywordRule.terms(
            "state_government",
            "chief minister", "state cabinet", "state government", "industries department",
            "industrial development corporation",
        ),
    ),
)

# Company values that name an authority rather than an investor
GENERIC_COMPANY_PATTERN = re.compile(
    r"\b(?:govt|government|department|ministry|authority|board|corporation|council)\b",
    re.IGNORECASE,
)

# Heuristic title subjects that are never company names
GENERIC_SUBJECTS = frozenset({
    "state", "govt", "government", "centre", "center", "india", "the state", "state government",
    "the government", "cabinet", "the centre", "cm", "minister", "officials", "it", "this", "company",
})


def government_of(state: str) -> str:
    """Canonical label for a state government."""
    if state.strip().lower() == "delhi":
        return "Government of NCT of Delhi"
    return f"Government of {state}"


def is_recognized_label(company: Optional[str]) -> bool:
    """True for canonical labels exempt from the text-attestation check."""
    if not company:
        return False
    if company in PSU_LABELS or company in CONGLOMERATE_LABELS:
        return True
    if company == CENTRAL_GOVERNMENT:
        return True
    return company.startswith("Government of ")
