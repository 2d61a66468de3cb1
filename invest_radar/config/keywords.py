"""
Relevance keyword table for investment-likeness scoring.

Keyword hits are plain case-insensitive substring checks: "manufactur"
intentionally covers manufacturing/manufacturer, "invest" covers investor.
"""

import re
from dataclasses import dataclass

from ..common.rules import KeywordRule, RuleTable


@dataclass(frozen=True)
class RelevanceTable:
    """Versioned keyword sets and signal patterns for the relevance scorer."""

    version: str
    positive: RuleTable
    hard_negative: RuleTable
    soft_negative: RuleTable
    amount_pattern: re.Pattern
    jobs_pattern: re.Pattern
    company_pattern: re.Pattern
    education_pattern: re.Pattern
    mou_pattern: re.Pattern
    intent_pattern: re.Pattern
    proposal_pattern: re.Pattern
    expansion_pattern: re.Pattern


POSITIVE_KEYWORDS = (
    "invest", "investment", "fdi", "capex", "crore", "cr", "₹", "inr",
    "plant", "factory", "unit", "manufactur", "assembly", "facility",
    "park", "sez", "industrial estate", "industrial park", "cluster",
    "greenfield", "brownfield", "expansion", "commissioned", "groundbreaking",
    "jobs", "employment",
    "semiconductor", "chip", "foundry", "atmp", "osat", "pcb",
    "ev", "battery", "cell", "cathode", "anode", "gigafactory",
    "steel", "cement", "refinery", "petrochem", "chemical", "fertilizer",
    "textile", "garment", "apparel",
    "pharma", "biotech", "api", "vaccine",
    "electronics", "ems", "solar", "module", "ingot", "wafer",
)

HARD_NEGATIVE_KEYWORDS = (
    "cabinet expansion", "cabinet reshuffle", "election", "polls", "voting",
    "rally", "campaign", "politics", "minister sworn", "oath",
    "crime", "accident", "weather alert", "sport", "match",
)

SOFT_NEGATIVE_KEYWORDS = (
    "workshop", "training", "seminar", "conference", "awareness", "hackathon", "webinar",
)


def _substring_table(name: str, terms: tuple[str, ...]) -> RuleTable:
    return RuleTable(
        name=name,
        version="1",
        rules=tuple(KeywordRule.terms(t, t, whole_word=False) for t in terms),
    )


DEFAULT_RELEVANCE_TABLE = RelevanceTable(
    version="1",
    positive=_substring_table("relevance-positive", POSITIVE_KEYWORDS),
    hard_negative=_substring_table("relevance-hard-negative", HARD_NEGATIVE_KEYWORDS),
    soft_negative=_substring_table("relevance-soft-negative", SOFT_NEGATIVE_KEYWORDS),
    amount_pattern=re.compile(
        r"(?:₹|inr|rs\.?)\s*\d[\d,]*(?:\.\d+)?\s*(?:cr|crore|lakh|lac)", re.IGNORECASE
    ),
    jobs_pattern=re.compile(
        r"\b\d{2,5}\s+(?:jobs?|people|employment|employees)\b", re.IGNORECASE
    ),
    # Case-sensitive: needs a capitalized name before the suffix
    company_pattern=re.compile(
        r"\b([A-Z][A-Za-z0-9&.\- ]{2,}?\s(?:Pvt\.?\s*Ltd|Private Limited|Ltd\.?|Limited|LLP|Inc\.?|Corporation|Corp\.?))\b"
    ),
    education_pattern=re.compile(
        r"(unesco|ncert|school|teacher education|curriculum|students|wellbeing|health & wellbeing)",
        re.IGNORECASE,
    ),
    mou_pattern=re.compile(r"\bMoU\b|\bmemorandum of understanding\b", re.IGNORECASE),
    intent_pattern=re.compile(r"\bintent\b|\bLoI\b|\bletter of intent\b", re.IGNORECASE),
    proposal_pattern=re.compile(r"\bproposals?\b|\bproposed\b", re.IGNORECASE),
    expansion_pattern=re.compile(
        r"\bexpansion\b|\bexpand\b|\bcapacity (?:increase|addition|expansion)\b|\bbrownfield\b",
        re.IGNORECASE,
    ),
)
