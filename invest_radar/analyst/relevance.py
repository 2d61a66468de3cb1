"""
Relevance & category classifier.

Scores how "investment-like" an article is and assigns a dashboard category.
Used as the gate in front of extraction: low-scoring items never reach the
LLM unless nothing else qualifies (fallback-to-best-available).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, TypeVar

from ..config.keywords import DEFAULT_RELEVANCE_TABLE, RelevanceTable
from .schemas import InvestmentCategory

logger = logging.getLogger(__name__)

T = TypeVar("T")

HARD_NEGATIVE_PENALTY = 5.0
SOFT_NEGATIVE_PENALTY = 1.0
AMOUNT_BONUS = 4.0
JOBS_BONUS = 2.0
COMPANY_BONUS = 2.0
TITLE_KEYWORD_BONUS = 1.0
BODY_KEYWORD_BONUS = 0.5
EDUCATION_MOU_PENALTY = 3.0


@dataclass(frozen=True)
class Relevance:
    score: float
    reasons: list[str] = field(default_factory=list)


class RelevanceScorer:
    """Keyword/pattern scorer over an injected RelevanceTable."""

    def __init__(self, table: RelevanceTable = DEFAULT_RELEVANCE_TABLE, max_reasons: int = 16):
        self.table = table
        self.max_reasons = max_reasons

    def score(self, title: Optional[str], text: Optional[str] = "") -> Relevance:
        title = title or ""
        text = text or ""
        t = self.table
        score = 0.0
        reasons: list[str] = []

        # Hard negatives: politics, sports, crime
        for rule in t.hard_negative.rules:
            if rule.matches(title) or rule.matches(text):
                score -= HARD_NEGATIVE_PENALTY
                reasons.append(f"neg-hard:{rule.label}")

        has_amount = bool(t.amount_pattern.search(title) or t.amount_pattern.search(text))
        if has_amount:
            score += AMOUNT_BONUS
            reasons.append("amount")
        if t.jobs_pattern.search(title) or t.jobs_pattern.search(text):
            score += JOBS_BONUS
            reasons.append("jobs")
        if t.company_pattern.search(title) or t.company_pattern.search(text):
            score += COMPANY_BONUS
            reasons.append("company-entity")

        has_positive = False
        for rule in t.positive.rules:
            if rule.matches(title):
                score += TITLE_KEYWORD_BONUS
                reasons.append(f"pos-title:{rule.label}")
                has_positive = True
            elif rule.matches(text):
                score += BODY_KEYWORD_BONUS
                reasons.append(f"pos-text:{rule.label}")
                has_positive = True

        for rule in t.soft_negative.rules:
            if rule.matches(title) or rule.matches(text):
                score -= SOFT_NEGATIVE_PENALTY

        # Only education/social MoUs with no industrial signal are penalized
        has_mou = bool(t.mou_pattern.search(title) or t.mou_pattern.search(text))
        if has_mou and self._is_education_context(title, text) and not has_positive and not has_amount:
            score -= EDUCATION_MOU_PENALTY
            reasons.append("mou-education-nonindustrial")

        return Relevance(score=score, reasons=reasons[: self.max_reasons])

    def _is_education_context(self, title: str, text: str) -> bool:
        return self.table.education_pattern.search(f"{title} {text}") is not None

    def classify(self, title: Optional[str], text: Optional[str] = "") -> InvestmentCategory:
        """First matching category in priority order: expansion > proposal > intent > mou > other."""
        title = title or ""
        text = text or ""
        t = self.table
        if t.expansion_pattern.search(title) or t.expansion_pattern.search(text):
            return InvestmentCategory.EXPANSION
        if t.proposal_pattern.search(title) or t.proposal_pattern.search(text):
            return InvestmentCategory.PROPOSAL
        if t.intent_pattern.search(title) or t.intent_pattern.search(text):
            return InvestmentCategory.INTENT
        has_mou = t.mou_pattern.search(title) or t.mou_pattern.search(text)
        if has_mou and not self._is_education_context(title, text):
            return InvestmentCategory.MOU
        return InvestmentCategory.OTHER
def select_for_extraction(
    items: Sequence[T],
    scores: Sequence[float],
    threshold: float = 1.0,
    fallback_top_n: int = 50,
) -> list[T]:
    """
    Keep items scoring >= threshold. If none qualify, keep the top-N by
    score regardless of threshold (ties keep input order).
    """
    if len(items) != len(scores):
        raise ValueError("items and scores must have the same length")
    kept = [item for item, s in zip(items, scores) if s >= threshold]
    if kept or not items:
        return kept
    ranked = sorted(range(len(items)), key=lambda i: -scores[i])
    top = sorted(ranked[: max(0, fallback_top_n)])
    logger.info(
        f"Relevance fallback: 0/{len(items)} items >= {threshold}, keeping top {len(top)} by score"
    )
    return [items[i] for i in top]
