"""
Opportunity scoring.

    score = min(50, log10(1 + amount) * 20)
          + min(15, log10(1 + jobs) * 8)
          + 10 if Greenfield
          + 15 if Operational, 8 if Construction

rounded and clamped to 0..100. Larger capex and more jobs dominate; project
stage adds a smaller bonus.
"""

import math

from .schemas import InvestmentRecord, ProjectStatus, ProjectType, with_note

SCORE_NOTE = "Auto: capex+jobs+stage"

MAX_AMOUNT_POINTS = 50.0
AMOUNT_WEIGHT = 20.0
MAX_JOBS_POINTS = 15.0
JOBS_WEIGHT = 8.0
GREENFIELD_BONUS = 10.0
OPERATIONAL_BONUS = 15.0
CONSTRUCTION_BONUS = 8.0


def opportunity_score(record: InvestmentRecord) -> int:
    score = 0.0
    if record.amount_in_inr_crore:
        score += min(MAX_AMOUNT_POINTS, math.log10(1 + record.amount_in_inr_crore) * AMOUNT_WEIGHT)
    if record.jobs:
        score += min(MAX_JOBS_POINTS, math.log10(1 + record.jobs) * JOBS_WEIGHT)
    if record.project_type == ProjectType.GREENFIELD.value:
        score += GREENFIELD_BONUS
    if record.status == ProjectStatus.OPERATIONAL.value:
        score += OPERATIONAL_BONUS
    elif record.status == ProjectStatus.CONSTRUCTION.value:
        score += CONSTRUCTION_BONUS
    return int(max(0, min(100, round(score))))


def score_record(record: InvestmentRecord) -> InvestmentRecord:
    """New record with opportunity_score set and the scoring note appended."""
    return with_note(record, SCORE_NOTE, opportunity_score=opportunity_score(record))
