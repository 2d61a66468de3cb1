"""
State fan-out and final state filter.

A record's candidate states are its own state, the states its URL was
discovered under, and every state detected in its page text. Only the
requested states survive, in request order; one copy is emitted per state.
Records with no requested candidate state are dropped.
"""

import logging
from typing import List, Mapping, Sequence

from ..analyst.geo import StateMatcher, default_matcher
from ..analyst.schemas import InvestmentRecord, evolve, new_record_id
from ..common.url_utils import normalize_url

logger = logging.getLogger(__name__)


def fan_out(
    records: Sequence[InvestmentRecord],
    requested_states: Sequence[str],
    tagged_by_url: Mapping[str, Sequence[str]],
    text_by_url: Mapping[str, str],
    matcher: StateMatcher = default_matcher,
) -> List[InvestmentRecord]:
    """
    Args:
        records: Reconciled records
        requested_states: States the caller asked for (output order)
        tagged_by_url: Discovery state tags keyed by normalized URL
        text_by_url: Title + page text keyed by normalized URL
    """
    requested = []
    for state in requested_states:
        canonical = matcher.canonical_state(state) or state
        if canonical not in requested:
            requested.append(canonical)

    output: List[InvestmentRecord] = []
    dropped = 0
    for record in records:
        key = normalize_url(record.source_url)
        candidates = set(tagged_by_url.get(key, ()))
        candidates.update(matcher.match_states(text_by_url.get(key, "")))
        if record.state:
            candidates.add(record.state)

        states = [s for s in requested if s in candidates]
        if not states:
            dropped += 1
            continue
        for state in states:
            output.append(evolve(record, state=state, record_id=new_record_id()))

    logger.info(f"Fan-out: {len(records)} records -> {len(output)} state records ({dropped} dropped)")
    return output
