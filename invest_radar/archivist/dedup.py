"""
Record reconciliation - multi-pass deduplication.

Strict ordered passes over the full candidate set:

    Pass 1   URL collapse         same normalized source_url       -> choose_best
    Pass 1b  title collapse       same normalized discovery title  -> choose_best
    Pass 2   cross-state cluster  same (rounded amount, day),
                                  stated records only              -> highest score wins
    Pass 3   near-date cluster    same (state, rounded amount),
                                  chained dates one day apart      -> choose_best

Records missing the fields a pass keys on pass through that pass untouched.
Each pass keeps surviving records in input order, then appends merge winners
that were not in its input, then the pass-through records.

reconcile() is idempotent: feeding its output back in removes nothing more.
Records are compared by record_id, never by equality, so two identical
reports from different URLs are still two records until a pass merges them.
"""

import logging
import math
import re
from datetime import date
from functools import reduce
from typing import Callable, Dict, Hashable, List, Mapping, Optional, Sequence

from ..analyst.schemas import InvestmentRecord, filled_field_count
from ..common.url_utils import normalize_url, source_priority

logger = logging.getLogger(__name__)

# Trailing " - Publisher" / " | Publisher" suffix on aggregator titles
TITLE_PUBLISHER_SUFFIX = re.compile(r"\s+[-|–]\s+[^-|–]{2,60}$")
TITLE_PUNCT = re.compile(r"[^\w\s]", re.UNICODE)


# =============================================================================
# Comparison helpers
# =============================================================================

def round_crore(amount: float) -> int:
    """Half-up rounding to whole crore (2.5 -> 3, not banker's rounding)."""
    return int(math.floor(amount + 0.5))


def parse_day(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def normalize_title(title: Optional[str]) -> str:
    """Lowercase, publisher suffix removed, punctuation stripped, whitespace collapsed."""
    if not title:
        return ""
    t = TITLE_PUBLISHER_SUFFIX.sub("", title.strip())
    t = TITLE_PUNCT.sub(" ", t.lower())
    return re.sub(r"\s+", " ", t).strip()


def normalize_state_key(state: Optional[str]) -> str:
    return re.sub(r"\s+", " ", re.sub(r"[^\w\s]", " ", (state or "").lower())).strip()


def choose_best(a: InvestmentRecord, b: InvestmentRecord) -> InvestmentRecord:
    """
    Better of two reports of the same deal.

    Order: more trusted publisher -> more filled fields -> larger amount ->
    more recent date -> a (the earlier-seen record).
    """
    pa, pb = source_priority(a.source_name), source_priority(b.source_name)
    if pa != pb:
        return a if pa < pb else b

    fa, fb = filled_field_count(a), filled_field_count(b)
    if fa != fb:
        return b if fb > fa else a

    aa = a.amount_in_inr_crore if a.amount_in_inr_crore is not None else -1.0
    ab = b.amount_in_inr_crore if b.amount_in_inr_crore is not None else -1.0
    if aa != ab:
        return b if ab > aa else a

    da, db = parse_day(a.announcement_date), parse_day(b.announcement_date)
    if da != db:
        if da is None:
            return b
        if db is None:
            return a
        return b if db > da else a

    return a


def _cross_state_rank(record: InvestmentRecord) -> tuple:
    day = parse_day(record.announcement_date) or date.min
    return (
        record.opportunity_score,
        record.company is not None,
        -source_priority(record.source_name),
        day,
    )


def pick_cross_state_winner(cluster: Sequence[InvestmentRecord]) -> InvestmentRecord:
    """Highest score -> has company -> publisher priority -> most recent; earliest-seen on ties."""
    best = cluster[0]
    best_rank = _cross_state_rank(best)
    for record in cluster[1:]:
        rank = _cross_state_rank(record)
        if rank > best_rank:
            best, best_rank = record, rank
    return best


# =============================================================================
# Pass machinery
# =============================================================================

def _assemble(
    records: Sequence[InvestmentRecord],
    winners: Sequence[InvestmentRecord],
    pass_through: Sequence[InvestmentRecord],
) -> List[InvestmentRecord]:
    winner_ids = {w.record_id for w in winners}
    ordered = [r for r in records if r.record_id in winner_ids]
    seen = {r.record_id for r in ordered}
    for record in list(winners) + list(pass_through):
        if record.record_id not in seen:
            ordered.append(record)
            seen.add(record.record_id)
    return ordered


def collapse_by_key(
    records: Sequence[InvestmentRecord],
    key_of: Callable[[InvestmentRecord], Optional[Hashable]],
    pick: Callable[[Sequence[InvestmentRecord]], InvestmentRecord],
) -> List[InvestmentRecord]:
    """Group records by key_of (None = pass through) and keep pick(group) per group."""
    groups: Dict[Hashable, List[InvestmentRecord]] = {}
    pass_through: List[InvestmentRecord] = []
    for record in records:
        key = key_of(record)
        if key is None:
            pass_through.append(record)
            continue
        groups.setdefault(key, []).append(record)
    winners = [pick(group) for group in groups.values()]
    return _assemble(records, winners, pass_through)


def _fold_best(group: Sequence[InvestmentRecord]) -> InvestmentRecord:
    return reduce(choose_best, group)


# =============================================================================
# Passes
# =============================================================================

def collapse_by_url(records: Sequence[InvestmentRecord]) -> List[InvestmentRecord]:
    """Pass 1: one record per normalized source URL."""
    return collapse_by_key(records, lambda r: normalize_url(r.source_url) or None, _fold_best)


def collapse_by_title(
    records: Sequence[InvestmentRecord],
    titles_by_url: Mapping[str, str],
) -> List[InvestmentRecord]:
    """Pass 1b: one record per normalized discovery title (records without a title pass through)."""
    def key_of(record: InvestmentRecord) -> Optional[str]:
        return normalize_title(titles_by_url.get(normalize_url(record.source_url))) or None

    return collapse_by_key(records, key_of, _fold_best)


def collapse_cross_state(records: Sequence[InvestmentRecord]) -> List[InvestmentRecord]:
    """Pass 2: same rounded amount on the same calendar day is the same deal, whatever the state.

    Records without a state pass through; they are not attributed to any state yet.
    """
    def key_of(record: InvestmentRecord) -> Optional[tuple]:
        day = parse_day(record.announcement_date)
        if not normalize_state_key(record.state):
            return None
        if record.amount_in_inr_crore is None or day is None:
            return None
        return (round_crore(record.amount_in_inr_crore), day)

    return collapse_by_key(records, key_of, pick_cross_state_winner)


def collapse_near_dates(records: Sequence[InvestmentRecord]) -> List[InvestmentRecord]:
    """
    Pass 3: within a (state, rounded amount) group, merge reports dated within one day of each other.

    Clusters chain: reports on the 10th, 9th and 8th form one cluster even
    though the 10th and the 8th are two days apart.
    """
    groups: Dict[tuple, List[InvestmentRecord]] = {}
    for record in records:
        state_key = normalize_state_key(record.state)
        if not state_key or record.amount_in_inr_crore is None:
            continue
        if parse_day(record.announcement_date) is None:
            continue
        groups.setdefault((state_key, round_crore(record.amount_in_inr_crore)), []).append(record)

    cluster_of: Dict[str, tuple] = {}
    for group_key, group in groups.items():
        # Stable sort keeps earlier-seen records first among equal dates
        ordered = sorted(group, key=lambda r: parse_day(r.announcement_date), reverse=True)
        cluster_index = 0
        previous: Optional[date] = None
        for record in ordered:
            day = parse_day(record.announcement_date)
            if previous is not None and (previous - day).days > 1:
                cluster_index += 1
            cluster_of[record.record_id] = group_key + (cluster_index,)
            previous = day

    def pick(cluster: Sequence[InvestmentRecord]) -> InvestmentRecord:
        ordered = sorted(cluster, key=lambda r: parse_day(r.announcement_date), reverse=True)
        return reduce(choose_best, ordered)

    return collapse_by_key(records, lambda r: cluster_of.get(r.record_id), pick)


def reconcile(
    records: Sequence[InvestmentRecord],
    titles_by_url: Optional[Mapping[str, str]] = None,
) -> List[InvestmentRecord]:
    """
    Run passes 1, 1b, 2 and 3 in order.

    Args:
        records: Scored candidate records
        titles_by_url: Discovery titles keyed by normalized URL (enables pass 1b)

    Returns:
        Deduplicated records
    """
    before = len(records)
    result = collapse_by_url(records)
    after_url = len(result)
    if titles_by_url:
        result = collapse_by_title(result, titles_by_url)
    after_title = len(result)
    result = collapse_cross_state(result)
    after_cross_state = len(result)
    result = collapse_near_dates(result)

    logger.info(
        f"Reconcile: in={before} url={after_url} title={after_title} "
        f"cross_state={after_cross_state} near_date={len(result)}"
    )
    return result
