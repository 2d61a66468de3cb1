"""
Tests for multi-pass record reconciliation.

Passes (in order): URL collapse, title collapse, cross-state cluster,
near-date cluster.

Run with: pytest tests/test_dedup.py -v
"""

from invest_radar.archivist.dedup import (
    choose_best,
    collapse_by_title,
    collapse_by_url,
    collapse_cross_state,
    collapse_near_dates,
    normalize_title,
    reconcile,
    round_crore,
)
from tests.test_helpers import make_record


def ids(records):
    return [r.record_id for r in records]


class TestHelpers:
    def test_round_crore_half_up(self):
        assert round_crore(2.5) == 3
        assert round_crore(500.4) == 500
        assert round_crore(1499.5) == 1500

    def test_normalize_title(self):
        assert normalize_title("Foxconn to invest ₹500 crore in Karnataka - The Economic Times") == \
            "foxconn to invest 500 crore in karnataka"
        assert normalize_title(None) == ""


class TestChooseBest:
    def test_publisher_priority_first(self):
        trusted = make_record(source_name="economictimes.indiatimes.com")
        fuller = make_record(source_name="randomblog.in", company="Acme", sector="Steel", jobs=10)
        assert choose_best(fuller, trusted) is trusted

    def test_more_fields_then_amount_then_date(self):
        a = make_record(company="Acme")
        b = make_record(company="Acme", jobs=100)
        assert choose_best(a, b) is b

        small = make_record(amount_in_inr_crore=100)
        large = make_record(amount_in_inr_crore=200)
        assert choose_best(small, large) is large

        older = make_record(amount_in_inr_crore=100, announcement_date="2025-01-09")
        newer = make_record(amount_in_inr_crore=100, announcement_date="2025-01-10")
        assert choose_best(older, newer) is newer

    def test_full_tie_keeps_first(self):
        a = make_record(company="Acme")
        b = make_record(company="Acme")
        assert choose_best(a, b) is a


class TestCollapseByUrl:
    def test_url_variants_collapse(self):
        records = [
            make_record(source_url="https://www.example.com/deal/", company="Acme"),
            make_record(source_url="http://example.com/deal?utm_source=x", company="Acme", jobs=50),
            make_record(source_url="https://example.com/deal#comments", company="Acme"),
        ]
        result = collapse_by_url(records)
        assert len(result) == 1
        assert result[0].jobs == 50

    def test_distinct_urls_kept_in_order(self):
        records = [
            make_record(source_url="https://example.com/a"),
            make_record(source_url="https://example.com/b"),
        ]
        assert ids(collapse_by_url(records)) == ids(records)


class TestCollapseByTitle:
    def test_same_headline_different_urls(self):
        a = make_record(source_url="https://economictimes.indiatimes.com/x", company="Acme")
        b = make_record(source_url="https://randomblog.in/y", source_name="randomblog.in", company="Acme")
        titles = {
            "economictimes.indiatimes.com/x": "Acme to invest ₹500 crore in Gujarat - ET",
            "randomblog.in/y": "Acme to invest ₹500 crore in Gujarat | Random Blog",
        }
        result = collapse_by_title([b, a], titles)
        assert ids(result) == [a.record_id]

    def test_untitled_pass_through(self):
        records = [make_record(source_url="https://example.com/a"), make_record(source_url="https://example.com/b")]
        assert len(collapse_by_title(records, {})) == 2


class TestCollapseCrossState:
    def test_one_winner_for_same_amount_and_day(self):
        gujarat = make_record(
            source_url="https://example.com/deal", state="Gujarat",
            amount_in_inr_crore=1000, opportunity_score=60,
        )
        odisha = make_record(
            source_url="https://example.com/deal", state="Odisha",
            amount_in_inr_crore=1000.2, opportunity_score=60, company="Acme",
        )
        result = collapse_cross_state([gujarat, odisha])
        assert ids(result) == [odisha.record_id]

    def test_score_wins(self):
        low = make_record(
            source_url="https://a.com/1", state="Gujarat", amount_in_inr_crore=300,
            opportunity_score=40, company="A",
        )
        high = make_record(source_url="https://b.com/2", state="Odisha", amount_in_inr_crore=300, opportunity_score=55)
        assert ids(collapse_cross_state([low, high])) == [high.record_id]

    def test_earliest_seen_wins_full_tie(self):
        first = make_record(source_url="https://a.com/1", state="Gujarat", amount_in_inr_crore=300)
        second = make_record(source_url="https://a.com/2", state="Kerala", amount_in_inr_crore=300)
        assert ids(collapse_cross_state([first, second])) == [first.record_id]

    def test_missing_amount_or_date_passes_through(self):
        no_amount = make_record(source_url="https://a.com/1")
        no_date = make_record(source_url="https://a.com/2", amount_in_inr_crore=300, announcement_date=None)
        assert len(collapse_cross_state([no_amount, no_date])) == 2

    def test_stateless_record_is_not_clustered(self):
        stated = make_record(
            source_url="https://a.com/1", state="Gujarat", amount_in_inr_crore=500, opportunity_score=54,
        )
        stateless = make_record(
            source_url="https://b.com/2", amount_in_inr_crore=500, opportunity_score=70, company="Acme",
        )
        assert ids(collapse_cross_state([stated, stateless])) == [stated.record_id, stateless.record_id]


class TestCollapseNearDates:
    def test_adjacent_days_merge(self):
        day1 = make_record(
            source_url="https://a.com/1", state="Gujarat", amount_in_inr_crore=500,
            announcement_date="2025-01-10",
        )
        day2 = make_record(
            source_url="https://b.com/2", state="Gujarat", amount_in_inr_crore=500.3,
            announcement_date="2025-01-11", company="Acme",
        )
        later = make_record(
            source_url="https://c.com/3", state="Gujarat", amount_in_inr_crore=500,
            announcement_date="2025-01-14",
        )
        result = collapse_near_dates([day1, day2, later])
        assert ids(result) == [day2.record_id, later.record_id]

    def test_other_state_not_merged(self):
        a = make_record(source_url="https://a.com/1", state="Gujarat", amount_in_inr_crore=500)
        b = make_record(source_url="https://b.com/2", state="Odisha", amount_in_inr_crore=500,
                        announcement_date="2025-01-11")
        assert len(collapse_near_dates([a, b])) == 2

    def test_consecutive_days_chain_into_one_cluster(self):
        tenth = make_record(
            source_url="https://economictimes.indiatimes.com/a", state="Gujarat", amount_in_inr_crore=500,
            announcement_date="2025-01-10",
        )
        ninth = make_record(
            source_url="https://randomblog.in/b", source_name="randomblog.in", state="Gujarat",
            amount_in_inr_crore=500, announcement_date="2025-01-09",
        )
        eighth = make_record(
            source_url="https://randomblog.in/c", source_name="randomblog.in", state="Gujarat",
            amount_in_inr_crore=500, announcement_date="2025-01-08",
        )
        assert ids(collapse_near_dates([tenth, ninth, eighth])) == [tenth.record_id]


class TestReconcile:
    def build(self):
        return [
            make_record(source_url="https://www.example.com/a/", state="Gujarat", amount_in_inr_crore=500,
                        announcement_date="2025-01-10", opportunity_score=50),
            make_record(source_url="https://example.com/a", state="Gujarat", amount_in_inr_crore=500,
                        announcement_date="2025-01-10", opportunity_score=50, company="Acme"),
            make_record(source_url="https://example.com/b", state="Odisha", amount_in_inr_crore=500,
                        announcement_date="2025-01-10", opportunity_score=45),
            make_record(source_url="https://example.com/c", state="Gujarat", amount_in_inr_crore=800,
                        announcement_date="2025-01-05", opportunity_score=52),
            make_record(source_url="https://example.com/d", state="Gujarat", amount_in_inr_crore=800,
                        announcement_date="2025-01-06", opportunity_score=52),
            make_record(source_url="https://example.com/e", state="Gujarat", amount_in_inr_crore=800,
                        announcement_date="2025-01-09", opportunity_score=52),
            make_record(source_url="https://example.com/f", state="Gujarat"),
        ]

    def test_passes_applied(self):
        result = reconcile(self.build())
        # a/ + a collapse (url), b loses cross-state, c/d merge (near date), e and f survive
        assert len(result) == 4

    def test_idempotent(self):
        once = reconcile(self.build())
        twice = reconcile(once)
        assert ids(twice) == ids(once)

    def test_stateless_and_stated_same_deal_both_kept(self):
        stated = make_record(
            source_url="https://example.com/g", state="Gujarat", amount_in_inr_crore=500,
            announcement_date="2025-01-10", opportunity_score=54,
        )
        stateless = make_record(
            source_url="https://example.com/h", amount_in_inr_crore=500,
            announcement_date="2025-01-10", opportunity_score=70, company="Acme",
        )
        result = reconcile([stated, stateless])
        assert ids(result) == [stated.record_id, stateless.record_id]

    def test_empty(self):
        assert reconcile([]) == []
