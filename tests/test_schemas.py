"""
Tests for record field coercion and immutable record helpers.

Run with: pytest tests/test_schemas.py -v
"""

import pytest
from pydantic import ValidationError

from invest_radar.analyst.schemas import (
    ExtractedRecord,
    coerce_amount,
    coerce_iso_date,
    coerce_jobs,
    evolve,
    to_output,
    with_note,
)
from tests.test_helpers import make_record


class TestCoercion:
    @pytest.mark.parametrize("value,expected", [
        ("1,200", 1200.0),
        ("₹500", 500.0),
        (12.5, 12.5),
        (0, None),
        (-40, None),
        ("nan", None),
        ("inf", None),
        ("lots", None),
        (True, None),
        (None, None),
    ])
    def test_amount_is_null_or_positive(self, value, expected):
        assert coerce_amount(value) == expected

    @pytest.mark.parametrize("value,expected", [("2,000", 2000), (12.6, 13), (-1, None), ("many", None)])
    def test_jobs(self, value, expected):
        assert coerce_jobs(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("2025-01-10", "2025-01-10"),
        ("10 January 2025", "2025-01-10"),
        ("2025-02-30", None),
        ("unknown", None),
    ])
    def test_dates(self, value, expected):
        assert coerce_iso_date(value) == expected


class TestExtractedRecord:
    def test_placeholders_and_enums(self):
        record = ExtractedRecord.model_validate({
            "company": "  N/A ",
            "sector": "steel",
            "state": "orissa",
            "project_type": "greenfield",
            "status": "under review",
            "amount_in_inr_crore": "0",
            "unexpected": "ignored",
        })
        assert record.company is None
        assert record.sector == "Steel"
        assert record.state == "Odisha"
        assert record.project_type == "Greenfield"
        assert record.status is None
        assert record.amount_in_inr_crore is None


class TestInvestmentRecord:
    def test_frozen(self):
        record = make_record(company="Acme")
        with pytest.raises(ValidationError):
            record.company = "Other"

    def test_score_clamped(self):
        assert make_record(opportunity_score=250).opportunity_score == 100
        assert make_record(opportunity_score=-3).opportunity_score == 0

    def test_evolve_keeps_identity(self):
        record = make_record(company="Acme")
        changed = evolve(record, jobs=10)
        assert changed.record_id == record.record_id
        assert changed.jobs == 10
        assert record.jobs is None

    def test_with_note_appends(self):
        record = with_note(make_record(rationale="LLM extraction"), "amount fixed", amount_in_inr_crore=5)
        assert record.rationale == "LLM extraction; amount fixed"
        assert record.amount_in_inr_crore == 5

    def test_output_omits_record_id(self):
        output = to_output(make_record(company="Acme", status="operational"))
        assert "record_id" not in output
        assert output["status"] == "Operational"
