"""
Tests for state detection and canonical state names.

Run with: pytest tests/test_geo.py -v
"""

from invest_radar.analyst.geo import StateMatcher, canonical_state, default_matcher
from invest_radar.config.states import STATE_TABLE, StateAlias


class TestMatchStates:
    def test_names_and_cities(self):
        text = "Plant near Bengaluru; second unit in Gujarat"
        assert default_matcher.match_states(text) == ["Gujarat", "Karnataka"]

    def test_table_order_not_text_order(self):
        states = default_matcher.match_states("Tamil Nadu, then Andhra Pradesh")
        assert states == ["Andhra Pradesh", "Tamil Nadu"]

    def test_abbreviations_are_case_sensitive(self):
        assert "Uttar Pradesh" in default_matcher.match_states("UP cabinet clears project")
        assert "Uttar Pradesh" not in default_matcher.match_states("sales went up sharply")

    def test_non_breaking_space(self):
        assert default_matcher.match_states("Tamil\u00a0Nadu") == ["Tamil Nadu"]

    def test_empty(self):
        assert default_matcher.match_states("") == []
        assert default_matcher.match_states(None) == []


class TestExplicitForState:
    def test_city_counts_as_mention(self):
        assert default_matcher.is_explicit_for_state("Mysuru unit inaugurated", "Karnataka")

    def test_variant_state_argument(self):
        assert default_matcher.is_explicit_for_state("Paradip refinery", "Orissa")

    def test_not_mentioned(self):
        assert not default_matcher.is_explicit_for_state("Pune facility", "Gujarat")
        assert not default_matcher.is_explicit_for_state("Pune facility", None)


class TestCanonicalState:
    def test_variants(self):
        assert canonical_state("Orissa") == "Odisha"
        assert canonical_state("  tamil   nadu ") == "Tamil Nadu"
        assert canonical_state("Tamilnadu") == "Tamil Nadu"
        assert canonical_state("UP") == "Uttar Pradesh"

    def test_lowercase_abbreviation_rejected(self):
        assert canonical_state("up") is None

    def test_cities_are_not_states(self):
        assert canonical_state("Bengaluru") is None

    def test_garbage(self):
        assert canonical_state("") is None
        assert canonical_state(None) is None
        assert canonical_state("Atlantis") is None


class TestInjectedTable:
    def test_custom_table(self):
        matcher = StateMatcher((StateAlias("Goa", ("Goa",), (), ("Panaji",)),))
        assert matcher.states == ("Goa",)
        assert matcher.match_states("Panaji port and Gujarat") == ["Goa"]
        assert matcher.canonical_state("Gujarat") is None

    def test_default_table_untouched(self):
        assert len(default_matcher.states) == len(STATE_TABLE)
