"""
Tests for the keyword rule-table evaluator and the tables built on it.

Run with: pytest tests/test_rules.py -v
"""

from invest_radar.common.rules import KeywordRule, RuleTable
from invest_radar.config.entities import PSU_RULES, government_of, is_recognized_label
from invest_radar.config.sectors import HEURISTIC_SECTOR_RULES, SECTOR_EVIDENCE_RULES


TABLE = RuleTable(
    name="test",
    version="1",
    rules=(
        KeywordRule.terms("Steel", "steel"),
        KeywordRule.terms("Pharma", "pharma*"),
        KeywordRule.terms("PSU", "SAIL", case_sensitive=True),
        KeywordRule.regex("Auto", r"\bevs?\b"),
    ),
)


class TestKeywordRule:
    """Term syntax: whole words, prefixes, case sensitivity."""

    def test_whole_word(self):
        rule = KeywordRule.terms("Steel", "steel")
        assert rule.matches("new steel plant")
        assert not rule.matches("stainless steelworks")

    def test_prefix_term(self):
        rule = KeywordRule.terms("Pharma", "pharma*")
        assert rule.matches("Pharmaceutical unit")
        assert not rule.matches("biopharma hub")

    def test_case_sensitive_abbreviation(self):
        rule = KeywordRule.terms("PSU", "SAIL", case_sensitive=True)
        assert rule.matches("SAIL to expand Bhilai")
        assert not rule.matches("set sail for growth")

    def test_substring_mode(self):
        rule = KeywordRule.terms("invest", "invest", whole_word=False)
        assert rule.matches("Investors flock to the state")

    def test_empty_text(self):
        assert not KeywordRule.terms("Steel", "steel").matches(None)
        assert not KeywordRule.terms("Steel", "steel").matches("")


class TestRuleTable:
    def test_first_match_follows_table_order(self):
        assert TABLE.first_match("pharma and steel park") == "Steel"

    def test_first_match_checks_every_text(self):
        assert TABLE.first_match("headline", "EV maker") == "Auto"
        assert TABLE.first_match("nothing here", None) is None

    def test_matches_by_label(self):
        assert TABLE.matches("Pharma", "a pharma SEZ")
        assert not TABLE.matches("Steel", "a pharma SEZ")

    def test_labels_in_table_order(self):
        assert TABLE.labels == ("Steel", "Pharma", "PSU", "Auto")


class TestConfiguredTables:
    def test_heuristic_sector_first_match(self):
        assert HEURISTIC_SECTOR_RULES.first_match("Steel and cement complex") == "Steel"
        assert HEURISTIC_SECTOR_RULES.first_match("New EV plant") == "Automobile"

    def test_sector_evidence(self):
        assert SECTOR_EVIDENCE_RULES.matches("Semiconductor", "ATMP facility for chips")
        assert not SECTOR_EVIDENCE_RULES.matches("Semiconductor", "textile park")

    def test_psu_abbreviations_case_sensitive(self):
        assert PSU_RULES.first_match("NTPC commissions unit") == "NTPC"
        assert PSU_RULES.first_match("the bel tower") is None

    def test_government_labels(self):
        assert government_of("Gujarat") == "Government of Gujarat"
        assert government_of("Delhi") == "Government of NCT of Delhi"
        assert is_recognized_label("Government of Gujarat")
        assert is_recognized_label("Central Government")
        assert is_recognized_label("Foxconn (Hon Hai Precision Industry)")
        assert not is_recognized_label("Acme Widgets")
