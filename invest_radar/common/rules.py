"""
Keyword rule tables.

Every keyword family the pipeline consults (sectors, government hints, PSU
names, relevance terms) is declared as a versioned, immutable RuleTable.
Matching is done by one evaluator instead of ad hoc regexes per module:

    table.first_match(text)   -> label of the first matching rule (table order)
    table.matches(label, text) -> does any rule for this label match?

Term syntax for KeywordRule.terms():
    "steel"     whole word
    "pharma*"   word prefix (matches pharma, pharmaceutical, ...)
"""

import re
from dataclasses import dataclass
from typing import Optional


def _term_pattern(term: str, whole_word: bool) -> str:
    if not whole_word:
        return re.escape(term)
    if term.endswith("*"):
        return r"(?<!\w)" + re.escape(term[:-1])
    return r"(?<!\w)" + re.escape(term) + r"(?!\w)"


@dataclass(frozen=True)
class KeywordRule:
    """One labelled pattern in a rule table."""

    label: str
    pattern: re.Pattern

    @classmethod
    def terms(
        cls,
        label: str,
        *terms: str,
        case_sensitive: bool = False,
        whole_word: bool = True,
    ) -> "KeywordRule":
        """Build a rule matching any of the given literal terms."""
        body = "|".join(_term_pattern(t, whole_word) for t in terms)
        flags = 0 if case_sensitive else re.IGNORECASE
        return cls(label=label, pattern=re.compile(f"(?:{body})", flags))

    @classmethod
    def regex(cls, label: str, pattern: str, case_sensitive: bool = False) -> "KeywordRule":
        """Build a rule from a raw regular expression."""
        flags = 0 if case_sensitive else re.IGNORECASE
        return cls(label=label, pattern=re.compile(pattern, flags))

    def matches(self, text: Optional[str]) -> bool:
        return bool(text) and self.pattern.search(text) is not None


@dataclass(frozen=True)
class RuleTable:
    """Ordered, versioned collection of keyword rules."""

    name: str
    version: str
    rules: tuple[KeywordRule, ...]

    @property
    def labels(self) -> tuple[str, ...]:
        seen: list[str] = []
        for rule in self.rules:
            if rule.label not in seen:
                seen.append(rule.label)
        return tuple(seen)

    def first_match(self, *texts: Optional[str]) -> Optional[str]:
        """Label of the first rule (in table order) matching any of the texts."""
        for rule in self.rules:
            if any(rule.matches(t) for t in texts):
                return rule.label
        return None

    def matches(self, label: str, *texts: Optional[str]) -> bool:
        """True if any rule carrying `label` matches any of the texts."""
        return any(
            rule.matches(t)
            for rule in self.rules
            if rule.label == label
            for t in texts
        )
