"""
State detection from article text.

StateMatcher compiles one detection regex per state from the alias table
(names case-insensitive, abbreviations case-sensitive, major cities) and
answers three questions:

    match_states(text)              -> states mentioned, in table order
    is_explicit_for_state(text, s)  -> is state s mentioned?
    canonical_state(value)          -> "Orissa" -> "Odisha", unknown -> None
"""

import re
from typing import Optional

from ..config.states import STATE_TABLE, StateAlias


def _alternation(fragments: tuple[str, ...]) -> str:
    return "|".join(fragments)


class StateMatcher:
    """Alias-table based state matcher. Tables are injected, never mutated."""

    def __init__(self, table: tuple[StateAlias, ...] = STATE_TABLE):
        self._table = table
        self._detectors: dict[str, list[re.Pattern]] = {}
        self._canonical: dict[str, str] = {}

        for alias in table:
            patterns = []
            names_and_cities = alias.names + tuple(re.escape(c) for c in alias.cities)
            patterns.append(
                re.compile(rf"(?<!\w)(?:{_alternation(names_and_cities)})(?!\w)", re.IGNORECASE)
            )
            if alias.abbreviations:
                abbrevs = _alternation(tuple(re.escape(a) for a in alias.abbreviations))
                patterns.append(re.compile(rf"(?<![\w&])(?:{abbrevs})(?![\w&])"))
            self._detectors[alias.state] = patterns

            self._canonical[self._key(alias.state)] = alias.state

        self._name_patterns = [
            (alias.state, re.compile(rf"^(?:{_alternation(alias.names)})$", re.IGNORECASE))
            for alias in table
        ]

    @staticmethod
    def _key(value: str) -> str:
        return re.sub(r"\s+", " ", value.strip().lower())

    @property
    def states(self) -> tuple[str, ...]:
        return tuple(a.state for a in self._table)

    def match_states(self, text: Optional[str]) -> list[str]:
        """All states mentioned in text, in table order."""
        if not text:
            return []
        t = text.replace("\u00a0", " ")
        return [
            state for state, patterns in self._detectors.items()
            if any(p.search(t) for p in patterns)
        ]

    def is_explicit_for_state(self, text: Optional[str], state: Optional[str]) -> bool:
        if not text or not state:
            return False
        patterns = self._detectors.get(state)
        if patterns is None:
            canonical = self.canonical_state(state)
            patterns = self._detectors.get(canonical) if canonical else None
        if not patterns:
            return False
        t = text.replace("\u00a0", " ")
        return any(p.search(t) for p in patterns)

    def canonical_state(self, value: Optional[str]) -> Optional[str]:
        """Map a state name variant to its canonical name (cities are not accepted)."""
        if not value or not isinstance(value, str):
            return None
        stripped = value.strip()
        if not stripped:
            return None
        exact = self._canonical.get(self._key(stripped))
        if exact:
            return exact
        # Abbreviations are case-sensitive ("UP" yes, "up" no)
        for alias in self._table:
            if stripped in alias.abbreviations:
                return alias.state
        for state, pattern in self._name_patterns:
            if pattern.match(stripped):
                return state
        return None

    def state_is_attested(self, state: Optional[str], text: Optional[str]) -> bool:
        """True if the text mentions the state by name, abbreviation or city."""
        return self.is_explicit_for_state(text, state)


# Module-level default matcher (tables are immutable, so sharing is safe)
default_matcher = StateMatcher()


def canonical_state(value: Optional[str]) -> Optional[str]:
    return default_matcher.canonical_state(value)


def match_states(text: Optional[str]) -> list[str]:
    return default_matcher.match_states(text)


def is_explicit_for_state(text: Optional[str], state: Optional[str]) -> bool:
    return default_matcher.is_explicit_for_state(text, state)
