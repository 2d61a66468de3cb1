"""
Rupee amount parsing. Canonical unit is crore (1 crore = 10^7, 1 lakh = 1/100 crore).

The largest figure in an article is taken as the headline investment;
smaller figures are usually per-unit costs, subsidies or earlier phases.

    >>> max_amount_crore("₹1.5 lakh crore investment")
    150000.0
    >>> max_amount_crore("75 lakh investment, later raised to ₹500 crore")
    500.0
"""

import math
import re
from typing import Optional

_NUMBER = r"(\d{1,3}(?:,\d{2,3})+(?:\.\d+)?|\d+(?:\.\d+)?)"
_CURRENCY = r"(?:₹|rs\.?|inr)?\s*"

# "₹1.5 lakh crore" -> 1.5 * 100000 crore
LAKH_CRORE_PATTERN = re.compile(
    _CURRENCY + _NUMBER + r"\s*-?\s*(?:lakh|lac)\s*-?\s*(?:crores?|cr)\b", re.IGNORECASE
)
# "₹500 crore", "Rs 1,200-crore", "INR 45 cr"
CRORE_PATTERN = re.compile(
    _CURRENCY + _NUMBER + r"\s*-?\s*(?:crores?|cr)\b", re.IGNORECASE
)
# "75 lakh", "Rs 40 lac"
LAKH_PATTERN = re.compile(
    _CURRENCY + _NUMBER + r"\s*-?\s*(?:lakhs?|lacs?)\b(?!\s*-?\s*(?:crores?|cr)\b)", re.IGNORECASE
)


def _to_number(raw: str) -> Optional[float]:
    try:
        value = float(raw.replace(",", ""))
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def all_amounts_crore(text: Optional[str]) -> list[float]:
    """Every crore/lakh mention in text, converted to crore, in text order."""
    if not text:
        return []
    t = text.replace("\u00a0", " ")
    found: list[tuple[int, float]] = []
    consumed: list[tuple[int, int]] = []

    for match in LAKH_CRORE_PATTERN.finditer(t):
        value = _to_number(match.group(1))
        consumed.append(match.span())
        if value is not None:
            found.append((match.start(), value * 100000))

    def _overlaps(span: tuple[int, int]) -> bool:
        return any(span[0] < end and start < span[1] for start, end in consumed)

    for match in CRORE_PATTERN.finditer(t):
        if _overlaps(match.span()):
            continue
        value = _to_number(match.group(1))
        if value is not None:
            found.append((match.start(), value))

    for match in LAKH_PATTERN.finditer(t):
        if _overlaps(match.span()):
            continue
        value = _to_number(match.group(1))
        if value is not None:
            found.append((match.start(), value / 100))

    return [value for _, value in sorted(found)]


def max_amount_crore(text: Optional[str]) -> Optional[float]:
    """Largest amount (in crore) mentioned anywhere in text, or None."""
    amounts = all_amounts_crore(text)
    return max(amounts) if amounts else None


def amount_is_attested(amount: Optional[float], text: Optional[str], tolerance: float = 0.01) -> bool:
    """
    True if a claimed crore amount is backed by the text: either a parsed
    mention within tolerance, or the number itself appearing literally.
    """
    if amount is None:
        return True
    for mention in all_amounts_crore(text):
        if abs(mention - amount) <= tolerance * max(mention, amount):
            return True
    if not text:
        return False
    literal = f"{amount:g}"
    digits = text.replace(",", "")
    return re.search(rf"(?<![\d.]){re.escape(literal)}(?![\d])", digits) is not None
