"""
Search filter normalization.
Turns raw, untrusted query parameters into a SearchCriteria without ever failing.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple
import logging
import re

from app.schemas.search import SearchCriteria, NormalizedSearch
from app.utils.validators import TRUTHY_TOKENS, FALSY_TOKENS

logger = logging.getLogger(__name__)

GENDER_OPTIONS = ("male", "female", "any")
LEADING_INTEGER = re.compile(r"[+-]?\d+")


def _text(value: Any) -> Optional[str]:
    # Repeated query keys arrive as lists; the last one wins
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_amount(value: Any) -> Tuple[Optional[Decimal], bool]:
    """Returns (amount, ignored). Blank is absent, not ignored."""
    text = _text(value)
    if text is None:
        return None, False
    try:
        amount = Decimal(text)
    except (InvalidOperation, ValueError):
        return None, True
    if not amount.is_finite() or amount <= 0:
        return None, True
    return amount, False


def _furnished(value: Any) -> Tuple[Optional[bool], bool]:
    if isinstance(value, bool):
        return value, False
    text = _text(value)
    if text is None:
        return None, False
    token = text.lower()
    if token in TRUTHY_TOKENS:
        return True, False
    if token in FALSY_TOKENS:
        return False, False
    return None, True


def _page(value: Any) -> Tuple[int, bool]:
    """Leading integer of the text, so "2.5" and "2abc" give 2; no digits gives (1, ignored)."""
    text = _text(value)
    if text is None:
        return 1, False
    match = LEADING_INTEGER.match(text)
    if match is None:
        return 1, True
    try:
        page = int(match.group())
    except ValueError:
        # Beyond the interpreter's integer string conversion limit
        return 1, True
    return max(page, 1), False


def normalize_search_params(raw: Mapping[str, Any]) -> NormalizedSearch:
    """
    Normalize raw search parameters.

    Recognized keys are city, min, max, gender, furnished, search and page.
    Values that cannot be interpreted are dropped and their key is reported
    in ``ignored``; the corresponding filter is simply not applied.

    - city, search: trimmed; empty means no filter
    - min, max: decimal rent bounds, must be greater than zero
    - gender: one of male, female, any (case-insensitive)
    - furnished: tri-state; blank means no filter
    - page: leading integer clamped to at least 1; text without one becomes 1

    Inverted rent bounds are passed through unchanged.
    """
    ignored = []

    min_rent, dropped = _positive_amount(raw.get("min"))
    if dropped:
        ignored.append("min")

    max_rent, dropped = _positive_amount(raw.get("max"))
    if dropped:
        ignored.append("max")

    gender = _text(raw.get("gender"))
    if gender is not None:
        gender = gender.lower()
        if gender not in GENDER_OPTIONS:
            ignored.append("gender")
            gender = None

    furnished, dropped = _furnished(raw.get("furnished"))
    if dropped:
        ignored.append("furnished")

    page, dropped = _page(raw.get("page"))
    if dropped:
        ignored.append("page")

    criteria = SearchCriteria(
        city=_text(raw.get("city")),
        min_rent=min_rent,
        max_rent=max_rent,
        gender=gender,
        furnished=furnished,
        search=_text(raw.get("search")),
        page=page,
    )

    if ignored:
        logger.debug(f"Ignored search parameters: {', '.join(ignored)}")

    return NormalizedSearch(criteria=criteria, ignored=tuple(ignored))
