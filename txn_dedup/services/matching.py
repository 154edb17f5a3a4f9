"""
Matching predicates decide whether two transactions describe the same sale.
Time proximity is handled separately by the window check in duplicates.py.
"""
from typing import Callable, Iterable, Optional
from rapidfuzz import fuzz

from ..config import settings

Matcher = Callable[[object, object], bool]

DEFAULT_MATCH_FIELDS = ("gas_type", "kgs", "payment_method")


def field_matcher(fields: Iterable[str] = DEFAULT_MATCH_FIELDS) -> Matcher:
    """Exact equality on every named attribute."""
    fields = tuple(fields)
    if not fields:
        raise ValueError("field_matcher needs at least one field")

    def _match(t1, t2) -> bool:
        return all(getattr(t1, f, None) == getattr(t2, f, None) for f in fields)

    return _match


def fuzzy_field_matcher(field: str, threshold: int = 80) -> Matcher:
    """
    Case-insensitive partial similarity on a free-text attribute
    (e.g. customer_name). Two empty values count as a match.
    """
    def _match(t1, t2) -> bool:
        v1 = (getattr(t1, field, None) or "").lower()
        v2 = (getattr(t2, field, None) or "").lower()
        if not v1 and not v2:
            return True
        return fuzz.partial_ratio(v1, v2) > threshold

    return _match


def all_of(*matchers: Matcher) -> Matcher:
    def _match(t1, t2) -> bool:
        return all(m(t1, t2) for m in matchers)

    return _match


def build_matcher(
    fields: Optional[Iterable[str]] = None,
    fuzzy_field: Optional[str] = None,
    fuzzy_threshold: Optional[int] = None,
) -> Matcher:
    """Assemble the configured predicate, falling back to the env settings."""
    fields = settings.DEDUP_MATCH_FIELDS if fields is None else fields
    fuzzy_field = settings.DEDUP_FUZZY_FIELD if fuzzy_field is None else fuzzy_field
    fuzzy_threshold = settings.DEDUP_FUZZY_THRESHOLD if fuzzy_threshold is None else fuzzy_threshold

    matcher = field_matcher(fields)
    if fuzzy_field:
        matcher = all_of(matcher, fuzzy_field_matcher(fuzzy_field, fuzzy_threshold))
    return matcher
