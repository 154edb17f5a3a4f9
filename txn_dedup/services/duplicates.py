from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Sequence, Tuple, TypeVar

from ..exceptions import InvalidGroupError
from .matching import Matcher, build_matcher

T = TypeVar("T")


class WindowPolicy(str, Enum):
    ANCHOR = "anchor"  # every member within the window of the group's first record
    CHAIN = "chain"    # every member within the window of the previously added record


def to_millis(value) -> int:
    """Epoch milliseconds for a datetime or ISO-8601 string. Naive values are UTC."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        raise TypeError(f"Cannot read a timestamp from {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def sort_by_date(transactions: Sequence[T]) -> List[T]:
    # sorted() is stable, so equal dates keep their input order
    return sorted(transactions, key=lambda t: to_millis(t.date))


def is_duplicate_transaction(t1, t2, window_ms: int = 60000, matcher: Optional[Matcher] = None) -> bool:
    """Two transactions are duplicates if they match and occurred within window_ms."""
    matcher = matcher or build_matcher()
    if not matcher(t1, t2):
        return False
    return abs(to_millis(t1.date) - to_millis(t2.date)) <= window_ms


def find_duplicate_groups(
    transactions: Sequence[T],
    window_ms: int = 60000,
    matcher: Optional[Matcher] = None,
    policy: WindowPolicy = WindowPolicy.ANCHOR,
) -> List[List[T]]:
    """
    Partition transactions into groups of duplicates.

    Each transaction lands in at most one group and singletons are dropped.
    The policy decides which member the window is measured from:
    ANCHOR uses the group's earliest record, CHAIN the most recently added one.
    """
    if window_ms < 0:
        raise ValueError(f"window_ms must be non-negative, got {window_ms}")
    matcher = matcher or build_matcher()
    policy = WindowPolicy(policy)

    ordered = sort_by_date(transactions)
    stamps = [to_millis(t.date) for t in ordered]

    groups: List[List[T]] = []
    processed = set()

    for i, seed in enumerate(ordered):
        if seed.id in processed:
            continue
        processed.add(seed.id)

        group = [seed]
        ref_idx = i
        for j in range(i + 1, len(ordered)):
            # Sorted input: nothing later can be closer to the reference
            if stamps[j] - stamps[ref_idx] > window_ms:
                break
            other = ordered[j]
            if other.id in processed or not matcher(ordered[ref_idx], other):
                continue
            group.append(other)
            processed.add(other.id)
            if policy is WindowPolicy.CHAIN:
                ref_idx = j

        if len(group) > 1:
            groups.append(group)

    return groups


def select_survivor_and_removals(group: Sequence[T]) -> Tuple[T, List[T]]:
    """Keep the earliest transaction, mark the rest for removal."""
    if len(group) < 2:
        raise InvalidGroupError(len(group))
    ordered = sort_by_date(group)
    return ordered[0], ordered[1:]


def filter_duplicate_transactions(
    transactions: Sequence[T],
    window_ms: int = 60000,
    matcher: Optional[Matcher] = None,
    policy: WindowPolicy = WindowPolicy.ANCHOR,
) -> List[T]:
    """Drop every removal candidate, keeping the input order of the rest."""
    ids_to_remove = set()
    for group in find_duplicate_groups(transactions, window_ms, matcher, policy):
        _, removals = select_survivor_and_removals(group)
        ids_to_remove.update(t.id for t in removals)

    return [t for t in transactions if t.id not in ids_to_remove]
