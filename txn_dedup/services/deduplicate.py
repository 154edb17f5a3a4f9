import logging
from typing import List, Optional

from ..config import settings
from .. import schemas
from .duplicates import WindowPolicy, find_duplicate_groups, select_survivor_and_removals
from .matching import Matcher, build_matcher
from .store import TransactionStore

logger = logging.getLogger(__name__)


def _resolve(window_ms, matcher, policy):
    window_ms = settings.DEDUP_WINDOW_MS if window_ms is None else window_ms
    matcher = matcher or build_matcher()
    policy = WindowPolicy(policy or settings.DEDUP_WINDOW_POLICY)
    return window_ms, matcher, policy


async def deduplicate_transactions(
    store: TransactionStore,
    window_ms: Optional[int] = None,
    matcher: Optional[Matcher] = None,
    policy: Optional[WindowPolicy] = None,
) -> schemas.DeduplicationResponse:
    """
    Keep the earliest transaction of every duplicate group and delete the rest.

    Removal candidates are re-checked right before the delete so records removed
    by someone else in the meantime are skipped instead of failing the batch.
    All verified deletions go out in a single atomic commit.
    """
    window_ms, matcher, policy = _resolve(window_ms, matcher, policy)

    # 1. Fetch everything, oldest first
    transactions = await store.list_transactions()

    # 2. Group
    duplicate_groups = find_duplicate_groups(transactions, window_ms, matcher, policy)
    if not duplicate_groups:
        logger.info(f"[Dedup] No duplicates among {len(transactions)} transactions")
        return schemas.DeduplicationResponse(
            success=True,
            message="No duplicate transactions found",
            removed_count=0,
        )

    logger.info(
        f"[Dedup] Found {len(duplicate_groups)} duplicate groups "
        f"(window={window_ms}ms, policy={policy.value})"
    )

    # 3. Pick survivors and verify the rest still exist
    sorted_groups: List[List[schemas.TransactionOut]] = []
    to_delete: List[str] = []
    for group in duplicate_groups:
        keep, duplicates_to_remove = select_survivor_and_removals(group)
        sorted_groups.append([keep, *duplicates_to_remove])

        candidate_ids = [t.id for t in duplicates_to_remove]
        still_there = await store.existing_ids(candidate_ids)
        for txn_id in candidate_ids:
            if txn_id in still_there:
                to_delete.append(txn_id)
            else:
                logger.debug(f"[Dedup] {txn_id} already gone, skipping")

    # 4. One atomic batch
    if to_delete:
        deleted = await store.delete_batch(to_delete)
        if deleted != len(to_delete):
            logger.warning(f"[Dedup] Batch reported {deleted} deletions, expected {len(to_delete)}")

    removed_count = len(to_delete)
    logger.info(f"[Dedup] Removed {removed_count} duplicate transactions")

    return schemas.DeduplicationResponse(
        success=True,
        message=f"Successfully removed {removed_count} duplicate transactions",
        removed_count=removed_count,
        duplicate_groups=sorted_groups,
    )


async def preview_duplicates(
    store: TransactionStore,
    window_ms: Optional[int] = None,
    matcher: Optional[Matcher] = None,
    policy: Optional[WindowPolicy] = None,
) -> schemas.DuplicatePreviewResponse:
    """Same grouping as deduplicate_transactions, without deleting anything."""
    window_ms, matcher, policy = _resolve(window_ms, matcher, policy)

    transactions = await store.list_transactions()
    groups = []
    for group in find_duplicate_groups(transactions, window_ms, matcher, policy):
        survivor, removals = select_survivor_and_removals(group)
        groups.append(schemas.DuplicatePreviewGroup(survivor=survivor, removals=removals))

    removal_count = sum(len(g.removals) for g in groups)
    if groups:
        message = f"Found {len(groups)} duplicate groups ({removal_count} removable transactions)"
    else:
        message = "No duplicate transactions found"

    return schemas.DuplicatePreviewResponse(
        success=True,
        message=message,
        group_count=len(groups),
        removal_count=removal_count,
        groups=groups,
    )
