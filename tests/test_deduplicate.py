"""Test the deduplication workflow against an in-memory store."""

import pytest

from txn_dedup.exceptions import StorageError
from txn_dedup.services import WindowPolicy, deduplicate_transactions, preview_duplicates
from tests.conftest import FakeStore, make_txn


@pytest.mark.asyncio
async def test_empty_store_reports_nothing_and_commits_nothing():
    store = FakeStore()
    result = await deduplicate_transactions(store, window_ms=60000)

    assert result.success is True
    assert result.removed_count == 0
    assert result.message == "No duplicate transactions found"
    assert result.duplicate_groups is None
    assert store.batches == []


@pytest.mark.asyncio
async def test_keeps_earliest_and_removes_rest_in_one_batch():
    store = FakeStore([
        make_txn("A", 0), make_txn("B", 30), make_txn("C", 300),
        make_txn("D", 5, gas_type="CO2"), make_txn("E", 20, gas_type="CO2"),
    ])
    result = await deduplicate_transactions(store, window_ms=60000)

    assert result.removed_count == 2
    assert result.message == "Successfully removed 2 duplicate transactions"
    assert len(store.batches) == 1
    assert sorted(store.batches[0]) == ["B", "E"]
    assert sorted(store.rows) == ["A", "C", "D"]
    assert [[t.id for t in g] for g in result.duplicate_groups] == [["A", "B"], ["D", "E"]]


@pytest.mark.asyncio
async def test_second_run_is_a_no_op():
    store = FakeStore([make_txn("a", 0), make_txn("b", 10), make_txn("c", 20)])
    first = await deduplicate_transactions(store, window_ms=60000)
    second = await deduplicate_transactions(store, window_ms=60000)

    assert first.removed_count == 2
    assert second.removed_count == 0
    assert second.duplicate_groups is None
    assert len(store.batches) == 1


@pytest.mark.asyncio
async def test_vanished_candidate_is_skipped_silently():
    store = FakeStore([make_txn("a", 0), make_txn("b", 10), make_txn("c", 20)])
    store.vanish_after_read = {"b"}

    result = await deduplicate_transactions(store, window_ms=60000)

    assert result.success is True
    assert result.removed_count == 1
    assert store.batches == [["c"]]
    # Groups are still reported in full
    assert [t.id for t in result.duplicate_groups[0]] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_all_candidates_vanished_skips_commit():
    store = FakeStore([make_txn("a", 0), make_txn("b", 10)])
    store.vanish_after_read = {"b"}

    result = await deduplicate_transactions(store, window_ms=60000)

    assert result.removed_count == 0
    assert result.message == "Successfully removed 0 duplicate transactions"
    assert store.batches == []


@pytest.mark.asyncio
async def test_existence_is_checked_for_removals_only():
    store = FakeStore([make_txn("a", 0), make_txn("b", 10)])
    await deduplicate_transactions(store, window_ms=60000)
    assert store.checked == ["b"]


@pytest.mark.asyncio
async def test_chain_policy_is_passed_through():
    store = FakeStore([make_txn("a", 0), make_txn("b", 40), make_txn("c", 80)])
    result = await deduplicate_transactions(store, window_ms=60000, policy=WindowPolicy.CHAIN)
    assert result.removed_count == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["read", "existence check", "batch commit"])
async def test_storage_failure_propagates(operation):
    store = FakeStore([make_txn("a", 0), make_txn("b", 10)], fail_on=operation)

    with pytest.raises(StorageError):
        await deduplicate_transactions(store, window_ms=60000)
    assert sorted(store.rows) == ["a", "b"]


@pytest.mark.asyncio
async def test_preview_never_deletes():
    store = FakeStore([make_txn("a", 0), make_txn("b", 10), make_txn("c", 20), make_txn("x", 0, kgs=1.0)])
    result = await preview_duplicates(store, window_ms=60000)

    assert result.group_count == 1
    assert result.removal_count == 2
    assert result.groups[0].survivor.id == "a"
    assert [t.id for t in result.groups[0].removals] == ["b", "c"]
    assert store.batches == []
    assert len(store.rows) == 4


@pytest.mark.asyncio
async def test_preview_without_duplicates():
    result = await preview_duplicates(FakeStore([make_txn("a")]), window_ms=60000)
    assert result.group_count == 0
    assert result.groups == []
    assert result.message == "No duplicate transactions found"
