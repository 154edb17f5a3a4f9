import os

# Must be set before txn_dedup.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime, timedelta, timezone

import pytest

from txn_dedup import schemas
from txn_dedup.exceptions import StorageError

T0 = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_txn(txn_id, seconds=0, gas_type="LPG", kgs=9.0, payment_method="cash", **extra):
    return schemas.TransactionOut(
        id=txn_id,
        date=T0 + timedelta(seconds=seconds),
        gas_type=gas_type,
        kgs=kgs,
        payment_method=payment_method,
        total=kgs * 2.5,
        currency="USD",
        **extra,
    )


class FakeStore:
    """In-memory TransactionStore that records what was asked of it."""

    def __init__(self, transactions=(), fail_on=None):
        self.rows = {t.id: t for t in transactions}
        self.fail_on = fail_on
        self.batches = []
        self.checked = []
        # ids that vanish between the read and the existence check
        self.vanish_after_read = set()

    def _maybe_fail(self, operation):
        if self.fail_on == operation:
            raise StorageError(operation, RuntimeError("boom"))

    async def list_transactions(self):
        self._maybe_fail("read")
        rows = sorted(self.rows.values(), key=lambda t: t.date)
        for txn_id in self.vanish_after_read:
            self.rows.pop(txn_id, None)
        return rows

    async def list_since(self, since):
        self._maybe_fail("recent read")
        return sorted((t for t in self.rows.values() if t.date >= since), key=lambda t: t.date, reverse=True)

    async def exists(self, txn_id):
        return txn_id in await self.existing_ids([txn_id])

    async def existing_ids(self, ids):
        self._maybe_fail("existence check")
        ids = list(ids)
        self.checked.extend(ids)
        return {i for i in ids if i in self.rows}

    async def delete_batch(self, ids):
        self._maybe_fail("batch commit")
        ids = list(ids)
        self.batches.append(ids)
        for i in ids:
            self.rows.pop(i, None)
        return len(ids)


@pytest.fixture
def fake_store():
    return FakeStore()
