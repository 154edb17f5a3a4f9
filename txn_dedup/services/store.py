import logging
from datetime import datetime
from typing import Iterable, List, Protocol, Set

from fastapi import Depends
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..exceptions import StorageError
from .. import models, schemas

logger = logging.getLogger(__name__)


class TransactionStore(Protocol):
    async def list_transactions(self) -> List[schemas.TransactionOut]: ...

    async def list_since(self, since: datetime) -> List[schemas.TransactionOut]: ...

    async def exists(self, txn_id: str) -> bool: ...

    async def existing_ids(self, ids: Iterable[str]) -> Set[str]: ...

    async def delete_batch(self, ids: Iterable[str]) -> int: ...


class SqlTransactionStore:
    """TransactionStore backed by the transactions table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_transactions(self) -> List[schemas.TransactionOut]:
        stmt = select(models.Transaction).order_by(
            models.Transaction.date.asc(), models.Transaction.created_at.asc()
        )
        return await self._fetch(stmt, "read")

    async def list_since(self, since: datetime) -> List[schemas.TransactionOut]:
        stmt = (
            select(models.Transaction)
            .where(models.Transaction.date >= since)
            .order_by(models.Transaction.date.desc())
        )
        return await self._fetch(stmt, "recent read")

    async def exists(self, txn_id: str) -> bool:
        return txn_id in await self.existing_ids([txn_id])

    async def existing_ids(self, ids: Iterable[str]) -> Set[str]:
        ids = list(ids)
        if not ids:
            return set()
        stmt = select(models.Transaction.id).where(models.Transaction.id.in_(ids))
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError("existence check", e) from e
        return set(result.scalars().all())

    async def delete_batch(self, ids: Iterable[str]) -> int:
        """Delete every id in one commit. On failure nothing is deleted."""
        ids = list(ids)
        if not ids:
            return 0
        stmt = (
            delete(models.Transaction)
            .where(models.Transaction.id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"[Store] Batch delete of {len(ids)} transactions rolled back")
            raise StorageError("batch commit", e) from e
        return result.rowcount

    async def _fetch(self, stmt, operation: str) -> List[schemas.TransactionOut]:
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(operation, e) from e
        return [schemas.TransactionOut.model_validate(t) for t in result.scalars().all()]


# Dependency for Routes
async def get_store(db: AsyncSession = Depends(get_db)) -> TransactionStore:
    return SqlTransactionStore(db)
