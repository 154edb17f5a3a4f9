import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..config import settings
from .. import schemas
from .duplicates import is_duplicate_transaction
from .matching import Matcher, build_matcher
from .store import TransactionStore

logger = logging.getLogger(__name__)


async def validate_transaction(
    store: TransactionStore,
    candidate: schemas.TransactionCandidate,
    window_ms: Optional[int] = None,
    lookback_ms: Optional[int] = None,
    matcher: Optional[Matcher] = None,
    now: Optional[datetime] = None,
) -> schemas.ValidationResponse:
    """
    Checks a transaction against recently stored ones before it is added.
    Only transactions dated within lookback_ms of now are considered.
    """
    window_ms = settings.DEDUP_WINDOW_MS if window_ms is None else window_ms
    lookback_ms = settings.VALIDATE_LOOKBACK_MS if lookback_ms is None else lookback_ms
    matcher = matcher or build_matcher()
    now = now or datetime.now(timezone.utc)

    recent = await store.list_since(now - timedelta(milliseconds=lookback_ms))

    # A candidate without a date is happening right now
    probe = candidate if candidate.date else candidate.model_copy(update={"date": now})

    for existing in recent:
        if is_duplicate_transaction(existing, probe, window_ms, matcher):
            logger.info(f"[Validate] Candidate duplicates transaction {existing.id}")
            return schemas.ValidationResponse(
                success=False,
                is_duplicate=True,
                message="This appears to be a duplicate transaction",
                existing_transaction=existing,
            )

    return schemas.ValidationResponse(
        success=True,
        is_duplicate=False,
        message="Transaction is valid",
    )
