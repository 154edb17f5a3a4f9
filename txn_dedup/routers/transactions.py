import logging
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from typing import Optional

from .. import schemas, services
from ..services import TransactionStore, WindowPolicy, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["Transactions"])


def _failure(message: str, **extra) -> JSONResponse:
    # Callers only ever see the generic message, the real error goes to the log
    content = schemas.FailureResponse(message=message).model_dump(by_alias=True)
    content.update(extra)
    return JSONResponse(status_code=500, content=content)


@router.post(
    "/deduplicate",
    response_model=schemas.DeduplicationResponse,
    response_model_exclude_none=True,
)
async def deduplicate_transactions(
    window_ms: Optional[int] = Query(None, ge=0, alias="windowMs"),
    policy: Optional[WindowPolicy] = None,
    store: TransactionStore = Depends(get_store)
):
    """
    Removes duplicate transactions, keeping the earliest of each group.
    """
    try:
        return await services.deduplicate_transactions(store, window_ms=window_ms, policy=policy)
    except Exception:
        logger.exception("[Dedup] Error deduplicating transactions")
        return _failure("Failed to deduplicate transactions")


@router.get(
    "/duplicates",
    response_model=schemas.DuplicatePreviewResponse,
    response_model_exclude_none=True,
)
async def get_potential_duplicates(
    window_ms: Optional[int] = Query(None, ge=0, alias="windowMs"),
    policy: Optional[WindowPolicy] = None,
    store: TransactionStore = Depends(get_store)
):
    """
    Dry run: shows which transactions a deduplication would remove.
    """
    try:
        return await services.preview_duplicates(store, window_ms=window_ms, policy=policy)
    except Exception:
        logger.exception("[Dedup] Error scanning for duplicate transactions")
        return _failure("Failed to scan for duplicate transactions")


@router.post(
    "/validate",
    response_model=schemas.ValidationResponse,
    response_model_exclude_none=True,
)
async def validate_transaction(
    candidate: schemas.TransactionCandidate,
    store: TransactionStore = Depends(get_store)
):
    try:
        return await services.validate_transaction(store, candidate)
    except Exception:
        logger.exception("[Validate] Error validating transaction")
        return _failure("Failed to validate transaction", isDuplicate=False)
