from .transactions import TransactionBase, TransactionOut, TransactionCandidate
from .duplicates import (
    DeduplicationResponse,
    DuplicatePreviewGroup,
    DuplicatePreviewResponse,
    ValidationResponse,
    FailureResponse
)
