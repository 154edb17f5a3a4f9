from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from .transactions import TransactionOut


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeduplicationResponse(CamelModel):
    success: bool = True
    message: str
    removed_count: int = 0
    duplicate_groups: Optional[List[List[TransactionOut]]] = None


class DuplicatePreviewGroup(CamelModel):
    survivor: TransactionOut
    removals: List[TransactionOut]


class DuplicatePreviewResponse(CamelModel):
    success: bool = True
    message: str
    group_count: int = 0
    removal_count: int = 0
    groups: List[DuplicatePreviewGroup] = []


class ValidationResponse(CamelModel):
    success: bool
    is_duplicate: bool
    message: str
    existing_transaction: Optional[TransactionOut] = None


class FailureResponse(CamelModel):
    success: bool = False
    message: str
