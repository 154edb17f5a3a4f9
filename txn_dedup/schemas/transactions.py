from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class TransactionBase(BaseModel):
    # Wire format is camelCase (gasType, paymentMethod, createdAt...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    gas_type: Optional[str] = None
    kgs: Optional[float] = None
    payment_method: Optional[str] = None
    total: Optional[float] = None
    currency: Optional[str] = None
    reason: Optional[str] = None
    is_restock: Optional[bool] = None
    customer_name: Optional[str] = None
    phone_number: Optional[str] = None
    due_date: Optional[datetime] = None
    paid: Optional[bool] = None
    paid_date: Optional[datetime] = None


class TransactionOut(TransactionBase):
    id: str
    date: datetime
    created_at: Optional[datetime] = None


class TransactionCandidate(TransactionBase):
    """A transaction that has not been stored yet. Missing date means 'now'."""
    id: Optional[str] = None
    date: Optional[datetime] = None
