import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Float, Boolean, DateTime, Text
from .database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(String, primary_key=True, index=True, default=_new_id)
    date = Column(DateTime(timezone=True), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    gas_type = Column(String, index=True)
    kgs = Column(Float)
    payment_method = Column(String)  # cash, card, credit
    total = Column(Float)
    currency = Column(String, default="USD")
    reason = Column(Text, nullable=True)
    is_restock = Column(Boolean, default=False)

    # Credit sales
    customer_name = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    paid = Column(Boolean, nullable=True)
    paid_date = Column(DateTime(timezone=True), nullable=True)
