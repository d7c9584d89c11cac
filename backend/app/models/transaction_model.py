# backend/app/models/transaction_model.py
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Integer, String

from backend.app.db import Base
from backend.app.schemas import MIN_TRANSACTION_AMOUNT, TRANSACTION_TYPES


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint(f"amount >= {MIN_TRANSACTION_AMOUNT}", name="ck_transactions_amount"),
        CheckConstraint(
            "type IN (%s)" % ", ".join(f"'{t}'" for t in TRANSACTION_TYPES),
            name="ck_transactions_type",
        ),
        CheckConstraint("length(description) > 0", name="ck_transactions_description"),
        CheckConstraint("length(category) > 0", name="ck_transactions_category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Float, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    description = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    type = Column(String(16), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
