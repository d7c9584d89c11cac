from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Integer, String, UniqueConstraint

from backend.app.db import Base
from backend.app.schemas import MIN_BUDGET_AMOUNT


class Budget(Base):
    __tablename__ = "budgets"
    __table_args__ = (
        # One budget per category per month
        UniqueConstraint("category", "month", name="uq_budgets_category_month"),
        CheckConstraint(f"amount >= {MIN_BUDGET_AMOUNT}", name="ck_budgets_amount"),
        CheckConstraint("length(month) = 7", name="ck_budgets_month"),
    )

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String, index=True, nullable=False)
    amount = Column(Float, nullable=False)
    month = Column(String(7), index=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
