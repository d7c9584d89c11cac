from sqlalchemy import Column, Integer, String, UniqueConstraint

from backend.app.db import Base

EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Groceries",
    "Housing",
    "Transportation",
    "Utilities",
    "Healthcare",
    "Entertainment",
    "Shopping",
    "Education",
    "Personal Care",
    "Travel",
    "Insurance",
    "Debt Payments",
    "Gifts & Donations",
    "Other",
]

INCOME_CATEGORIES = [
    "Salary",
    "Freelance",
    "Investments",
    "Business",
    "Rental",
    "Gifts",
    "Refunds",
    "Other",
]


class Category(Base):
    """User-defined category, shown after the built-in names."""

    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("name", "type", name="uq_categories_name_type"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    type = Column(String(16), nullable=False)
