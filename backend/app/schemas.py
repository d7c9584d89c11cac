# backend/app/schemas.py
from datetime import datetime, timezone
from typing import Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Shared constraints; the ORM check constraints are built from these too
MIN_TRANSACTION_AMOUNT = 0.01
MIN_BUDGET_AMOUNT = 0.0
MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

TransactionType = Literal["income", "expense"]
TRANSACTION_TYPES = get_args(TransactionType)


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


# Pydantic schema for incoming transaction objects (used for validation)
class TransactionIn(_Input):
    amount: float = Field(ge=MIN_TRANSACTION_AMOUNT, allow_inf_nan=False)
    date: datetime
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    type: TransactionType

    @field_validator("date")
    @classmethod
    def _naive_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class TransactionOut(TransactionIn):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BudgetIn(_Input):
    category: str = Field(min_length=1)
    amount: float = Field(ge=MIN_BUDGET_AMOUNT, allow_inf_nan=False)
    month: str = Field(pattern=MONTH_PATTERN)


class BudgetOut(BudgetIn):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryIn(_Input):
    name: str = Field(min_length=1)
    type: TransactionType


class MessageOut(BaseModel):
    message: str


class CategoryCreated(MessageOut):
    category: str


class ImportResult(MessageOut):
    count: int


class MonthlyTotals(BaseModel):
    month: str
    income: float
    expenses: float


class CategoryTotal(BaseModel):
    category: str
    amount: float


class BudgetStatus(BaseModel):
    id: Optional[int] = None
    category: str
    month: str
    budgeted: float
    actual: float
    remaining: float
    overspent: float
    percent_spent: float
    status: Literal["over", "under"]


class TopCategory(BaseModel):
    name: str
    amount: float


class MonthlySummary(BaseModel):
    month: str
    income: float
    expenses: float
    balance: float
    income_change: float
    expenses_change: float
    top_category: TopCategory
