# backend/app/api/budgets.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.app import crud
from backend.app.db import get_db
from backend.app.schemas import MONTH_PATTERN, BudgetIn, BudgetOut, MessageOut

router = APIRouter()


@router.get("", response_model=List[BudgetOut])
def list_budgets(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    db: Session = Depends(get_db),
):
    return crud.list_budgets(db, month)


@router.post("", response_model=BudgetOut, status_code=201)
def upsert_budget(budget: BudgetIn, db: Session = Depends(get_db)):
    """Create the budget for (category, month), or overwrite the existing one."""
    return crud.upsert_budget(db, budget)


@router.delete("/{budget_id}", response_model=MessageOut)
def delete_budget(budget_id: int, db: Session = Depends(get_db)):
    crud.delete_budget(db, budget_id)
    return {"message": "Budget deleted successfully"}
