# backend/app/api/reports.py
import csv
from io import StringIO
from typing import Annotated, List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from backend.app import crud
from backend.app.db import get_db
from backend.app.schemas import (
    MONTH_PATTERN,
    BudgetStatus,
    CategoryTotal,
    MonthlySummary,
    MonthlyTotals,
)
from backend.app.services import aggregation

router = APIRouter()

MonthParam = Annotated[
    Optional[str], Query(pattern=MONTH_PATTERN, description="YYYY-MM, defaults to the current month")
]


@router.get("/monthly", response_model=List[MonthlyTotals])
def monthly_totals(db: Session = Depends(get_db)):
    """Income and expenses per month, oldest first."""
    rows = aggregation.group_by_month(crud.list_transactions(db))
    return sorted(rows, key=lambda r: r["month"])


@router.get("/categories", response_model=List[CategoryTotal])
def category_breakdown(
    month: MonthParam = None,
    type: Literal["expense", "income"] = "expense",
    db: Session = Depends(get_db),
):
    month = month or aggregation.current_month_key()
    txns = aggregation.filter_month(crud.list_transactions(db), month)
    # Largest first; ties keep first-seen order
    return sorted(aggregation.group_by_category(txns, type), key=lambda r: -r["amount"])


@router.get("/budget-status", response_model=List[BudgetStatus])
def budget_status(month: MonthParam = None, db: Session = Depends(get_db)):
    month = month or aggregation.current_month_key()
    return aggregation.budget_vs_actual(crud.list_budgets(db, month), crud.list_transactions(db))


@router.get("/summary", response_model=MonthlySummary)
def summary(month: MonthParam = None, db: Session = Depends(get_db)):
    month = month or aggregation.current_month_key()
    return aggregation.monthly_summary(crud.list_transactions(db), month)


@router.get("/download")
def download_report(month: MonthParam = None, db: Session = Depends(get_db)):
    """
    Download the month's expense breakdown (category, total spent, percentage) as CSV
    """
    month = month or aggregation.current_month_key()
    txns = aggregation.filter_month(crud.list_transactions(db), month)
    breakdown = aggregation.group_by_category(txns, "expense")
    total_spent = sum(row["amount"] for row in breakdown)

    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(["Category", "Total Spent", "Percentage"])
    for row in breakdown:
        percent = round((row["amount"] / total_spent) * 100, 2) if total_spent > 0 else 0
        writer.writerow([row["category"], row["amount"], f"{percent}%"])

    output.seek(0)
    return StreamingResponse(
        output,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=report_{month}.csv"},
    )
