# backend/app/services/aggregation.py
"""
Reporting helpers used by the dashboard endpoints.

Everything here is a pure function over in-memory lists of transactions and
budgets: no database access, no exceptions on empty input. Rows may be ORM
objects, pydantic models or plain dicts; fields are read by name.

Money values are rounded to 2 decimals and percentages to 1 decimal on the
way out.
"""
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Iterable, List, Optional

NO_CATEGORY = "None"


def _field(row, name):
    if isinstance(row, Mapping):
        return row[name]
    return getattr(row, name)


def _money(value: float) -> float:
    return round(float(value), 2)


def _pct(value: float) -> float:
    return round(float(value), 1)


def month_key(value) -> str:
    """YYYY-MM of a datetime/date or ISO string; aware datetimes go to UTC first."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{value.year:04d}-{value.month:02d}"


def previous_month(month: str) -> str:
    year, mon = map(int, month.split("-"))
    if mon == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{mon - 1:02d}"


def current_month_key(now: Optional[datetime] = None) -> str:
    return month_key(now or datetime.now(timezone.utc))


def filter_month(transactions: Iterable, month: str) -> list:
    return [t for t in transactions if month_key(_field(t, "date")) == month]


def _total(transactions: Iterable, type_: str) -> float:
    return sum(float(_field(t, "amount")) for t in transactions if _field(t, "type") == type_)


def group_by_month(transactions: Iterable) -> List[dict]:
    """One {month, income, expenses} row per month present, in first-seen order."""
    buckets: dict = {}
    for t in transactions:
        key = month_key(_field(t, "date"))
        row = buckets.setdefault(key, {"month": key, "income": 0.0, "expenses": 0.0})
        if _field(t, "type") == "income":
            row["income"] += float(_field(t, "amount"))
        elif _field(t, "type") == "expense":
            row["expenses"] += float(_field(t, "amount"))
    return [
        {"month": r["month"], "income": _money(r["income"]), "expenses": _money(r["expenses"])}
        for r in buckets.values()
    ]


def group_by_category(transactions: Iterable, type_: str = "expense") -> List[dict]:
    totals: dict = {}
    for t in transactions:
        if _field(t, "type") != type_:
            continue
        cat = _field(t, "category")
        totals[cat] = totals.get(cat, 0.0) + float(_field(t, "amount"))
    return [{"category": cat, "amount": _money(amt)} for cat, amt in totals.items()]


def percent_spent(spending: float, amount: float) -> float:
    # A zero budget reads 0% until anything is spent against it, then 100%
    if amount == 0:
        return 100.0 if spending > 0 else 0.0
    return _pct(spending / amount * 100)


def budget_vs_actual(budgets: Iterable, transactions: Iterable) -> List[dict]:
    spent: dict = {}
    for t in transactions:
        if _field(t, "type") != "expense":
            continue
        key = (month_key(_field(t, "date")), _field(t, "category"))
        spent[key] = spent.get(key, 0.0) + float(_field(t, "amount"))

    out = []
    for b in budgets:
        amount = float(_field(b, "amount"))
        actual = spent.get((_field(b, "month"), _field(b, "category")), 0.0)
        row_id = b.get("id") if isinstance(b, Mapping) else getattr(b, "id", None)
        out.append(
            {
                "id": row_id,
                "category": _field(b, "category"),
                "month": _field(b, "month"),
                "budgeted": _money(amount),
                "actual": _money(actual),
                "remaining": _money(max(amount - actual, 0.0)),
                "overspent": _money(max(actual - amount, 0.0)),
                "percent_spent": percent_spent(actual, amount),
                "status": "over" if actual > amount else "under",
            }
        )
    return out


def percent_change(current: float, previous: float, no_baseline: float) -> float:
    if previous == 0:
        return no_baseline
    return _pct((current - previous) / previous * 100)


def month_over_month(transactions: Iterable, month: str) -> dict:
    """
    Income/expenses for `month` against the month before it.

    With nothing recorded in the previous month, income counts as a 100%
    increase while expenses report 0%.
    """
    rows = list(transactions)
    current = filter_month(rows, month)
    previous = filter_month(rows, previous_month(month))

    income, expenses = _total(current, "income"), _total(current, "expense")
    prev_income, prev_expenses = _total(previous, "income"), _total(previous, "expense")
    return {
        "income": _money(income),
        "expenses": _money(expenses),
        "previous_income": _money(prev_income),
        "previous_expenses": _money(prev_expenses),
        "income_change": percent_change(income, prev_income, no_baseline=100.0),
        "expenses_change": percent_change(expenses, prev_expenses, no_baseline=0.0),
    }


def top_category(transactions: Iterable, month: str) -> dict:
    top = {"name": NO_CATEGORY, "amount": 0.0}
    for row in group_by_category(filter_month(transactions, month), "expense"):
        # strict > keeps the first-seen category on ties
        if row["amount"] > top["amount"]:
            top = {"name": row["category"], "amount": row["amount"]}
    return top


def monthly_summary(transactions: Iterable, month: str) -> dict:
    rows = list(transactions)
    mom = month_over_month(rows, month)
    return {
        "month": month,
        "income": mom["income"],
        "expenses": mom["expenses"],
        "balance": _money(mom["income"] - mom["expenses"]),
        "income_change": mom["income_change"],
        "expenses_change": mom["expenses_change"],
        "top_category": top_category(rows, month),
    }
