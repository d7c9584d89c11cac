# backend/app/crud.py
import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.errors import NotFoundError
from backend.app.models.budget_model import Budget
from backend.app.models.category_model import Category, EXPENSE_CATEGORIES, INCOME_CATEGORIES
from backend.app.models.transaction_model import Transaction
from backend.app.schemas import BudgetIn, CategoryIn, TransactionIn

log = logging.getLogger(__name__)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


# --- transactions -----------------------------------------------------------

def list_transactions(db: Session) -> List[Transaction]:
    return db.query(Transaction).order_by(Transaction.date.desc(), Transaction.id.desc()).all()


def get_transaction(db: Session, txn_id: int) -> Transaction:
    txn = db.get(Transaction, txn_id)
    if txn is None:
        raise NotFoundError("Transaction not found")
    return txn


def create_transaction(db: Session, data: TransactionIn) -> Transaction:
    txn = Transaction(**data.model_dump())
    db.add(txn)
    _commit(db)
    db.refresh(txn)
    log.info("created transaction id=%s type=%s category=%s", txn.id, txn.type, txn.category)
    return txn


def update_transaction(db: Session, txn_id: int, data: TransactionIn) -> Transaction:
    txn = get_transaction(db, txn_id)
    for field, value in data.model_dump().items():
        setattr(txn, field, value)
    _commit(db)
    db.refresh(txn)
    log.info("updated transaction id=%s", txn.id)
    return txn


def delete_transaction(db: Session, txn_id: int) -> None:
    txn = get_transaction(db, txn_id)
    db.delete(txn)
    _commit(db)
    log.info("deleted transaction id=%s", txn_id)


def import_transactions(db: Session, rows: Iterable[TransactionIn]) -> int:
    """Insert already validated rows in a single commit."""
    saved = 0
    for data in rows:
        db.add(Transaction(**data.model_dump()))
        saved += 1
    _commit(db)
    log.info("imported %d transactions", saved)
    return saved


# --- budgets ----------------------------------------------------------------

def list_budgets(db: Session, month: Optional[str] = None) -> List[Budget]:
    q = db.query(Budget)
    if month:
        q = q.filter(Budget.month == month)
    return q.order_by(Budget.id).all()


def _find_budget(db: Session, category: str, month: str) -> Optional[Budget]:
    return db.query(Budget).filter(Budget.category == category, Budget.month == month).first()


def upsert_budget(db: Session, data: BudgetIn) -> Budget:
    """Create or overwrite the budget for (category, month); last write wins."""
    existing = _find_budget(db, data.category, data.month)
    if existing:
        existing.amount = data.amount
        _commit(db)
        db.refresh(existing)
        log.info("updated budget id=%s %s/%s", existing.id, existing.month, existing.category)
        return existing

    new_budget = Budget(category=data.category, amount=data.amount, month=data.month)
    db.add(new_budget)
    try:
        db.commit()
    except IntegrityError:
        # Another writer inserted the same key first; overwrite theirs
        db.rollback()
        existing = _find_budget(db, data.category, data.month)
        if existing is None:
            raise
        existing.amount = data.amount
        _commit(db)
        db.refresh(existing)
        return existing
    db.refresh(new_budget)
    log.info("created budget id=%s %s/%s", new_budget.id, new_budget.month, new_budget.category)
    return new_budget


def delete_budget(db: Session, budget_id: int) -> None:
    budget = db.get(Budget, budget_id)
    if budget is None:
        raise NotFoundError("Budget not found")
    db.delete(budget)
    _commit(db)
    log.info("deleted budget id=%s", budget_id)


# --- categories -------------------------------------------------------------

def _with_custom(builtin: List[str], custom: List[str]) -> List[str]:
    names = list(builtin)
    for name in custom:
        if name not in names:
            names.append(name)
    return names


def list_categories(db: Session, type_: str = "all"):
    rows = db.query(Category).order_by(Category.id).all()
    expense = _with_custom(EXPENSE_CATEGORIES, [r.name for r in rows if r.type == "expense"])
    income = _with_custom(INCOME_CATEGORIES, [r.name for r in rows if r.type == "income"])
    if type_ == "expense":
        return expense
    if type_ == "income":
        return income
    return {"expense": expense, "income": income}


def add_category(db: Session, data: CategoryIn) -> str:
    builtin = EXPENSE_CATEGORIES if data.type == "expense" else INCOME_CATEGORIES
    exists = data.name in builtin or (
        db.query(Category).filter(Category.name == data.name, Category.type == data.type).first()
        is not None
    )
    if not exists:
        db.add(Category(name=data.name, type=data.type))
        _commit(db)
        log.info("added %s category %r", data.type, data.name)
    return data.name
