# backend/app/api/transactions.py
from datetime import datetime
from typing import List

import pandas as pd
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import ValidationError
from rapidfuzz import fuzz, process, utils
from sqlalchemy.orm import Session

from backend.app import crud
from backend.app.db import get_db
from backend.app.models.category_model import EXPENSE_CATEGORIES, INCOME_CATEGORIES
from backend.app.schemas import ImportResult, MessageOut, TransactionIn, TransactionOut

router = APIRouter()

REQUIRED_CSV_COLUMNS = {"description", "amount", "category", "type"}
DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y", "%Y/%m/%d")
CATEGORY_MATCH_SCORE = 90


@router.get("", response_model=List[TransactionOut])
def list_transactions(db: Session = Depends(get_db)):
    return crud.list_transactions(db)


@router.post("", response_model=TransactionOut, status_code=201)
def create_transaction(payload: TransactionIn, db: Session = Depends(get_db)):
    return crud.create_transaction(db, payload)


def _parse_date(raw):
    if raw is None or pd.isna(raw):
        return datetime.utcnow()
    text = str(raw).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise HTTPException(status_code=400, detail=f"Invalid date '{text}'")


def match_category(name: str, type_: str) -> str:
    """Snap a category onto a known name that differs only by case or a small typo."""
    known = EXPENSE_CATEGORIES if type_ == "expense" else INCOME_CATEGORIES
    if not name:
        return name
    match = process.extractOne(name, known, scorer=fuzz.ratio, processor=utils.default_process)
    if match and match[1] >= CATEGORY_MATCH_SCORE:
        return match[0]
    return name


@router.post("/upload-csv", response_model=ImportResult, status_code=201)
def upload_transactions_csv(file: UploadFile = File(...), db: Session = Depends(get_db)):
    """
    Upload a CSV with columns: description, amount, category, type, (optional) date.
    Every row is validated before anything is saved; one bad row rejects the file.
    Date formats accepted: YYYY-MM-DD, DD-MM-YYYY, DD/MM/YYYY, YYYY/MM/DD. Missing dates use now.
    """
    try:
        df = pd.read_csv(file.file)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Unable to read CSV: {e}")

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = REQUIRED_CSV_COLUMNS - set(df.columns)
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"CSV is missing columns: {', '.join(sorted(missing))}",
        )

    validated: List[TransactionIn] = []
    for line, (_, row) in enumerate(df.iterrows(), start=2):
        type_ = str(row["type"]).strip().lower()
        category = "" if pd.isna(row["category"]) else str(row["category"]).strip()
        try:
            amount = float(row["amount"])
        except (TypeError, ValueError):
            raise HTTPException(status_code=400, detail=f"Invalid amount on line {line}")
        if pd.isna(amount):
            raise HTTPException(status_code=400, detail=f"Missing amount on line {line}")
        try:
            validated.append(
                TransactionIn(
                    description="" if pd.isna(row["description"]) else str(row["description"]),
                    amount=amount,
                    category=match_category(category, type_),
                    type=type_,
                    date=_parse_date(row["date"] if "date" in df.columns else None),
                )
            )
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=f"Validation error on line {line}: {e}")

    saved = crud.import_transactions(db, validated)
    return {"message": f"{saved} transactions imported.", "count": saved}


@router.put("/{txn_id}", response_model=TransactionOut)
def update_transaction(txn_id: int, payload: TransactionIn, db: Session = Depends(get_db)):
    return crud.update_transaction(db, txn_id, payload)


@router.delete("/{txn_id}", response_model=MessageOut)
def delete_transaction(txn_id: int, db: Session = Depends(get_db)):
    crud.delete_transaction(db, txn_id)
    return {"message": "Transaction deleted successfully"}
