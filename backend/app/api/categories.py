# backend/app/api/categories.py
from typing import Dict, List, Union

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app import crud
from backend.app.db import get_db
from backend.app.schemas import CategoryCreated, CategoryIn

router = APIRouter()


@router.get("", response_model=Union[List[str], Dict[str, List[str]]])
def list_categories(type: str = "all", db: Session = Depends(get_db)):
    """Built-in category names followed by any user-added ones; unknown types return both lists."""
    return crud.list_categories(db, type)


@router.post("", response_model=CategoryCreated, status_code=201)
def add_category(payload: CategoryIn, db: Session = Depends(get_db)):
    name = crud.add_category(db, payload)
    return {"message": "Category added successfully", "category": name}
