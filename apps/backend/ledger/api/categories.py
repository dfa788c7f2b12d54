"""Category endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.models import EntryType
from ledger.schemas import (
    CategoryCreate,
    CategoryMajorRename,
    CategoryMajorRenameResult,
    CategoryOut,
    CategoryUpdate,
)
from ledger.services import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryOut])
def list_categories(type: EntryType | None = Query(None), db: Session = Depends(get_db)):
    return CategoryService(db).list(type=type)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return CategoryService(db).create(payload)


@router.put("/major", response_model=CategoryMajorRenameResult)
def rename_major_category(payload: CategoryMajorRename, db: Session = Depends(get_db)):
    return CategoryMajorRenameResult(changes=CategoryService(db).rename_major(payload))


@router.patch("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    return CategoryService(db).update(category_id, payload)


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, reassign_to: int | None = Query(None), db: Session = Depends(get_db)):
    CategoryService(db).delete(category_id, reassign_to=reassign_to)
    return None
