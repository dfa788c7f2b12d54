"""Transaction endpoints.

Writes go through ``TransferService`` so transfer mirrors stay paired.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ledger import models
from ledger.core.database import get_db
from ledger.models import EntryType
from ledger.schemas import (
    TransactionCreate,
    TransactionCreateResult,
    TransactionListItem,
    TransactionOut,
    TransactionUpdate,
)
from ledger.services import TransferService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[TransactionListItem])
def list_transactions(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    type: EntryType | None = Query(None),
    account_id: int | None = Query(None),
    db: Session = Depends(get_db),
):
    q = (
        db.query(models.Transaction, models.Category.major, models.Category.sub, models.Account.name)
        .outerjoin(models.Category, models.Category.id == models.Transaction.category_id)
        .outerjoin(models.Account, models.Account.id == models.Transaction.account_id)
        .filter(models.Transaction.year == year, models.Transaction.month == month)
    )
    if type is not None:
        q = q.filter(models.Transaction.type == type)
    if account_id is not None:
        q = q.filter(models.Transaction.account_id == account_id)
    rows = q.order_by(models.Transaction.day.asc(), models.Transaction.id.asc()).all()
    items = []
    for tx, major, sub, account_name in rows:
        item = TransactionListItem.model_validate(tx)
        item.major = major
        item.sub = sub
        item.account_name = account_name
        items.append(item)
    return items


@router.post("", response_model=TransactionCreateResult, status_code=201)
def create_transaction(payload: TransactionCreate, db: Session = Depends(get_db)):
    tx, mirror = TransferService(db).create(payload)
    return TransactionCreateResult(
        transaction=TransactionOut.model_validate(tx),
        mirror_transaction=TransactionOut.model_validate(mirror) if mirror is not None else None,
    )


@router.patch("/{txn_id}", response_model=TransactionOut)
def update_transaction(txn_id: int, payload: TransactionUpdate, db: Session = Depends(get_db)):
    return TransferService(db).update(txn_id, payload)


@router.delete("/{txn_id}", status_code=204)
def delete_transaction(txn_id: int, db: Session = Depends(get_db)):
    TransferService(db).delete(txn_id)
    return None
