"""Stock holding endpoints (buy-amount bookkeeping only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.schemas import StockCreate, StockOut
from ledger.services import StockService

router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("", response_model=list[StockOut])
def list_stocks(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
):
    return StockService(db).list(year, month)


@router.post("", response_model=StockOut, status_code=201)
def create_stock(payload: StockCreate, db: Session = Depends(get_db)):
    return StockService(db).create(payload)


@router.delete("/{stock_id}", status_code=204)
def delete_stock(stock_id: int, db: Session = Depends(get_db)):
    StockService(db).delete(stock_id)
    return None
