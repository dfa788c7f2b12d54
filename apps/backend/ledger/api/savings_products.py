"""Savings product endpoints; every read carries a fresh projection."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.schemas import SavingsProductCreate, SavingsProductOut, SavingsProductUpdate
from ledger.services import SavingsProductService

router = APIRouter(prefix="/savings-products", tags=["savings-products"])


@router.get("", response_model=list[SavingsProductOut])
def list_savings_products(active_only: bool = Query(False), db: Session = Depends(get_db)):
    service = SavingsProductService(db)
    return [service.to_schema(row) for row in service.list(active_only=active_only)]


@router.get("/{product_id}", response_model=SavingsProductOut)
def get_savings_product(product_id: int, db: Session = Depends(get_db)):
    service = SavingsProductService(db)
    return service.to_schema(service.get(product_id))


@router.post("", response_model=SavingsProductOut, status_code=201)
def create_savings_product(payload: SavingsProductCreate, db: Session = Depends(get_db)):
    service = SavingsProductService(db)
    return service.to_schema(service.create(payload))


@router.put("/{product_id}", response_model=SavingsProductOut)
def update_savings_product(product_id: int, payload: SavingsProductUpdate, db: Session = Depends(get_db)):
    service = SavingsProductService(db)
    return service.to_schema(service.update(product_id, payload))


@router.delete("/{product_id}", status_code=204)
def delete_savings_product(product_id: int, db: Session = Depends(get_db)):
    SavingsProductService(db).delete(product_id)
    return None
