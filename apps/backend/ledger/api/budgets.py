"""Budget endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.schemas import BudgetOut, BudgetUpsert
from ledger.services import BudgetService

router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.get("", response_model=list[BudgetOut])
def list_budgets(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
):
    return BudgetService(db).list(year, month)


@router.post("", response_model=BudgetOut)
def upsert_budget(payload: BudgetUpsert, response: Response, db: Session = Depends(get_db)):
    row, created = BudgetService(db).upsert(payload)
    # 신규 생성이면 201, 기존 예산 갱신이면 200
    response.status_code = 201 if created else 200
    return BudgetOut.model_validate(row)
