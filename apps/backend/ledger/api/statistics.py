"""Statistics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.schemas import AssetsOut, MonthlyStatisticsOut, TrendPoint, YearlyStatisticsRow
from ledger.services import StatisticsService

router = APIRouter(prefix="/statistics", tags=["statistics"])


def _parse_account_ids(raw: str | None) -> list[int]:
    if not raw:
        return []
    return [int(part) for part in raw.split(",") if part.strip().isdigit()]


@router.get("/monthly", response_model=MonthlyStatisticsOut)
def monthly_statistics(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    account_ids: str | None = Query(None, alias="accountIds"),
    db: Session = Depends(get_db),
):
    return StatisticsService(db).monthly(year, month, _parse_account_ids(account_ids))


@router.get("/yearly", response_model=list[YearlyStatisticsRow])
def yearly_statistics(
    year: int = Query(..., ge=1900, le=9999),
    account_ids: str | None = Query(None, alias="accountIds"),
    db: Session = Depends(get_db),
):
    return StatisticsService(db).yearly(year, _parse_account_ids(account_ids))


@router.get("/trend", response_model=list[TrendPoint])
def trend_statistics(months: int = Query(6, ge=1), db: Session = Depends(get_db)):
    return StatisticsService(db).trend(months)


@router.get("/assets", response_model=AssetsOut)
def asset_statistics(db: Session = Depends(get_db)):
    return StatisticsService(db).assets()
