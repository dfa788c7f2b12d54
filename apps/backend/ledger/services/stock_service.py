from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from ledger import models, schemas
from ledger.core.database import atomic
from ledger.core.errors import NotFoundError


class StockService:
    """Stock purchases per month. Live quotes are not tracked."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self, year: int, month: int) -> list[models.Stock]:
        return (
            self.db.query(models.Stock)
            .filter(models.Stock.year == year, models.Stock.month == month)
            .order_by(models.Stock.id)
            .all()
        )

    def create(self, payload: schemas.StockCreate) -> models.Stock:
        with atomic(self.db):
            row = models.Stock(**payload.model_dump())
            self.db.add(row)
            self.db.flush()
        self.db.refresh(row)
        return row

    def delete(self, stock_id: int) -> None:
        with atomic(self.db):
            row = self.db.get(models.Stock, stock_id)
            if row is None:
                raise NotFoundError("Stock not found")
            self.db.delete(row)

    def invested_total(self) -> int:
        return int(self.db.query(func.coalesce(func.sum(models.Stock.buy_amount), 0)).scalar() or 0)
