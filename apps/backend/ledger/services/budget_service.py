from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from ledger import models, schemas
from ledger.core.database import atomic
from ledger.core.errors import InvalidInputError
from ledger.services.transfer_service import counts_toward_totals


class BudgetService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self, year: int, month: int) -> list[schemas.BudgetOut]:
        rows = (
            self.db.query(models.Budget, models.Category)
            .join(models.Category, models.Category.id == models.Budget.category_id)
            .filter(models.Budget.year == year, models.Budget.month == month)
            .order_by(models.Category.major, models.Category.sub)
            .all()
        )
        spent = dict(
            self.db.query(models.Transaction.category_id, func.sum(models.Transaction.amount))
            .join(models.Account, models.Account.id == models.Transaction.account_id)
            .filter(
                models.Transaction.year == year,
                models.Transaction.month == month,
                counts_toward_totals(),
            )
            .group_by(models.Transaction.category_id)
            .all()
        )
        return [
            schemas.BudgetOut(
                id=budget.id,
                year=budget.year,
                month=budget.month,
                category_id=budget.category_id,
                amount=budget.amount,
                major=category.major,
                sub=category.sub,
                spent=int(spent.get(budget.category_id) or 0),
            )
            for budget, category in rows
        ]

    def upsert(self, payload: schemas.BudgetUpsert) -> tuple[models.Budget, bool]:
        """Insert or update the budget for (year, month, category); returns (row, created)."""
        with atomic(self.db):
            if self.db.get(models.Category, payload.category_id) is None:
                raise InvalidInputError("Invalid category_id")
            row = (
                self.db.query(models.Budget)
                .filter(
                    models.Budget.year == payload.year,
                    models.Budget.month == payload.month,
                    models.Budget.category_id == payload.category_id,
                )
                .first()
            )
            created = row is None
            if created:
                row = models.Budget(**payload.model_dump())
                self.db.add(row)
            else:
                row.amount = payload.amount
            self.db.flush()
        self.db.refresh(row)
        return row, created
