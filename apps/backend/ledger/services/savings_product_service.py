from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ledger import models, schemas
from ledger.core.database import atomic
from ledger.core.errors import InvalidInputError, NotFoundError
from ledger.models import EntryType, SAVINGS_MAJOR
from ledger.services.ledger_lookup import ensure_category, sum_transactions_by_category
from ledger.services.savings_projection import SavingsProjection, project_savings_product


def savings_category_label(bank: str, product_type: models.SavingsProductType) -> str:
    """Second-level label of the expense category that tags product payments."""
    return f"{bank}({models.SavingsProductType(product_type).label})"


class SavingsProductService:
    """Savings product lifecycle plus read-time projection."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self, *, active_only: bool = False) -> list[models.SavingsProduct]:
        q = self.db.query(models.SavingsProduct)
        if active_only:
            q = q.filter(models.SavingsProduct.is_active.is_(True))
        return q.order_by(models.SavingsProduct.start_date.desc(), models.SavingsProduct.id.desc()).all()

    def get(self, product_id: int) -> models.SavingsProduct:
        row = self.db.get(models.SavingsProduct, product_id)
        if row is None:
            raise NotFoundError("Savings product not found")
        return row

    def create(self, payload: schemas.SavingsProductCreate) -> models.SavingsProduct:
        self._validate_terms(payload)
        with atomic(self.db):
            category_id = ensure_category(
                self.db,
                EntryType.EXPENSE,
                SAVINGS_MAJOR,
                savings_category_label(payload.bank, payload.type),
            )
            row = models.SavingsProduct(**payload.model_dump(), category_id=category_id, is_active=True)
            self.db.add(row)
            self.db.flush()
        self.db.refresh(row)
        return row

    def update(self, product_id: int, payload: schemas.SavingsProductUpdate) -> models.SavingsProduct:
        self._validate_terms(payload)
        with atomic(self.db):
            row = self.get(product_id)
            # 납입 이력이 카테고리로 연결되어 있으므로 category_id는 유지
            for key, value in payload.model_dump().items():
                setattr(row, key, value)
            self.db.flush()
        self.db.refresh(row)
        return row

    def delete(self, product_id: int) -> None:
        with atomic(self.db):
            row = self.get(product_id)
            self.db.delete(row)

    def project(self, row: models.SavingsProduct, *, today: Optional[date] = None) -> SavingsProjection:
        category_id = row.category_id
        if category_id is not None and self.db.get(models.Category, category_id) is None:
            category_id = None
        paid = sum_transactions_by_category(self.db, category_id)
        return project_savings_product(row, paid.count, paid.total, row.initial_paid, today=today)

    def to_schema(self, row: models.SavingsProduct, *, today: Optional[date] = None) -> schemas.SavingsProductOut:
        projection = self.project(row, today=today)
        data = {
            column.key: getattr(row, column.key)
            for column in models.SavingsProduct.__mapper__.column_attrs
        }
        data.update(projection.as_dict())
        return schemas.SavingsProductOut.model_validate(data)

    @staticmethod
    def _validate_terms(payload: schemas.SavingsProductBase) -> None:
        if payload.term_months <= 0:
            raise InvalidInputError("term_months must be positive")
        if payload.amount <= 0:
            raise InvalidInputError("amount must be positive")
