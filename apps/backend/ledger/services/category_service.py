from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from ledger import models, schemas
from ledger.core.database import atomic
from ledger.core.errors import ConflictError, InvalidInputError, NotFoundError
from ledger.models import EntryType, TRANSFER_MAJOR
from ledger.services.ledger_lookup import find_account_by_name, find_category, reassign_category


class CategoryService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self, *, type: Optional[EntryType] = None) -> list[models.Category]:
        q = self.db.query(models.Category)
        if type is not None:
            q = q.filter(models.Category.type == type)
        return q.order_by(models.Category.major, models.Category.sub).all()

    def get(self, category_id: int) -> models.Category:
        row = self.db.get(models.Category, category_id)
        if row is None:
            raise NotFoundError("Category not found")
        return row

    def create(self, payload: schemas.CategoryCreate) -> models.Category:
        with atomic(self.db):
            if find_category(self.db, payload.type, payload.major, payload.sub) is not None:
                raise ConflictError("Category already exists")
            row = models.Category(type=payload.type, major=payload.major, sub=payload.sub)
            self.db.add(row)
            self.db.flush()
        self.db.refresh(row)
        return row

    def update(self, category_id: int, payload: schemas.CategoryUpdate) -> models.Category:
        with atomic(self.db):
            row = self.get(category_id)
            data = payload.model_dump(exclude_unset=True)
            if not data:
                raise InvalidInputError("No fields to update")
            self._ensure_not_account_managed(row)
            major = data.get("major") or row.major
            sub = data["sub"] if "sub" in data else row.sub
            if major == TRANSFER_MAJOR and row.major != TRANSFER_MAJOR:
                raise InvalidInputError(f"'{TRANSFER_MAJOR}' categories are provisioned from accounts")
            clash = find_category(self.db, row.type, major, sub)
            if clash is not None and clash != row.id:
                raise ConflictError("Category already exists")
            row.major = major
            row.sub = sub
            self.db.flush()
        self.db.refresh(row)
        return row

    def rename_major(self, payload: schemas.CategoryMajorRename) -> int:
        """Rename a top-level label across every category of one type."""
        if TRANSFER_MAJOR in (payload.old_major, payload.new_major):
            raise InvalidInputError(f"'{TRANSFER_MAJOR}' major cannot be renamed")
        with atomic(self.db):
            rows = (
                self.db.query(models.Category)
                .filter(models.Category.type == payload.type, models.Category.major == payload.old_major)
                .all()
            )
            if not rows:
                raise NotFoundError("Major category not found")
            for row in rows:
                clash = find_category(self.db, row.type, payload.new_major, row.sub)
                if clash is not None and clash != row.id:
                    raise ConflictError("Category already exists")
                row.major = payload.new_major
            self.db.flush()
        return len(rows)

    def delete(self, category_id: int, *, reassign_to: Optional[int] = None) -> None:
        with atomic(self.db):
            row = self.get(category_id)
            self._ensure_not_account_managed(row)
            target_id: int | None = None
            if reassign_to is not None:
                target = self.db.get(models.Category, reassign_to)
                if target is None or target.id == row.id:
                    raise InvalidInputError("Invalid reassign_to")
                if target.type != row.type:
                    raise InvalidInputError("Reassign target must be same type")
                target_id = target.id
            reassign_category(self.db, row.id, target_id)
            self.db.delete(row)

    def _ensure_not_account_managed(self, row: models.Category) -> None:
        # 계좌가 살아 있는 이체 카테고리는 계좌 수명주기에서만 바뀐다
        if row.is_transfer and find_account_by_name(self.db, row.transfer_account_name) is not None:
            raise InvalidInputError("Transfer category follows its account; edit the account instead")
