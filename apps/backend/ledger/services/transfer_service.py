"""
이체 미러링 전문 서비스

책임:
- 이체 카테고리 판별 (major == "이체", sub == 상대 계좌명)
- 상대 계좌에 반대 유형의 미러 거래 생성/수정/삭제
- 두 거래의 linked_transaction_id 대칭 유지

원 거래와 미러 거래의 쓰기는 항상 하나의 트랜잭션 단위(atomic)로 묶입니다.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ledger import models, schemas
from ledger.core.database import atomic
from ledger.core.errors import InvalidInputError, NotFoundError
from ledger.models import EntryType, TRANSFER_MAJOR
from ledger.services.ledger_lookup import (
    find_account_by_id,
    find_account_by_name,
    find_or_create_category,
)


logger = logging.getLogger(__name__)

MIRROR_TAG = "[자동이체]"

_REQUIRED_FIELDS = ("type", "year", "month", "account_id", "category_id", "amount")


def classify_category(category: models.Category | None) -> Optional[str]:
    """Return the counterpart account name for a transfer category, else None."""
    if category is None:
        return None
    return category.transfer_account_name


def resolve_mirror_category(db: Session, source_account_id: int, mirror_type: EntryType) -> int:
    """Find or create ``(mirror_type, 이체, <source account name>)``.

    Seen from the counterpart account, the mirror reads as a transfer
    from/to the source account.
    """
    source = find_account_by_id(db, source_account_id)
    if source is None:
        raise InvalidInputError("Invalid account_id")
    return find_or_create_category(db, mirror_type, TRANSFER_MAJOR, source.name)


def mirror_description(description: str | None, *, from_mirror: bool = False) -> str:
    """Description carried by the opposite leg.

    ``from_mirror`` marks that the edited row is itself the generated leg;
    only then is its tag dropped so the source never carries one.
    """
    text = (description or "").strip()
    if from_mirror:
        return text[len(MIRROR_TAG):].strip() if text.startswith(MIRROR_TAG) else text
    return f"{MIRROR_TAG} {text}" if text else MIRROR_TAG


def counts_toward_totals():
    """SQL criterion for income/expense aggregates.

    Transfer legs booked on the main account are netted out; on every other
    account they count as ordinary income/expense. Callers must join
    ``models.Account`` on ``Transaction.account_id``.
    """
    return or_(
        models.Transaction.linked_transaction_id.is_(None),
        models.Account.is_main.is_(False),
    )


class TransferService:
    """
    이체 거래 쌍의 유일한 관리 지점

    거래 생성/수정/삭제는 모두 이 클래스를 통과하며,
    linked_transaction_id는 여기서만 변경됩니다.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    # ==================== Public API ====================

    def create(
        self, payload: schemas.TransactionCreate
    ) -> tuple[models.Transaction, models.Transaction | None]:
        with atomic(self.db):
            self._require_account(payload.account_id)
            category = self._require_category(payload.category_id, payload.type)

            data = payload.model_dump()
            data["description"] = (data.get("description") or "").strip() or None
            tx = models.Transaction(**data)
            self.db.add(tx)
            self.db.flush()

            mirror = None
            target = self._resolve_target(tx, category)
            if target is not None:
                mirror = self._insert_mirror(tx, target)

        self.db.refresh(tx)
        if mirror is not None:
            self.db.refresh(mirror)
        return tx, mirror

    def update(self, txn_id: int, payload: schemas.TransactionUpdate) -> models.Transaction:
        with atomic(self.db):
            tx = self._require_transaction(txn_id)
            changes = payload.model_dump(exclude_unset=True)
            for key in _REQUIRED_FIELDS:
                if key in changes and changes[key] is None:
                    raise InvalidInputError(f"{key} cannot be null")

            new_type = changes.get("type", tx.type)
            self._require_account(changes.get("account_id", tx.account_id))
            category_id = changes.get("category_id", tx.category_id)
            category = (
                self._require_category(category_id, new_type) if category_id is not None else None
            )
            if "description" in changes:
                changes["description"] = (changes["description"] or "").strip() or None

            for key, value in changes.items():
                setattr(tx, key, value)
            self.db.flush()

            mirror = self._load_mirror(tx)
            target = self._resolve_target(tx, category)
            if target is not None and mirror is not None:
                # 미러는 항상 원 거래보다 나중에 생성되므로 id가 더 크다
                self._sync_mirror(tx, mirror, target, from_mirror=mirror.id < tx.id)
            elif target is not None:
                self._insert_mirror(tx, target)
            elif mirror is not None:
                self._remove_mirror(tx, mirror)

        self.db.refresh(tx)
        return tx

    def delete(self, txn_id: int) -> None:
        with atomic(self.db):
            tx = self._require_transaction(txn_id)
            self.delete_within(tx)

    def delete_within(self, tx: models.Transaction) -> None:
        """Delete ``tx`` and its mirror inside a caller-owned atomic block."""
        mirror = self._load_mirror(tx)
        if mirror is not None:
            self._remove_mirror(tx, mirror)
        self._clear_links_to(tx.id)
        self.db.delete(tx)
        self.db.flush()

    # ==================== Private Methods ====================

    def _require_transaction(self, txn_id: int) -> models.Transaction:
        tx = self.db.get(models.Transaction, txn_id)
        if tx is None:
            raise NotFoundError("Transaction not found")
        return tx

    def _require_account(self, account_id: int | None) -> models.Account:
        account = find_account_by_id(self.db, account_id)
        if account is None:
            raise InvalidInputError("Invalid account_id")
        return account

    def _require_category(self, category_id: int | None, txn_type: EntryType) -> models.Category:
        category = self.db.get(models.Category, category_id) if category_id is not None else None
        if category is None:
            raise InvalidInputError("Invalid category_id")
        if category.type != txn_type:
            raise InvalidInputError("Category type mismatch with transaction type")
        return category

    def _resolve_target(
        self, tx: models.Transaction, category: models.Category | None
    ) -> models.Account | None:
        """Counterpart account for ``tx`` or None when no mirror is possible."""
        counterpart = classify_category(category)
        if counterpart is None:
            return None
        target = find_account_by_name(self.db, counterpart)
        if target is None:
            logger.info("transfer target account %r not found; txn %s kept unmirrored", counterpart, tx.id)
            return None
        if target.id == tx.account_id:
            logger.info("txn %s names its own account as transfer target; not mirrored", tx.id)
            return None
        return target

    def _mirror_fields(
        self, tx: models.Transaction, target: models.Account, from_mirror: bool = False
    ) -> dict:
        mirror_type = EntryType(tx.type).opposite
        return {
            "type": mirror_type,
            "year": tx.year,
            "month": tx.month,
            "day": tx.day,
            "account_id": target.id,
            "category_id": resolve_mirror_category(self.db, tx.account_id, mirror_type),
            "amount": tx.amount,
            "description": mirror_description(tx.description, from_mirror=from_mirror),
        }

    def _insert_mirror(self, tx: models.Transaction, target: models.Account) -> models.Transaction:
        mirror = models.Transaction(**self._mirror_fields(tx, target), linked_transaction_id=tx.id)
        self.db.add(mirror)
        self.db.flush()
        tx.linked_transaction_id = mirror.id
        self.db.flush()
        logger.info("created mirror txn %s for txn %s on account %s", mirror.id, tx.id, target.id)
        return mirror

    def _sync_mirror(
        self,
        tx: models.Transaction,
        mirror: models.Transaction,
        target: models.Account,
        from_mirror: bool = False,
    ) -> None:
        for key, value in self._mirror_fields(tx, target, from_mirror).items():
            setattr(mirror, key, value)
        mirror.linked_transaction_id = tx.id
        tx.linked_transaction_id = mirror.id
        self.db.flush()
        logger.info("updated mirror txn %s for txn %s", mirror.id, tx.id)

    def _remove_mirror(self, tx: models.Transaction, mirror: models.Transaction) -> None:
        tx.linked_transaction_id = None
        mirror.linked_transaction_id = None
        self.db.flush()
        self._clear_links_to(mirror.id)
        self.db.delete(mirror)
        self.db.flush()
        logger.info("removed mirror txn %s of txn %s", mirror.id, tx.id)

    def _load_mirror(self, tx: models.Transaction) -> models.Transaction | None:
        if not tx.linked_transaction_id:
            return None
        mirror = self.db.get(models.Transaction, tx.linked_transaction_id)
        if mirror is None:
            # 이전 실패로 남은 끊어진 포인터 정리
            tx.linked_transaction_id = None
            self.db.flush()
        return mirror

    def _clear_links_to(self, txn_id: int) -> None:
        dangling = (
            self.db.query(models.Transaction)
            .filter(models.Transaction.linked_transaction_id == txn_id)
            .all()
        )
        for row in dangling:
            row.linked_transaction_id = None
        if dangling:
            self.db.flush()
