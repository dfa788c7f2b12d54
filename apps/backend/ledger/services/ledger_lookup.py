"""
계좌/카테고리 조회 공용 헬퍼

이체 엔진, 저축상품, 계좌 수명주기 서비스가 함께 사용합니다.
모든 함수는 flush까지만 수행하며 commit은 호출자가 담당합니다.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, or_, and_
from sqlalchemy.orm import Session

from ledger import models
from ledger.models import EntryType, TRANSFER_MAJOR


@dataclass(frozen=True)
class CategoryTotals:
    count: int = 0
    total: int = 0


def find_account_by_name(db: Session, name: str | None) -> models.Account | None:
    if not name:
        return None
    return db.query(models.Account).filter(models.Account.name == name).first()


def find_account_by_id(db: Session, account_id: int | None) -> models.Account | None:
    if account_id is None:
        return None
    return db.get(models.Account, account_id)


def find_category(db: Session, type: EntryType, major: str, sub: str | None) -> int | None:
    q = db.query(models.Category.id).filter(
        models.Category.type == type,
        models.Category.major == major,
    )
    if sub is None:
        q = q.filter(models.Category.sub.is_(None))
    else:
        q = q.filter(models.Category.sub == sub)
    row = q.first()
    return row[0] if row else None


def find_or_create_category(db: Session, type: EntryType, major: str, sub: str | None) -> int:
    """Idempotent category provisioning keyed on (type, major, sub)."""
    existing = find_category(db, type, major, sub)
    if existing is not None:
        return existing
    category = models.Category(type=type, major=major, sub=sub)
    db.add(category)
    db.flush()
    return category.id


# 계좌/저축상품 수명주기에서 부르는 이름
ensure_category = find_or_create_category


def sum_transactions_by_category(
    db: Session,
    category_id: int | None,
    through_year: int | None = None,
    through_month: int | None = None,
) -> CategoryTotals:
    """Count and total of transactions tagged with ``category_id``.

    With ``through_year``/``through_month`` only rows dated up to and including
    that month are counted. A missing category yields zero totals.
    """
    if category_id is None:
        return CategoryTotals()
    q = db.query(
        func.count(models.Transaction.id),
        func.coalesce(func.sum(models.Transaction.amount), 0),
    ).filter(models.Transaction.category_id == category_id)
    if through_year is not None and through_month is not None:
        q = q.filter(
            or_(
                models.Transaction.year < through_year,
                and_(
                    models.Transaction.year == through_year,
                    models.Transaction.month <= through_month,
                ),
            )
        )
    count, total = q.one()
    return CategoryTotals(count=int(count or 0), total=int(total or 0))


# ---- Transfer category provisioning ---------------------------------------


def ensure_transfer_categories(db: Session, account_name: str) -> list[int]:
    """Make sure both ``(income, 이체, name)`` and ``(expense, 이체, name)`` exist."""
    return [find_or_create_category(db, t, TRANSFER_MAJOR, account_name) for t in EntryType]


def rename_transfer_categories(db: Session, old_name: str, new_name: str) -> int:
    if old_name == new_name:
        return 0
    rows = (
        db.query(models.Category)
        .filter(models.Category.major == TRANSFER_MAJOR, models.Category.sub == old_name)
        .all()
    )
    for row in rows:
        clash = find_category(db, row.type, TRANSFER_MAJOR, new_name)
        if clash is not None and clash != row.id:
            # 같은 이름의 이체 카테고리가 이미 있으면 기존 참조를 그쪽으로 모은다
            reassign_category(db, row.id, clash)
            db.delete(row)
            continue
        row.sub = new_name
    db.flush()
    return len(rows)


def delete_transfer_categories(db: Session, account_name: str) -> int:
    rows = (
        db.query(models.Category)
        .filter(models.Category.major == TRANSFER_MAJOR, models.Category.sub == account_name)
        .all()
    )
    for row in rows:
        reassign_category(db, row.id, None)
        db.delete(row)
    db.flush()
    return len(rows)


def reassign_category(db: Session, category_id: int, target_id: int | None) -> None:
    db.query(models.Transaction).filter(models.Transaction.category_id == category_id).update(
        {models.Transaction.category_id: target_id}, synchronize_session=False
    )
    db.query(models.SavingsProduct).filter(models.SavingsProduct.category_id == category_id).update(
        {models.SavingsProduct.category_id: target_id}, synchronize_session=False
    )
    # 예산은 (연, 월, 카테고리) 단위로 유일하므로 옮기지 않고 지운다
    db.query(models.Budget).filter(models.Budget.category_id == category_id).delete(
        synchronize_session=False
    )

