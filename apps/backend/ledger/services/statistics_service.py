"""
통계 집계 서비스

수입/지출 합계는 모두 주 계좌 이체 상쇄 규칙(counts_toward_totals)을 따릅니다.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Query, Session

from ledger import models, schemas
from ledger.core.config import settings
from ledger.models import EntryType
from ledger.services.account_service import AccountService
from ledger.services.ledger_lookup import sum_transactions_by_category
from ledger.services.stock_service import StockService
from ledger.services.transfer_service import counts_toward_totals


UNCATEGORIZED_LABEL = "미분류"


class StatisticsService:
    def __init__(self, db: Session) -> None:
        self.db = db

    # ==================== Public API ====================

    def monthly(
        self, year: int, month: int, account_ids: Optional[Iterable[int]] = None
    ) -> schemas.MonthlyStatisticsOut:
        account_ids = list(account_ids or [])
        rows = (
            self._reportable(
                models.Transaction.type,
                models.Category.major,
                models.Category.sub,
                func.sum(models.Transaction.amount),
                account_ids=account_ids,
            )
            .outerjoin(models.Category, models.Category.id == models.Transaction.category_id)
            .filter(models.Transaction.year == year, models.Transaction.month == month)
            .group_by(models.Transaction.type, models.Category.major, models.Category.sub)
            .all()
        )
        income = sum(int(total or 0) for t, _, _, total in rows if t == EntryType.INCOME)
        expense = sum(int(total or 0) for t, _, _, total in rows if t == EntryType.EXPENSE)

        return schemas.MonthlyStatisticsOut(
            year=year,
            month=month,
            income=income,
            expense=expense,
            balance=income - expense,
            savings=self._savings_booked_in(year, month, account_ids),
            expense_breakdown=self._breakdown(rows, EntryType.EXPENSE),
            income_breakdown=self._breakdown(rows, EntryType.INCOME),
        )

    def yearly(
        self, year: int, account_ids: Optional[Iterable[int]] = None
    ) -> list[schemas.YearlyStatisticsRow]:
        account_ids = list(account_ids or [])
        flows: dict[tuple[int, EntryType], int] = {
            (m, EntryType(t)): int(total or 0)
            for m, t, total in (
                self._reportable(
                    models.Transaction.month,
                    models.Transaction.type,
                    func.sum(models.Transaction.amount),
                    account_ids=account_ids,
                )
                .filter(models.Transaction.year == year)
                .group_by(models.Transaction.month, models.Transaction.type)
                .all()
            )
        }
        result = []
        for month in range(1, 13):
            income = flows.get((month, EntryType.INCOME), 0)
            expense = flows.get((month, EntryType.EXPENSE), 0)
            result.append(
                schemas.YearlyStatisticsRow(
                    month=month,
                    income=income,
                    expense=expense,
                    balance=income - expense,
                    savings=self.savings_total_through(year, month),
                )
            )
        return result

    def trend(self, months: int = 6) -> list[schemas.TrendPoint]:
        limit = max(1, min(int(months), settings.TREND_MAX_MONTHS))
        income = func.sum(
            case((models.Transaction.type == EntryType.INCOME, models.Transaction.amount), else_=0)
        )
        expense = func.sum(
            case((models.Transaction.type == EntryType.EXPENSE, models.Transaction.amount), else_=0)
        )
        rows = (
            self._reportable(models.Transaction.year, models.Transaction.month, income, expense)
            .group_by(models.Transaction.year, models.Transaction.month)
            .order_by(models.Transaction.year.desc(), models.Transaction.month.desc())
            .limit(limit)
            .all()
        )
        return [
            schemas.TrendPoint(year=y, month=m, income=int(i or 0), expense=int(e or 0))
            for y, m, i, e in reversed(rows)
        ]

    def assets(self) -> schemas.AssetsOut:
        cash = sum(AccountService(self.db).balances().values())
        active = (
            self.db.query(models.SavingsProduct)
            .filter(models.SavingsProduct.is_active.is_(True))
            .all()
        )
        savings = self._savings_held(active)
        stock = StockService(self.db).invested_total()
        return schemas.AssetsOut(cash=cash, savings=savings, stock=stock, total=cash + savings + stock)

    def savings_total_through(self, year: int, month: int) -> int:
        """Cumulative savings up to and including ``year``/``month``.

        Restates every product's carry-in plus all payments tagged with the
        products' categories through that month; recomputed from scratch on
        every call.
        """
        return self._savings_held(self.db.query(models.SavingsProduct).all(), year, month)

    # ==================== Private Methods ====================

    def _reportable(self, *columns, account_ids: Optional[list[int]] = None) -> Query:
        q = (
            self.db.query(*columns)
            .select_from(models.Transaction)
            .join(models.Account, models.Account.id == models.Transaction.account_id)
            .filter(counts_toward_totals())
        )
        if account_ids:
            q = q.filter(models.Transaction.account_id.in_(account_ids))
        return q

    def _savings_held(
        self,
        products: list[models.SavingsProduct],
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> int:
        # 같은 은행·유형 상품은 카테고리를 공유하므로 카테고리별로 한 번만 합산
        category_ids = {p.category_id for p in products if p.category_id is not None}
        paid = sum(
            sum_transactions_by_category(self.db, category_id, year, month).total
            for category_id in category_ids
        )
        return paid + sum(int(p.initial_paid or 0) for p in products)

    def _savings_booked_in(self, year: int, month: int, account_ids: list[int]) -> int:
        category_ids = [
            cid for (cid,) in self.db.query(models.SavingsProduct.category_id)
            .filter(models.SavingsProduct.category_id.is_not(None))
            .all()
        ]
        if not category_ids:
            return 0
        q = self.db.query(func.coalesce(func.sum(models.Transaction.amount), 0)).filter(
            models.Transaction.year == year,
            models.Transaction.month == month,
            models.Transaction.category_id.in_(category_ids),
        )
        if account_ids:
            q = q.filter(models.Transaction.account_id.in_(account_ids))
        return int(q.scalar() or 0)

    @staticmethod
    def _breakdown(rows, entry_type: EntryType) -> list[schemas.MajorBreakdownItem]:
        majors: dict[str, dict[str | None, int]] = defaultdict(dict)
        for t, major, sub, total in rows:
            if t != entry_type:
                continue
            label = major or UNCATEGORIZED_LABEL
            majors[label][sub] = majors[label].get(sub, 0) + int(total or 0)
        items = [
            schemas.MajorBreakdownItem(
                major=major,
                total=sum(subs.values()),
                subs=[
                    schemas.SubBreakdownItem(sub=sub, total=total)
                    for sub, total in sorted(subs.items(), key=lambda kv: kv[1], reverse=True)
                ],
            )
            for major, subs in majors.items()
        ]
        return sorted(items, key=lambda item: item.total, reverse=True)
