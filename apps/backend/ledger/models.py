from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .core.database import Base
from .utils.dates import LOCAL_ZONE


TRANSFER_MAJOR = "이체"
SAVINGS_MAJOR = "저축"


def now_local_naive() -> datetime:
    """Return naive datetime normalized to configured local timezone."""
    return datetime.now(LOCAL_ZONE).replace(tzinfo=None)


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class EntryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def opposite(self) -> "EntryType":
        return EntryType.EXPENSE if self is EntryType.INCOME else EntryType.INCOME


class SavingsProductType(str, Enum):
    SAVINGS_PLAN = "savings_plan"
    DEPOSIT = "deposit"

    @property
    def label(self) -> str:
        return "적금" if self is SavingsProductType.SAVINGS_PLAN else "예금"


class InterestType(str, Enum):
    SIMPLE = "simple"
    COMPOUND = "compound"


class TaxType(str, Enum):
    TAX_EXEMPT = "비과세"
    STANDARD = "일반과세"
    PREFERENTIAL = "세금우대"

    @property
    def rate(self) -> float:
        return _TAX_RATES[self]


_TAX_RATES: dict[TaxType, float] = {
    TaxType.TAX_EXEMPT: 0.0,
    TaxType.STANDARD: 0.154,
    TaxType.PREFERENTIAL: 0.095,
}


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, nullable=False)


class Account(Base, CreatedAtMixin):
    """A money container owned by the household (bank account, cash, wallet)."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text)
    initial_balance: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_main: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction",
        back_populates="account",
        foreign_keys="Transaction.account_id",
        passive_deletes=True,
    )


class Category(Base, CreatedAtMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type", values_callable=_enum_values),
        nullable=False,
    )
    major: Mapped[str] = mapped_column(String(100), nullable=False)
    # 두 번째 단계 라벨; 이체 카테고리에서는 상대 계좌명
    sub: Mapped[str | None] = mapped_column("middle", String(100))

    __table_args__ = (
        UniqueConstraint("type", "major", "middle", name="uq_category_labels"),
    )

    @property
    def transfer_account_name(self) -> str | None:
        """Counterpart account name when this is a transfer category, else None."""
        if self.major == TRANSFER_MAJOR and self.sub:
            return self.sub
        return None

    @property
    def is_transfer(self) -> bool:
        return self.transfer_account_name is not None


class Transaction(Base, CreatedAtMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type", values_callable=_enum_values),
        nullable=False,
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    day: Mapped[int | None] = mapped_column(Integer)
    account_id: Mapped[int] = mapped_column(ForeignKey("account.id", ondelete="CASCADE"), nullable=False)
    category_id: Mapped[int | None] = mapped_column(ForeignKey("category.id", ondelete="SET NULL"))
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    linked_transaction_id: Mapped[int | None] = mapped_column(
        ForeignKey("transaction.id", ondelete="SET NULL"),
        nullable=True,
    )

    account: Mapped[Account] = relationship("Account", back_populates="transactions", foreign_keys=[account_id])
    category: Mapped[Category | None] = relationship("Category")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_transaction_month"),
        CheckConstraint(
            "linked_transaction_id IS NULL OR linked_transaction_id != id",
            name="ck_transaction_link_not_self",
        ),
        Index("ix_transaction_period", "year", "month"),
        Index("ix_transaction_category", "category_id"),
    )


class Budget(Base):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    category_id: Mapped[int] = mapped_column(ForeignKey("category.id", ondelete="CASCADE"), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)

    category: Mapped[Category] = relationship("Category")

    __table_args__ = (
        UniqueConstraint("year", "month", "category_id", name="uq_budget_period_category"),
    )


class SavingsProduct(Base, CreatedAtMixin):
    """Installment savings plan (적금) or lump-sum deposit (예금).

    Maturity, principal, interest, tax and payout figures are never stored;
    see ``ledger.services.savings_projection``.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    type: Mapped[SavingsProductType] = mapped_column(
        SAEnum(SavingsProductType, name="savings_product_type", values_callable=_enum_values),
        nullable=False,
    )
    bank: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str | None] = mapped_column(String(120))
    pay_day: Mapped[int | None] = mapped_column(Integer)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    interest_rate: Mapped[float] = mapped_column(Float, nullable=False)
    interest_type: Mapped[InterestType] = mapped_column(
        SAEnum(InterestType, name="interest_type", values_callable=_enum_values),
        nullable=False,
        default=InterestType.SIMPLE,
    )
    term_months: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    tax_type: Mapped[TaxType] = mapped_column(
        SAEnum(TaxType, name="tax_type", values_callable=_enum_values),
        nullable=False,
        default=TaxType.STANDARD,
    )
    category_id: Mapped[int | None] = mapped_column(ForeignKey("category.id", ondelete="SET NULL"))
    memo: Mapped[str | None] = mapped_column(Text)
    initial_paid: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint("term_months > 0", name="ck_savings_term_positive"),
    )


class Stock(Base, CreatedAtMixin):
    """A stock purchase booked against a month; valued at its buy amount."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    ticker: Mapped[str] = mapped_column(String(32), nullable=False)
    name: Mapped[str | None] = mapped_column(String(120))
    buy_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    shares: Mapped[float | None] = mapped_column(Float)

    __table_args__ = (
        CheckConstraint("buy_amount > 0", name="ck_stock_buy_amount_positive"),
        Index("ix_stock_period", "year", "month"),
    )
