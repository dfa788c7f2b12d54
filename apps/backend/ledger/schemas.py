from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from .models import (
    EntryType,
    SavingsProductType,
    InterestType,
    TaxType,
)
from .utils.normalization import clean_label, clean_optional_label


def _required_label(value: str) -> str:
    cleaned = clean_label(value)
    if not cleaned:
        raise ValueError("must not be blank")
    return cleaned


# ---- Accounts --------------------------------------------------------------


class AccountCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    initial_balance: int = 0
    is_main: bool = False

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value: str) -> str:
        return _required_label(value)


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    initial_balance: Optional[int] = None
    is_main: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value: str | None) -> str | None:
        return None if value is None else _required_label(value)


class AccountOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    initial_balance: int
    is_main: bool
    balance: int = 0


# ---- Categories ------------------------------------------------------------


class CategoryCreate(BaseModel):
    type: EntryType
    major: str = Field(min_length=1, max_length=100)
    sub: Optional[str] = Field(default=None, max_length=100)

    @field_validator("major")
    @classmethod
    def _clean_major(cls, value: str) -> str:
        return _required_label(value)

    @field_validator("sub")
    @classmethod
    def _clean_sub(cls, value: str | None) -> str | None:
        return clean_optional_label(value)


class CategoryUpdate(BaseModel):
    major: Optional[str] = Field(default=None, min_length=1, max_length=100)
    sub: Optional[str] = Field(default=None, max_length=100)

    @field_validator("major")
    @classmethod
    def _clean_major(cls, value: str | None) -> str | None:
        return None if value is None else _required_label(value)

    @field_validator("sub")
    @classmethod
    def _clean_sub(cls, value: str | None) -> str | None:
        return clean_optional_label(value)


class CategoryMajorRename(BaseModel):
    type: EntryType
    old_major: str = Field(min_length=1, max_length=100)
    new_major: str = Field(min_length=1, max_length=100)

    @field_validator("old_major", "new_major")
    @classmethod
    def _clean_labels(cls, value: str) -> str:
        return _required_label(value)


class CategoryMajorRenameResult(BaseModel):
    changes: int


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: EntryType
    major: str
    sub: str | None = None
    is_transfer: bool = False


# ---- Transactions ----------------------------------------------------------


class TransactionCreate(BaseModel):
    type: EntryType
    year: int = Field(ge=1900, le=9999)
    month: int = Field(ge=1, le=12)
    day: Optional[int] = Field(default=None, ge=1, le=31)
    account_id: int
    category_id: int
    amount: int = Field(gt=0)
    description: Optional[str] = Field(default=None, max_length=500)


class TransactionUpdate(BaseModel):
    type: Optional[EntryType] = None
    year: Optional[int] = Field(default=None, ge=1900, le=9999)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    day: Optional[int] = Field(default=None, ge=1, le=31)
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    amount: Optional[int] = Field(default=None, gt=0)
    description: Optional[str] = Field(default=None, max_length=500)


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: EntryType
    year: int
    month: int
    day: int | None = None
    account_id: int
    category_id: int | None = None
    amount: int
    description: str | None = None
    linked_transaction_id: int | None = None


class TransactionListItem(TransactionOut):
    major: str | None = None
    sub: str | None = None
    account_name: str | None = None


class TransactionCreateResult(BaseModel):
    transaction: TransactionOut
    mirror_transaction: TransactionOut | None = None


# ---- Savings products ------------------------------------------------------


class SavingsProductBase(BaseModel):
    type: SavingsProductType
    bank: str = Field(min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, max_length=120)
    pay_day: Optional[int] = Field(default=None, ge=1, le=31)
    start_date: date
    interest_rate: float = Field(ge=0)
    interest_type: InterestType = InterestType.SIMPLE
    term_months: int
    amount: int
    tax_type: TaxType = TaxType.STANDARD
    memo: Optional[str] = Field(default=None, max_length=500)
    initial_paid: int = Field(default=0, ge=0)

    @field_validator("bank")
    @classmethod
    def _clean_bank(cls, value: str) -> str:
        return _required_label(value)


class SavingsProductCreate(SavingsProductBase):
    pass


class SavingsProductUpdate(SavingsProductBase):
    is_active: bool = True


class SavingsProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: SavingsProductType
    bank: str
    name: str | None = None
    pay_day: int | None = None
    start_date: date
    interest_rate: float
    interest_type: InterestType
    term_months: int
    amount: int
    tax_type: TaxType
    category_id: int | None = None
    memo: str | None = None
    initial_paid: int
    is_active: bool
    # 조회 시마다 새로 계산되는 값
    maturity_date: date
    principal: int
    interest: int
    tax: int
    total_amount: int
    paid_count: int
    paid_total: int
    paid_status: str
    progress_percent: float


# ---- Statistics ------------------------------------------------------------


class SubBreakdownItem(BaseModel):
    sub: str | None = None
    total: int


class MajorBreakdownItem(BaseModel):
    major: str
    total: int
    subs: list[SubBreakdownItem] = Field(default_factory=list)


class MonthlyStatisticsOut(BaseModel):
    year: int
    month: int
    income: int
    expense: int
    balance: int
    savings: int
    expense_breakdown: list[MajorBreakdownItem] = Field(default_factory=list)
    income_breakdown: list[MajorBreakdownItem] = Field(default_factory=list)


class YearlyStatisticsRow(BaseModel):
    month: int
    income: int
    expense: int
    balance: int
    savings: int


class TrendPoint(BaseModel):
    year: int
    month: int
    income: int
    expense: int


class AssetsOut(BaseModel):
    cash: int
    savings: int
    # 시세가 아닌 매수 금액 기준
    stock: int = 0
    total: int


# ---- Budgets ---------------------------------------------------------------


class BudgetUpsert(BaseModel):
    year: int = Field(ge=1900, le=9999)
    month: int = Field(ge=1, le=12)
    category_id: int
    amount: int = Field(ge=0)


class BudgetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    year: int
    month: int
    category_id: int
    amount: int
    major: str | None = None
    sub: str | None = None
    spent: int = 0


# ---- Stocks ----------------------------------------------------------------


class StockCreate(BaseModel):
    year: int = Field(ge=1900, le=9999)
    month: int = Field(ge=1, le=12)
    ticker: str = Field(min_length=1, max_length=32)
    name: Optional[str] = Field(default=None, max_length=120)
    buy_amount: int = Field(gt=0)
    shares: float = Field(ge=0)

    @field_validator("ticker")
    @classmethod
    def _clean_ticker(cls, value: str) -> str:
        return _required_label(value).upper()

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value: str | None) -> str | None:
        return clean_optional_label(value)


class StockOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    year: int
    month: int
    ticker: str
    name: str | None = None
    buy_amount: int
    shares: float | None = None
