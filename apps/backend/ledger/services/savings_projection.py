"""Savings product projection.

Every derived figure of a savings product (maturity date, principal,
interest, tax, payout, paid status, progress) is recomputed here on each read
from the product definition, what has been paid so far and today's date.
Nothing in this module touches the database.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from datetime import date
from typing import Protocol

from ledger.models import InterestType, SavingsProductType, TaxType
from ledger.utils.dates import add_months, months_between, today_local


class ProductTerms(Protocol):
    type: SavingsProductType
    start_date: date
    interest_rate: float
    interest_type: InterestType
    term_months: int
    amount: int
    tax_type: TaxType


@dataclass(frozen=True)
class SavingsProjection:
    maturity_date: date
    principal: int
    interest: int
    tax: int
    total_amount: int
    paid_count: int
    paid_total: int
    paid_status: str
    progress_percent: float
    elapsed_months: int

    def as_dict(self) -> dict:
        return asdict(self)


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def maturity_date(start_date: date, term_months: int) -> date:
    return add_months(start_date, term_months)


def elapsed_months(start_date: date, term_months: int, today: date) -> int:
    return max(0, min(term_months, months_between(start_date, today)))


def nominal_principal(product: ProductTerms) -> int:
    if SavingsProductType(product.type) is SavingsProductType.DEPOSIT:
        return int(product.amount)
    return int(product.amount) * int(product.term_months)


def nominal_interest(product: ProductTerms) -> int:
    n = int(product.term_months)
    amount = int(product.amount)
    rate = float(product.interest_rate) / 100
    monthly_rate = rate / 12
    principal = nominal_principal(product)
    compound = InterestType(product.interest_type) is InterestType.COMPOUND

    if SavingsProductType(product.type) is SavingsProductType.DEPOSIT:
        if compound:
            interest = principal * (1 + monthly_rate) ** n - principal
        else:
            interest = principal * rate * (n / 12)
    elif compound:
        if monthly_rate == 0:
            interest = 0.0
        else:
            # 기말이 아닌 기초 납입 연금의 미래가치
            future_value = amount * (((1 + monthly_rate) ** n - 1) / monthly_rate) * (1 + monthly_rate)
            interest = future_value - principal
    else:
        # 각 납입분이 만기까지 남은 개월 수만큼 단리
        interest = (n * (n + 1) / 2) * amount * monthly_rate
    return round_half_up(interest)


def tax_on(interest: int, tax_type: TaxType) -> int:
    return round_half_up(interest * TaxType(tax_type).rate)


def project_savings_product(
    product: ProductTerms,
    paid_count: int,
    paid_sum: int,
    initial_paid: int = 0,
    today: date | None = None,
) -> SavingsProjection:
    """Compute the full projection of a savings product.

    ``paid_count``/``paid_sum`` describe the transactions tagged with the
    product's category; ``initial_paid`` is the carry-in paid before tracking
    started. A savings plan that is behind schedule is projected on what was
    actually paid plus full payments for the remaining months.
    """
    if today is None:
        today = today_local()

    kind = SavingsProductType(product.type)
    term = int(product.term_months)
    monthly = int(product.amount)
    initial_paid = int(initial_paid or 0)

    principal = nominal_principal(product)
    interest = nominal_interest(product)
    tax = tax_on(interest, product.tax_type)
    total = principal + interest - tax

    paid_total = int(paid_sum or 0) + initial_paid
    elapsed = elapsed_months(product.start_date, term, today)

    initial_paid_count = initial_paid // monthly if kind is SavingsProductType.SAVINGS_PLAN and monthly > 0 else 0
    total_paid_count = int(paid_count or 0) + initial_paid_count

    if kind is SavingsProductType.SAVINGS_PLAN:
        expected_so_far = monthly * elapsed
        behind = paid_total < expected_so_far
        display_count = elapsed if behind else total_paid_count
        paid_status = f"{display_count}/{term}"

        if behind and principal > 0:
            principal_adjusted = paid_total + monthly * (term - elapsed)
            interest = round_half_up(interest * (principal_adjusted / principal))
            tax = tax_on(interest, product.tax_type)
            principal = principal_adjusted
            total = principal + interest - tax

        progress = min(100.0, paid_total / principal * 100) if principal > 0 else 0.0
    else:
        paid_status = f"{elapsed}/{term}개월"
        progress = elapsed / term * 100 if term > 0 else 0.0

    return SavingsProjection(
        maturity_date=maturity_date(product.start_date, term),
        principal=principal,
        interest=interest,
        tax=tax,
        total_amount=total,
        paid_count=total_paid_count,
        paid_total=paid_total,
        paid_status=paid_status,
        progress_percent=progress,
        elapsed_months=elapsed,
    )
