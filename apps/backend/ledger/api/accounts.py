"""Account endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.schemas import AccountCreate, AccountOut, AccountUpdate
from ledger.services import AccountService

router = APIRouter(prefix="/accounts", tags=["accounts"])


def _to_out(service: AccountService, row, balances: dict[int, int] | None = None) -> AccountOut:
    balances = balances if balances is not None else service.balances()
    out = AccountOut.model_validate(row)
    out.balance = balances.get(row.id, int(row.initial_balance or 0))
    return out


@router.get("", response_model=list[AccountOut])
def list_accounts(db: Session = Depends(get_db)):
    service = AccountService(db)
    balances = service.balances()
    return [_to_out(service, row, balances) for row in service.list()]


@router.post("", response_model=AccountOut, status_code=201)
def create_account(payload: AccountCreate, db: Session = Depends(get_db)):
    service = AccountService(db)
    return _to_out(service, service.create(payload))


@router.patch("/{account_id}", response_model=AccountOut)
def update_account(account_id: int, payload: AccountUpdate, db: Session = Depends(get_db)):
    service = AccountService(db)
    return _to_out(service, service.update(account_id, payload))


@router.delete("/{account_id}", status_code=204)
def delete_account(account_id: int, db: Session = Depends(get_db)):
    AccountService(db).delete(account_id)
    return None
