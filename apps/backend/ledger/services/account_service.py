from __future__ import annotations

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from ledger import models, schemas
from ledger.core.database import atomic
from ledger.core.errors import ConflictError, NotFoundError
from ledger.models import EntryType
from ledger.services.ledger_lookup import (
    delete_transfer_categories,
    ensure_transfer_categories,
    find_account_by_name,
    rename_transfer_categories,
)
from ledger.services.transfer_service import TransferService


class AccountService:
    """Account lifecycle.

    Keeps the transfer categories named after each account in step with the
    account (created, renamed and deleted together) and holds the rule that
    exactly one account is the main account whenever any account exists.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self) -> list[models.Account]:
        return self.db.query(models.Account).order_by(models.Account.id).all()

    def get(self, account_id: int) -> models.Account:
        row = self.db.get(models.Account, account_id)
        if row is None:
            raise NotFoundError("Account not found")
        return row

    def balances(self) -> dict[int, int]:
        """Current balance per account: initial balance + income - expense."""
        signed = case(
            (models.Transaction.type == EntryType.INCOME, models.Transaction.amount),
            else_=-models.Transaction.amount,
        )
        flows = dict(
            self.db.query(models.Transaction.account_id, func.coalesce(func.sum(signed), 0))
            .group_by(models.Transaction.account_id)
            .all()
        )
        return {
            acc.id: int(acc.initial_balance or 0) + int(flows.get(acc.id, 0) or 0)
            for acc in self.list()
        }

    def create(self, payload: schemas.AccountCreate) -> models.Account:
        with atomic(self.db):
            if find_account_by_name(self.db, payload.name):
                raise ConflictError("Account with same name already exists")
            has_main = self.db.query(models.Account.id).filter(models.Account.is_main.is_(True)).first()
            row = models.Account(
                name=payload.name,
                description=payload.description,
                initial_balance=payload.initial_balance,
                is_main=False,
            )
            self.db.add(row)
            self.db.flush()
            if payload.is_main or not has_main:
                self._make_main(row)
            ensure_transfer_categories(self.db, row.name)
        self.db.refresh(row)
        return row

    def update(self, account_id: int, payload: schemas.AccountUpdate) -> models.Account:
        with atomic(self.db):
            row = self.get(account_id)
            patch = payload.model_dump(exclude_unset=True)
            new_name = patch.pop("name", None)
            if new_name and new_name != row.name:
                clash = find_account_by_name(self.db, new_name)
                if clash is not None and clash.id != row.id:
                    raise ConflictError("Account with same name already exists")
                old_name = row.name
                row.name = new_name
                self.db.flush()
                rename_transfer_categories(self.db, old_name, new_name)
                ensure_transfer_categories(self.db, new_name)
            make_main = patch.pop("is_main", None)
            for key, value in patch.items():
                setattr(row, key, value)
            if make_main:
                self._make_main(row)
            # is_main=False 요청은 무시: 다른 계좌를 주 계좌로 지정하면 자동 해제된다
            self.db.flush()
        self.db.refresh(row)
        return row

    def delete(self, account_id: int) -> None:
        with atomic(self.db):
            row = self.get(account_id)
            transfers = TransferService(self.db)
            txn_ids = [
                tid for (tid,) in self.db.query(models.Transaction.id)
                .filter(models.Transaction.account_id == row.id)
                .order_by(models.Transaction.id)
                .all()
            ]
            for tid in txn_ids:
                tx = self.db.get(models.Transaction, tid)
                if tx is not None:
                    transfers.delete_within(tx)
            delete_transfer_categories(self.db, row.name)
            was_main = row.is_main
            self.db.delete(row)
            self.db.flush()
            if was_main:
                successor = self.db.query(models.Account).order_by(models.Account.id).first()
                if successor is not None:
                    self._make_main(successor)

    def _make_main(self, row: models.Account) -> None:
        self.db.query(models.Account).filter(models.Account.id != row.id).update(
            {models.Account.is_main: False}, synchronize_session=False
        )
        row.is_main = True
        self.db.flush()
