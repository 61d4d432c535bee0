"""SQLAlchemy implementation of AccountRepository.

Balance changes are single conditional UPDATE statements, so a debit can
never take a balance below zero even if the caller forgot to lock.
"""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from shop.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from shop.domain.model.account import Account
from shop.domain.model.value_objects import Money
from shop.domain.repository.account_repository import AccountRepository
from shop.infrastructure.persistence._mapping import to_account, to_money
from shop.infrastructure.persistence.tables import UserRow


class SqlAccountRepository(AccountRepository):

    def __init__(self, session: Session, currency: str) -> None:
        self._session = session
        self._currency = currency

    def get_by_id(self, user_id: str) -> Account | None:
        row = self._session.get(UserRow, user_id, populate_existing=True)
        return to_account(row, self._currency) if row is not None else None

    def get_for_update(self, user_id: str) -> Account | None:
        row = self._session.execute(
            select(UserRow)
            .where(UserRow.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return to_account(row, self._currency) if row is not None else None

    def get_balance(self, user_id: str) -> Money:
        balance = self._session.execute(
            select(UserRow.balance).where(UserRow.id == user_id)
        ).scalar_one_or_none()
        if balance is None:
            raise EntityNotFoundError("User not found")
        return to_money(balance, self._currency)

    def debit_balance(self, user_id: str, amount: Money) -> Money:
        result = self._session.execute(
            update(UserRow)
            .where(UserRow.id == user_id, UserRow.balance >= amount.amount)
            .values(balance=UserRow.balance - amount.amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrencyConflictError(f"Balance of user {user_id} changed during checkout")
        return self.get_balance(user_id)

    def credit_balance(self, user_id: str, amount: Money) -> Money:
        result = self._session.execute(
            update(UserRow)
            .where(UserRow.id == user_id)
            .values(balance=UserRow.balance + amount.amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise EntityNotFoundError("User not found")
        return self.get_balance(user_id)

    def set_balance(self, user_id: str, amount: Money) -> None:
        result = self._session.execute(
            update(UserRow)
            .where(UserRow.id == user_id)
            .values(balance=amount.amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise EntityNotFoundError("User not found")

    def add(self, account: Account) -> None:
        self._session.add(
            UserRow(
                id=account.user_id,
                name=account.name,
                balance=account.balance.amount,
                admin=account.is_admin,
            )
        )
        self._session.flush()
