"""Domain service: Ledger Operations.

Balance debits and credits on user accounts. A debit is only safe inside
the checkout unit of work, after the account row has been locked; the
repository's conditional update is the last line of defence against a
negative balance.
"""

from __future__ import annotations

from decimal import Decimal

from shop.domain.exceptions import (
    EntityNotFoundError,
    InsufficientFundsError,
    ValidationError,
)
from shop.domain.model.value_objects import Money
from shop.domain.repository.account_repository import AccountRepository

MIN_DEPOSIT = Money(Decimal("10.00"))


class Ledger:

    def __init__(
        self,
        account_repo: AccountRepository,
        min_deposit: Money = MIN_DEPOSIT,
    ) -> None:
        self._account_repo = account_repo
        self._min_deposit = min_deposit

    def debit(self, user_id: str, amount: Money) -> Money:
        """Take *amount* from the user's balance and return the new balance."""
        balance = self._account_repo.get_balance(user_id)
        if amount > balance:
            raise InsufficientFundsError(
                f"Insufficient funds: balance {balance}, needed {amount}"
            )
        return self._account_repo.debit_balance(user_id, amount)

    def deposit(self, user_id: str, amount: Money) -> Money:
        """Add funds to the user's balance and return the new balance."""
        if amount < self._min_deposit:
            raise ValidationError(
                f"The minimum deposit value is {self._min_deposit}"
            )
        if self._account_repo.get_by_id(user_id) is None:
            raise EntityNotFoundError("User not found")
        return self._account_repo.credit_balance(user_id, amount)

    def reset(self, user_id: str) -> None:
        account = self._account_repo.get_by_id(user_id)
        if account is None:
            raise EntityNotFoundError("User not found")
        account.reset()
        self._account_repo.set_balance(user_id, account.balance)
