"""Account aggregate — the balance view of a user.

User registration and credentials live outside this system; here an
account is only a name, an admin flag and a balance that never goes
negative.
"""

from __future__ import annotations

from dataclasses import dataclass

from shop.domain.exceptions import InsufficientFundsError, ValidationError
from shop.domain.model.value_objects import Money


@dataclass
class Account:
    """A user's balance.

    ``debit`` and ``credit`` are the in-memory form of the balance rules.
    The SQL repository applies the same rules as conditional UPDATEs
    (``balance >= amount``) so that they hold across concurrent
    transactions; both paths must agree.
    """

    user_id: str
    name: str
    balance: Money
    is_admin: bool = False

    def can_afford(self, amount: Money) -> bool:
        return amount <= self.balance

    def debit(self, amount: Money) -> Money:
        """Take *amount* out of the balance and return the new balance."""
        if not self.can_afford(amount):
            raise InsufficientFundsError(
                f"Insufficient funds: balance {self.balance}, needed {amount}"
            )
        self.balance = self.balance - amount
        return self.balance

    def credit(self, amount: Money) -> Money:
        if amount.is_zero:
            raise ValidationError("Credit amount must be greater than zero")
        self.balance = self.balance + amount
        return self.balance

    def reset(self) -> None:
        self.balance = Money.zero(self.balance.currency)
