"""Abstract repository for the Account aggregate (user balance view)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shop.domain.model.account import Account
from shop.domain.model.value_objects import Money


class AccountRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: str) -> Account | None:
        """Return an account, or None if the user is unknown."""

    @abstractmethod
    def get_for_update(self, user_id: str) -> Account | None:
        """Return an account and lock its balance row."""

    @abstractmethod
    def get_balance(self, user_id: str) -> Money:
        """Return the current balance. Raises EntityNotFoundError if unknown."""

    @abstractmethod
    def debit_balance(self, user_id: str, amount: Money) -> Money:
        """Subtract *amount* only if the balance still covers it.

        Returns the new balance. Raises ConcurrencyConflictError when the
        stored balance no longer covers the amount.
        """

    @abstractmethod
    def credit_balance(self, user_id: str, amount: Money) -> Money:
        """Add *amount* to the balance and return the new balance."""

    @abstractmethod
    def set_balance(self, user_id: str, amount: Money) -> None:
        """Overwrite the balance."""

    @abstractmethod
    def add(self, account: Account) -> None:
        """Persist a new account."""
