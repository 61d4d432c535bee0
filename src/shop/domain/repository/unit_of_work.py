"""Transactional boundary shared by every use case.

A UnitOfWork groups reads and writes on several aggregates. Either
``commit()`` makes all of them visible, or leaving the ``with`` block
without committing (or with an exception) discards every one of them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shop.domain.repository.account_repository import AccountRepository
from shop.domain.repository.cart_repository import CartRepository
from shop.domain.repository.order_repository import OrderRepository
from shop.domain.repository.product_repository import (
    ProductRepository,
    StoreRepository,
)


class UnitOfWork(ABC):

    products: ProductRepository
    stores: StoreRepository
    accounts: AccountRepository
    carts: CartRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.rollback()
        self._end()

    @abstractmethod
    def _begin(self) -> None:
        """Open a transaction and bind the repositories to it."""

    @abstractmethod
    def _end(self) -> None:
        """Release the transaction's resources."""

    @abstractmethod
    def commit(self) -> None:
        """Make every write of this unit of work visible at once."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted write. A no-op after commit."""
