"""Abstract repository for the Order aggregate (purchase history).

Orders are append-only: there is no update or delete.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shop.domain.model.order import Order, SaleRecord


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order with its line items and assign its ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Order]:
        """Return every order of a user, newest first."""

    @abstractmethod
    def list_sales(self, product_ids: list[str]) -> list[SaleRecord]:
        """Return every order line for the given products, newest first."""
