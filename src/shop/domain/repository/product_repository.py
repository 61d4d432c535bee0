"""Abstract repositories for the Product and Store aggregates.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations live in the infrastructure
layer and are handed out by a UnitOfWork.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shop.domain.model.product import Product, Store


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_many_for_update(self, product_ids: list[str]) -> dict[str, Product]:
        """Load and lock the given products until the unit of work ends.

        Rows are locked in ID order. Unknown IDs are absent from the result.
        """

    @abstractmethod
    def decrement_stock(self, product_id: str, quantity: int) -> None:
        """Subtract *quantity* from the available stock.

        Raises ConcurrencyConflictError if the row no longer holds that
        many units.
        """

    @abstractmethod
    def increment_sold(self, product_id: str) -> None:
        """Add one to the product's sold counter."""

    @abstractmethod
    def list_by_store(self, store_id: str) -> list[Product]:
        """Return every product of a store."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Persist a new product."""


class StoreRepository(ABC):

    @abstractmethod
    def get_by_id(self, store_id: str) -> Store | None:
        """Return a store by its ID, or None."""

    @abstractmethod
    def get_by_owner(self, owner_id: str) -> Store | None:
        """Return the store owned by a user, or None."""

    @abstractmethod
    def add(self, store: Store) -> None:
        """Persist a new store."""
