"""Abstract repository for the Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shop.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get_by_user(self, user_id: str, for_update: bool = False) -> Cart | None:
        """Return the user's cart with its line items, or None.

        With ``for_update`` the cart row stays locked until the unit of
        work ends.
        """

    @abstractmethod
    def add(self, cart: Cart) -> Cart:
        """Persist a new, empty cart and assign its ID.

        Raises ConcurrencyConflictError if the user already got a cart
        from a concurrent request.
        """

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Write the line items, then the total derived from them.

        The stored total is recomputed from the persisted line items and
        written back onto ``cart.total_price``. Raises
        ConcurrencyConflictError if the cart changed since it was loaded.
        """
