"""Product and Store aggregates.

Catalog management (titles, prices, creating products and stores) happens
elsewhere. Checkout only touches the stock fields of a Product.
"""

from __future__ import annotations

from dataclasses import dataclass

from shop.domain.exceptions import ValidationError
from shop.domain.model.value_objects import Money


@dataclass
class Store:
    id: str
    name: str
    owner_id: str


@dataclass
class Product:
    """A product in a store's catalog.

    Invariants:
    - ``available_quantity`` is always >= 0
    - ``sold`` only ever increases
    """

    id: str
    title: str
    price: Money
    available_quantity: int = 0
    sold: int = 0
    store_id: str | None = None

    def __post_init__(self) -> None:
        if self.available_quantity < 0:
            raise ValidationError("Available quantity cannot be negative")
        if self.sold < 0:
            raise ValidationError("Sold counter cannot be negative")

    def has_stock_for(self, quantity: int) -> bool:
        return quantity <= self.available_quantity

    def decrement_stock(self, quantity: int) -> None:
        """Take purchased units out of stock.

        The SQL repository mirrors this guard with a conditional UPDATE
        (``quantity >= n``) instead of loading and saving the product.
        """
        if quantity <= 0:
            raise ValidationError("Stock decrement must be positive")
        if quantity > self.available_quantity:
            raise ValidationError(
                f"Insufficient stock for {self.title} "
                f"(need {quantity}, have {self.available_quantity} available)"
            )
        self.available_quantity -= quantity

    def record_sale(self) -> None:
        """Count one checkout line for this product.

        This counts orders containing the product, not units. The SQL
        repository does the same with ``sold = sold + 1``.
        """
        self.sold += 1
