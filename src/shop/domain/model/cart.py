"""Cart aggregate — a user's staging area of intended purchases.

The Cart owns its line items; nothing else mutates them. Every change goes
through ``apply_delta`` or ``clear`` so the cached ``total_price`` is always
the sum of the surviving lines' subtotals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from shop.domain.exceptions import ValidationError
from shop.domain.model.product import Product
from shop.domain.model.value_objects import Money


class MutationOutcome(Enum):
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class CartMutation:
    """What ``apply_delta`` did to the cart."""

    outcome: MutationOutcome
    product_id: str
    product_title: str
    quantity_delta: int
    current_quantity: int


@dataclass
class CartLineItem:
    """One product in the cart.

    ``subtotal`` is ``quantity × unit price`` with the price read at the
    time of the last mutation of this line.
    """

    product_id: str
    product_title: str
    quantity: int
    subtotal: Money
    id: int | None = None


@dataclass
class Cart:
    """Aggregate root for a user's cart.

    Invariants:
    - ``total_price`` equals the sum of the line subtotals
    - no line item has a quantity <= 0
    """

    id: int | None
    user_id: str
    items: list[CartLineItem] = field(default_factory=list)
    total_price: Money = field(default_factory=Money.zero)
    version: int = 0

    @staticmethod
    def open(user_id: str) -> Cart:
        if not user_id:
            raise ValidationError("A cart needs an owning user")
        return Cart(id=None, user_id=user_id)

    # --- Mutations ------------------------------------------------------------

    def apply_delta(self, product: Product, quantity_delta: int) -> CartMutation:
        """Adjust the quantity of *product* by a signed delta.

        A resulting quantity <= 0 removes the line. Stock is not checked
        here; availability is only enforced at checkout.
        """
        if not isinstance(quantity_delta, int) or isinstance(quantity_delta, bool):
            raise ValidationError("Quantity must be an integer")

        line = self.line_for(product.id)
        existing = line.quantity if line is not None else 0
        new_quantity = existing + quantity_delta

        if new_quantity <= 0:
            if line is not None:
                self.items.remove(line)
            self.recompute_total()
            return CartMutation(
                outcome=MutationOutcome.REMOVED,
                product_id=product.id,
                product_title=product.title,
                quantity_delta=quantity_delta,
                current_quantity=0,
            )

        subtotal = product.price * new_quantity
        if line is None:
            self.items.append(
                CartLineItem(
                    product_id=product.id,
                    product_title=product.title,
                    quantity=new_quantity,
                    subtotal=subtotal,
                )
            )
        else:
            line.quantity = new_quantity
            line.subtotal = subtotal
            line.product_title = product.title

        self.recompute_total()
        return CartMutation(
            outcome=MutationOutcome.ADDED,
            product_id=product.id,
            product_title=product.title,
            quantity_delta=quantity_delta,
            current_quantity=new_quantity,
        )

    def clear(self) -> None:
        self.items.clear()
        self.recompute_total()

    def recompute_total(self) -> None:
        currency = self.items[0].subtotal.currency if self.items else self.total_price.currency
        self.total_price = Money.total_of([item.subtotal for item in self.items], currency)

    # --- Queries --------------------------------------------------------------

    def line_for(self, product_id: str) -> CartLineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    @property
    def is_empty(self) -> bool:
        return not self.items
