"""Order aggregate — the immutable receipt of a completed checkout.

An Order is created exactly once, by checkout, and never changes after
that. Line items copy the quantity and prices of the cart lines at the
moment of purchase, so later price changes never rewrite history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from shop.domain.exceptions import ValidationError
from shop.domain.model.cart import CartLineItem
from shop.domain.model.value_objects import Money


@dataclass(frozen=True)
class OrderLineItem:
    """Price snapshot of one purchased product."""

    product_id: str
    product_title: str
    quantity: int
    unit_price: Money  # locked at checkout time
    subtotal: Money

    @staticmethod
    def from_cart_line(line: CartLineItem) -> OrderLineItem:
        """Snapshot a cart line at the price the user saw in the cart."""
        if line.quantity <= 0:
            raise ValidationError("Order line quantity must be positive")
        unit_price = Money.of(line.subtotal.amount / line.quantity, line.subtotal.currency)
        return OrderLineItem(
            product_id=line.product_id,
            product_title=line.product_title,
            quantity=line.quantity,
            unit_price=unit_price,
            subtotal=line.subtotal,
        )


@dataclass
class Order:
    """Aggregate root for a historic purchase.

    Use ``Order.place()`` for new orders. The plain ``__init__`` lets the
    repository reconstitute persisted orders without re-validating.
    """

    id: int | None
    user_id: str
    total_price: Money
    items: tuple[OrderLineItem, ...]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def place(user_id: str, total_price: Money, items: list[OrderLineItem]) -> Order:
        if not user_id:
            raise ValidationError("An order needs an owning user")
        if not items:
            raise ValidationError("Order must contain at least one item")
        return Order(id=None, user_id=user_id, total_price=total_price, items=tuple(items))

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id


@dataclass(frozen=True)
class SaleRecord:
    """One order line seen from the selling store's side."""

    order_id: int
    product_id: str
    product_title: str
    quantity: int
    subtotal: Money
    buyer_id: str
    buyer_name: str
    created_at: datetime
