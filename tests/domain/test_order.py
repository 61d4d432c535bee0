"""Unit tests for the Order aggregate."""

import dataclasses

import pytest

from shop.domain.exceptions import ValidationError
from shop.domain.model.cart import CartLineItem
from shop.domain.model.order import Order, OrderLineItem
from shop.domain.model.value_objects import Money


def _line(quantity: int = 3, subtotal: str = "30.00") -> CartLineItem:
    return CartLineItem(
        product_id="p1", product_title="Widget", quantity=quantity, subtotal=Money.of(subtotal)
    )


class TestOrderLineItem:

    def test_snapshot_from_cart_line(self):
        item = OrderLineItem.from_cart_line(_line())
        assert item.product_id == "p1"
        assert item.quantity == 3
        assert item.unit_price == Money.of("10.00")
        assert item.subtotal == Money.of("30.00")

    def test_snapshot_is_immutable(self):
        item = OrderLineItem.from_cart_line(_line())
        with pytest.raises(dataclasses.FrozenInstanceError):
            item.quantity = 1

    def test_snapshot_does_not_follow_cart_line(self):
        line = _line()
        item = OrderLineItem.from_cart_line(line)
        line.quantity = 10
        line.subtotal = Money.of("100.00")
        assert item.quantity == 3
        assert item.subtotal == Money.of("30.00")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            OrderLineItem.from_cart_line(_line(quantity=0, subtotal="0"))


class TestOrderPlace:

    def test_place(self):
        order = Order.place("u1", Money.of("30.00"), [OrderLineItem.from_cart_line(_line())])
        assert order.id is None
        assert order.user_id == "u1"
        assert order.total_price == Money.of("30.00")
        assert len(order.items) == 1
        assert order.created_at.tzinfo is not None

    def test_place_without_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.place("u1", Money.of("30.00"), [])

    def test_place_without_user_rejected(self):
        with pytest.raises(ValidationError, match="owning user"):
            Order.place("", Money.of("30.00"), [OrderLineItem.from_cart_line(_line())])

    def test_is_owned_by(self):
        order = Order.place("u1", Money.of("30.00"), [OrderLineItem.from_cart_line(_line())])
        assert order.is_owned_by("u1")
        assert not order.is_owned_by("u2")
