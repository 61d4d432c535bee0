"""Tests for the SQLAlchemy repositories and unit of work."""

import pytest
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from shop.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from shop.domain.model.cart import Cart
from shop.domain.model.order import Order, OrderLineItem
from shop.domain.model.product import Product
from shop.domain.model.value_objects import Money
from shop.infrastructure.persistence.tables import ProductRow


class TestUnitOfWork:

    def test_uncommitted_writes_are_discarded(self, uow_factory):
        with uow_factory() as uow:
            uow.accounts.debit_balance("alice", Money.of("10.00"))

        with uow_factory() as uow:
            assert uow.accounts.get_balance("alice") == Money.of("30.00")

    def test_committed_writes_are_kept(self, uow_factory):
        with uow_factory() as uow:
            uow.accounts.debit_balance("alice", Money.of("10.00"))
            uow.commit()

        with uow_factory() as uow:
            assert uow.accounts.get_balance("alice") == Money.of("20.00")

    def test_check_violation_is_not_a_conflict(self, uow_factory):
        with pytest.raises(IntegrityError, match="CHECK constraint failed"):
            with uow_factory() as uow:
                uow.session.execute(
                    update(ProductRow).where(ProductRow.id == "p1").values(quantity=-1)
                )

    def test_duplicate_id_is_not_a_conflict(self, uow_factory):
        with pytest.raises(IntegrityError):
            with uow_factory() as uow:
                uow.products.add(Product(id="p1", title="Copy", price=Money.of("1.00")))

    def test_commit_outside_block_raises(self, uow_factory):
        with pytest.raises(RuntimeError, match="outside of a unit of work"):
            uow_factory().commit()

    def test_exception_rolls_back(self, uow_factory):
        with pytest.raises(RuntimeError):
            with uow_factory() as uow:
                uow.products.decrement_stock("p1", 2)
                raise RuntimeError("boom")

        with uow_factory() as uow:
            assert uow.products.get_by_id("p1").available_quantity == 5


class TestSqlProductRepository:

    def test_get_many_for_update(self, uow_factory):
        with uow_factory() as uow:
            products = uow.products.get_many_for_update(["p2", "p1", "p1", "nope"])
        assert list(products) == ["p1", "p2"]
        assert products["p1"].price == Money.of("10.00")

    def test_decrement_stock(self, uow_factory):
        with uow_factory() as uow:
            uow.products.decrement_stock("p1", 5)
            uow.products.increment_sold("p1")
            uow.commit()

        with uow_factory() as uow:
            product = uow.products.get_by_id("p1")
        assert product.available_quantity == 0
        assert product.sold == 1

    def test_decrement_below_zero_conflicts(self, uow_factory):
        with uow_factory() as uow:
            with pytest.raises(ConcurrencyConflictError):
                uow.products.decrement_stock("p2", 2)

    def test_list_by_store(self, uow_factory):
        with uow_factory() as uow:
            titles = [p.title for p in uow.products.list_by_store("s1")]
        assert titles == ["Gadget", "Widget"]

    def test_store_by_owner(self, uow_factory):
        with uow_factory() as uow:
            assert uow.stores.get_by_owner("bob").id == "s1"
            assert uow.stores.get_by_owner("alice") is None


class TestSqlAccountRepository:

    def test_debit_beyond_balance_conflicts(self, uow_factory):
        with uow_factory() as uow:
            with pytest.raises(ConcurrencyConflictError):
                uow.accounts.debit_balance("alice", Money.of("30.01"))

    def test_credit_and_set(self, uow_factory):
        with uow_factory() as uow:
            assert uow.accounts.credit_balance("bob", Money.of("12.50")) == Money.of("12.50")
            uow.accounts.set_balance("alice", Money.zero())
            uow.commit()

        with uow_factory() as uow:
            assert uow.accounts.get_by_id("alice").balance.is_zero
            assert uow.accounts.get_for_update("bob").balance == Money.of("12.50")

    def test_unknown_user(self, uow_factory):
        with uow_factory() as uow:
            assert uow.accounts.get_by_id("nobody") is None
            with pytest.raises(EntityNotFoundError):
                uow.accounts.get_balance("nobody")


class TestSqlCartRepository:

    def _cart_with(self, uow, *lines):
        cart = uow.carts.add(Cart.open("alice"))
        for product_id, delta in lines:
            cart.apply_delta(uow.products.get_by_id(product_id), delta)
        uow.carts.save(cart)
        return cart

    def test_save_and_reload(self, uow_factory):
        with uow_factory() as uow:
            cart = self._cart_with(uow, ("p1", 3), ("p2", 1))
            assert cart.total_price == Money.of("50.00")
            assert all(line.id is not None for line in cart.items)
            uow.commit()

        with uow_factory() as uow:
            loaded = uow.carts.get_by_user("alice")
        assert loaded.total_price == Money.of("50.00")
        assert [(line.product_title, line.quantity) for line in loaded.items] == [
            ("Widget", 3),
            ("Gadget", 1),
        ]
        assert loaded.version == 1

    def test_removed_lines_are_deleted(self, uow_factory):
        with uow_factory() as uow:
            self._cart_with(uow, ("p1", 3), ("p2", 1))
            uow.commit()

        with uow_factory() as uow:
            cart = uow.carts.get_by_user("alice", for_update=True)
            cart.apply_delta(uow.products.get_by_id("p2"), -1)
            uow.carts.save(cart)
            uow.commit()

        with uow_factory() as uow:
            loaded = uow.carts.get_by_user("alice")
        assert [line.product_id for line in loaded.items] == ["p1"]
        assert loaded.total_price == Money.of("30.00")

    def test_stale_cart_conflicts(self, uow_factory):
        with uow_factory() as uow:
            self._cart_with(uow, ("p1", 1))
            uow.commit()

        with uow_factory() as uow:
            stale = uow.carts.get_by_user("alice")

        with uow_factory() as uow:
            fresh = uow.carts.get_by_user("alice", for_update=True)
            fresh.apply_delta(uow.products.get_by_id("p1"), 1)
            uow.carts.save(fresh)
            uow.commit()

        with uow_factory() as uow:
            stale.clear()
            with pytest.raises(ConcurrencyConflictError):
                uow.carts.save(stale)

        with uow_factory() as uow:
            assert uow.carts.get_by_user("alice").line_for("p1").quantity == 2

    def test_second_cart_for_user_conflicts(self, uow_factory):
        with uow_factory() as uow:
            uow.carts.add(Cart.open("alice"))
            uow.commit()

        with uow_factory() as uow:
            with pytest.raises(ConcurrencyConflictError):
                uow.carts.add(Cart.open("alice"))


class TestSqlOrderRepository:

    def _place(self, uow, user_id="alice", quantity=2):
        line = OrderLineItem(
            product_id="p1",
            product_title="Widget",
            quantity=quantity,
            unit_price=Money.of("10.00"),
            subtotal=Money.of("10.00") * quantity,
        )
        order = Order.place(user_id, line.subtotal, [line])
        uow.orders.add(order)
        return order

    def test_add_and_get(self, uow_factory):
        with uow_factory() as uow:
            order = self._place(uow)
            uow.commit()
        assert order.id is not None

        with uow_factory() as uow:
            loaded = uow.orders.get_by_id(order.id)
        assert loaded.user_id == "alice"
        assert loaded.total_price == Money.of("20.00")
        assert loaded.items[0].unit_price == Money.of("10.00")
        assert loaded.items[0].product_title == "Widget"

    def test_list_for_user_newest_first(self, uow_factory):
        with uow_factory() as uow:
            first = self._place(uow, quantity=1)
            second = self._place(uow, quantity=2)
            self._place(uow, user_id="bob")
            uow.commit()

        with uow_factory() as uow:
            ids = [o.id for o in uow.orders.list_for_user("alice")]
        assert ids == [second.id, first.id]

    def test_list_sales(self, uow_factory):
        with uow_factory() as uow:
            order = self._place(uow, quantity=3)
            uow.commit()

        with uow_factory() as uow:
            sales = uow.orders.list_sales(["p1"])
            assert uow.orders.list_sales(["p2"]) == []
        assert len(sales) == 1
        assert sales[0].order_id == order.id
        assert sales[0].buyer_name == "Alice"
        assert sales[0].subtotal == Money.of("30.00")
