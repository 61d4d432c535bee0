"""Integration tests for the ListOrders and ShowOrder use cases."""

from shop.application.add_to_cart import AddToCartHandler
from shop.application.checkout import CheckoutHandler
from shop.application.list_orders import ListOrdersHandler
from shop.application.show_order import ShowOrderHandler
from shop.domain.exceptions import ErrorKind
from shop.domain.model.account import Account
from shop.domain.model.product import Product
from shop.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork, seed


def _buy(uow, user_id: str, product_id: str, quantity: int):
    AddToCartHandler(uow).handle(user_id, product_id, quantity)
    return CheckoutHandler(uow).handle(user_id).value


def _setup():
    return seed(
        FakeUnitOfWork(),
        products=[
            Product(id="p1", title="Widget", price=Money.of("10.00"), available_quantity=50),
            Product(id="p2", title="Gadget", price=Money.of("20.00"), available_quantity=50),
        ],
        accounts=[
            Account(user_id="alice", name="Alice", balance=Money.of("500.00")),
            Account(user_id="bob", name="Bob", balance=Money.of("500.00")),
        ],
    )


class TestListOrders:

    def test_newest_first(self):
        uow = _setup()
        first = _buy(uow, "alice", "p1", 1)
        second = _buy(uow, "alice", "p2", 2)

        result = ListOrdersHandler(uow).handle("alice")

        assert result.ok
        assert [o.id for o in result.value] == [second.id, first.id]
        assert result.value[0].total_price == "40.00"

    def test_only_own_orders(self):
        uow = _setup()
        _buy(uow, "alice", "p1", 1)
        _buy(uow, "bob", "p1", 1)

        result = ListOrdersHandler(uow).handle("alice")
        assert [o.user_id for o in result.value] == ["alice"]

    def test_no_orders(self):
        result = ListOrdersHandler(_setup()).handle("alice")
        assert result.ok
        assert result.value == []


class TestShowOrder:

    def test_owner_sees_order(self):
        uow = _setup()
        order = _buy(uow, "alice", "p1", 2)

        result = ShowOrderHandler(uow).handle("alice", order.id)

        assert result.ok
        assert result.value.items[0].product_title == "Widget"
        assert result.value.items[0].quantity == 2

    def test_other_user_is_refused(self):
        uow = _setup()
        order = _buy(uow, "alice", "p1", 2)
        result = ShowOrderHandler(uow).handle("bob", order.id)
        assert result.kind == ErrorKind.UNAUTHORIZED

    def test_admin_sees_any_order(self):
        uow = _setup()
        order = _buy(uow, "alice", "p1", 2)
        assert ShowOrderHandler(uow).handle("bob", order.id, is_admin=True).ok

    def test_missing_order(self):
        result = ShowOrderHandler(_setup()).handle("alice", 99)
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.message == "Order #99 not found"
