"""In-memory fakes of the repositories and the unit of work.

They implement the same abstract interfaces as the SQLAlchemy classes but
keep everything in dicts. Reads hand out copies, as a database would, and
a unit of work that ends without ``commit()`` restores the snapshot taken
when it began. A lock serializes units of work like a row lock would.
"""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field

from shop.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from shop.domain.model.account import Account
from shop.domain.model.cart import Cart
from shop.domain.model.order import Order, SaleRecord
from shop.domain.model.product import Product, Store
from shop.domain.model.value_objects import Money
from shop.domain.repository.account_repository import AccountRepository
from shop.domain.repository.cart_repository import CartRepository
from shop.domain.repository.order_repository import OrderRepository
from shop.domain.repository.product_repository import ProductRepository, StoreRepository
from shop.domain.repository.unit_of_work import UnitOfWork


@dataclass
class InMemoryState:
    products: dict[str, Product] = field(default_factory=dict)
    stores: dict[str, Store] = field(default_factory=dict)
    accounts: dict[str, Account] = field(default_factory=dict)
    carts: dict[str, Cart] = field(default_factory=dict)
    orders: dict[int, Order] = field(default_factory=dict)
    next_cart_id: int = 1
    next_line_id: int = 1
    next_order_id: int = 1


class FakeProductRepository(ProductRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def get_by_id(self, product_id: str) -> Product | None:
        return copy.deepcopy(self._db.state.products.get(product_id))

    def get_many_for_update(self, product_ids: list[str]) -> dict[str, Product]:
        return {
            pid: copy.deepcopy(self._db.state.products[pid])
            for pid in sorted(set(product_ids))
            if pid in self._db.state.products
        }

    def decrement_stock(self, product_id: str, quantity: int) -> None:
        product = self._db.state.products.get(product_id)
        if product is None or product.available_quantity < quantity:
            raise ConcurrencyConflictError(f"Stock of product {product_id} changed")
        product.decrement_stock(quantity)

    def increment_sold(self, product_id: str) -> None:
        self._db.state.products[product_id].record_sale()

    def list_by_store(self, store_id: str) -> list[Product]:
        return [
            copy.deepcopy(p) for p in self._db.state.products.values() if p.store_id == store_id
        ]

    def add(self, product: Product) -> None:
        self._db.state.products[product.id] = copy.deepcopy(product)


class FakeStoreRepository(StoreRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def get_by_id(self, store_id: str) -> Store | None:
        return copy.deepcopy(self._db.state.stores.get(store_id))

    def get_by_owner(self, owner_id: str) -> Store | None:
        for store in self._db.state.stores.values():
            if store.owner_id == owner_id:
                return copy.deepcopy(store)
        return None

    def add(self, store: Store) -> None:
        self._db.state.stores[store.id] = copy.deepcopy(store)


class FakeAccountRepository(AccountRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def get_by_id(self, user_id: str) -> Account | None:
        return copy.deepcopy(self._db.state.accounts.get(user_id))

    def get_for_update(self, user_id: str) -> Account | None:
        return self.get_by_id(user_id)

    def get_balance(self, user_id: str) -> Money:
        account = self._db.state.accounts.get(user_id)
        if account is None:
            raise EntityNotFoundError("User not found")
        return account.balance

    def debit_balance(self, user_id: str, amount: Money) -> Money:
        account = self._db.state.accounts[user_id]
        if not account.can_afford(amount):
            raise ConcurrencyConflictError(f"Balance of user {user_id} changed")
        return account.debit(amount)

    def credit_balance(self, user_id: str, amount: Money) -> Money:
        account = self._db.state.accounts.get(user_id)
        if account is None:
            raise EntityNotFoundError("User not found")
        return account.credit(amount)

    def set_balance(self, user_id: str, amount: Money) -> None:
        self._db.state.accounts[user_id].balance = amount

    def add(self, account: Account) -> None:
        self._db.state.accounts[account.user_id] = copy.deepcopy(account)


class FakeCartRepository(CartRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def get_by_user(self, user_id: str, for_update: bool = False) -> Cart | None:
        return copy.deepcopy(self._db.state.carts.get(user_id))

    def add(self, cart: Cart) -> Cart:
        state = self._db.state
        if cart.user_id in state.carts:
            raise ConcurrencyConflictError(f"User {cart.user_id} already has a cart")
        cart.id = state.next_cart_id
        state.next_cart_id += 1
        state.carts[cart.user_id] = copy.deepcopy(cart)
        return cart

    def save(self, cart: Cart) -> None:
        state = self._db.state
        stored = state.carts.get(cart.user_id)
        if stored is None:
            raise EntityNotFoundError("Cart doesn't exist")
        if stored.version != cart.version:
            raise ConcurrencyConflictError(f"Cart {cart.id} changed concurrently")
        for line in cart.items:
            if line.id is None:
                line.id = state.next_line_id
                state.next_line_id += 1
        cart.total_price = Money.total_of(
            [line.subtotal for line in cart.items], cart.total_price.currency
        )
        cart.version += 1
        state.carts[cart.user_id] = copy.deepcopy(cart)


class FakeOrderRepository(OrderRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def add(self, order: Order) -> None:
        state = self._db.state
        order.id = state.next_order_id
        state.next_order_id += 1
        state.orders[order.id] = copy.deepcopy(order)

    def get_by_id(self, order_id: int) -> Order | None:
        return copy.deepcopy(self._db.state.orders.get(order_id))

    def list_for_user(self, user_id: str) -> list[Order]:
        orders = [o for o in self._db.state.orders.values() if o.user_id == user_id]
        orders.sort(key=lambda o: (o.created_at, o.id), reverse=True)
        return copy.deepcopy(orders)

    def list_sales(self, product_ids: list[str]) -> list[SaleRecord]:
        state = self._db.state
        sales: list[SaleRecord] = []
        for order in sorted(state.orders.values(), key=lambda o: (o.created_at, o.id), reverse=True):
            buyer = state.accounts.get(order.user_id)
            for item in order.items:
                if item.product_id in product_ids:
                    sales.append(
                        SaleRecord(
                            order_id=order.id,  # type: ignore[arg-type]
                            product_id=item.product_id,
                            product_title=item.product_title,
                            quantity=item.quantity,
                            subtotal=item.subtotal,
                            buyer_id=order.user_id,
                            buyer_name=buyer.name if buyer else "",
                            created_at=order.created_at,
                        )
                    )
        return sales


class FakeDatabase:
    """Shared state for any number of FakeUnitOfWork instances."""

    def __init__(self) -> None:
        self.state = InMemoryState()
        self.lock = threading.RLock()
        self.commits = 0


class FakeUnitOfWork(UnitOfWork):

    def __init__(self, db: FakeDatabase | None = None) -> None:
        self.db = db or FakeDatabase()
        self.products = FakeProductRepository(self.db)
        self.stores = FakeStoreRepository(self.db)
        self.accounts = FakeAccountRepository(self.db)
        self.carts = FakeCartRepository(self.db)
        self.orders = FakeOrderRepository(self.db)
        self._snapshot: InMemoryState | None = None
        self.committed = False

    def _begin(self) -> None:
        self.db.lock.acquire()
        self._snapshot = copy.deepcopy(self.db.state)
        self.committed = False

    def _end(self) -> None:
        self._snapshot = None
        self.db.lock.release()

    def commit(self) -> None:
        self.committed = True
        self.db.commits += 1
        self._snapshot = copy.deepcopy(self.db.state)

    def rollback(self) -> None:
        if self._snapshot is not None:
            self.db.state = self._snapshot
            self._snapshot = copy.deepcopy(self._snapshot)


def seed(
    uow: FakeUnitOfWork,
    products: list[Product] = (),
    accounts: list[Account] = (),
    stores: list[Store] = (),
) -> FakeUnitOfWork:
    """Load fixtures straight into the fake database."""
    for product in products:
        uow.db.state.products[product.id] = copy.deepcopy(product)
    for account in accounts:
        uow.db.state.accounts[account.user_id] = copy.deepcopy(account)
    for store in stores:
        uow.db.state.stores[store.id] = copy.deepcopy(store)
    return uow
