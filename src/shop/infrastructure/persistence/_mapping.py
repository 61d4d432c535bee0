"""Row <-> domain conversions shared by the SQL repositories."""

from __future__ import annotations

from decimal import Decimal

from shop.domain.model.account import Account
from shop.domain.model.product import Product, Store
from shop.domain.model.value_objects import Money
from shop.infrastructure.persistence.tables import ProductRow, StoreRow, UserRow


def to_money(value, currency: str) -> Money:
    return Money.of(Decimal(str(value if value is not None else 0)), currency)


def to_product(row: ProductRow, currency: str) -> Product:
    return Product(
        id=row.id,
        title=row.title,
        price=to_money(row.price, currency),
        available_quantity=row.quantity,
        sold=row.sold,
        store_id=row.store_id,
    )


def to_account(row: UserRow, currency: str) -> Account:
    return Account(
        user_id=row.id,
        name=row.name,
        balance=to_money(row.balance, currency),
        is_admin=bool(row.admin),
    )


def to_store(row: StoreRow) -> Store:
    return Store(id=row.id, name=row.name, owner_id=row.owner_id)
