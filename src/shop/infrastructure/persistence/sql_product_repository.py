"""SQLAlchemy implementations of ProductRepository and StoreRepository."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from shop.domain.exceptions import ConcurrencyConflictError
from shop.domain.model.product import Product, Store
from shop.domain.repository.product_repository import (
    ProductRepository,
    StoreRepository,
)
from shop.infrastructure.persistence._mapping import to_product, to_store
from shop.infrastructure.persistence.tables import ProductRow, StoreRow


class SqlProductRepository(ProductRepository):

    def __init__(self, session: Session, currency: str) -> None:
        self._session = session
        self._currency = currency

    def get_by_id(self, product_id: str) -> Product | None:
        row = self._session.get(ProductRow, product_id)
        return to_product(row, self._currency) if row is not None else None

    def get_many_for_update(self, product_ids: list[str]) -> dict[str, Product]:
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        stmt = (
            select(ProductRow)
            .where(ProductRow.id.in_(ids))
            .order_by(ProductRow.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        rows = self._session.execute(stmt).scalars().all()
        return {row.id: to_product(row, self._currency) for row in rows}

    def decrement_stock(self, product_id: str, quantity: int) -> None:
        result = self._session.execute(
            update(ProductRow)
            .where(ProductRow.id == product_id, ProductRow.quantity >= quantity)
            .values(quantity=ProductRow.quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrencyConflictError(
                f"Stock of product {product_id} changed during checkout"
            )

    def increment_sold(self, product_id: str) -> None:
        result = self._session.execute(
            update(ProductRow)
            .where(ProductRow.id == product_id)
            .values(sold=ProductRow.sold + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrencyConflictError(f"Product {product_id} disappeared during checkout")

    def list_by_store(self, store_id: str) -> list[Product]:
        rows = self._session.execute(
            select(ProductRow).where(ProductRow.store_id == store_id).order_by(ProductRow.title)
        ).scalars()
        return [to_product(row, self._currency) for row in rows]

    def add(self, product: Product) -> None:
        self._session.add(
            ProductRow(
                id=product.id,
                title=product.title,
                price=product.price.amount,
                quantity=product.available_quantity,
                sold=product.sold,
                store_id=product.store_id,
            )
        )
        self._session.flush()


class SqlStoreRepository(StoreRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, store_id: str) -> Store | None:
        row = self._session.get(StoreRow, store_id)
        return to_store(row) if row is not None else None

    def get_by_owner(self, owner_id: str) -> Store | None:
        row = self._session.execute(
            select(StoreRow).where(StoreRow.owner_id == owner_id)
        ).scalar_one_or_none()
        return to_store(row) if row is not None else None

    def add(self, store: Store) -> None:
        self._session.add(StoreRow(id=store.id, name=store.name, owner_id=store.owner_id))
        self._session.flush()
