"""SQLAlchemy implementation of CartRepository.

``save`` writes line items first and flushes them, then derives the
cached total from the persisted rows with a SUM and writes it together
with a version bump. The version compare-and-swap rejects a save based
on a cart that another transaction changed in between.
"""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from shop.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from shop.domain.model.cart import Cart, CartLineItem
from shop.domain.repository.cart_repository import CartRepository
from shop.infrastructure.persistence._mapping import to_money
from shop.infrastructure.persistence.database import is_unique_race
from shop.infrastructure.persistence.tables import CartItemRow, CartRow


class SqlCartRepository(CartRepository):

    def __init__(self, session: Session, currency: str) -> None:
        self._session = session
        self._currency = currency

    # --- CartRepository interface ---------------------------------------------

    def get_by_user(self, user_id: str, for_update: bool = False) -> Cart | None:
        stmt = (
            select(CartRow)
            .where(CartRow.user_id == user_id)
            .options(selectinload(CartRow.items).selectinload(CartItemRow.product))
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update(of=CartRow)
        row = self._session.execute(stmt).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    def add(self, cart: Cart) -> Cart:
        row = CartRow(user_id=cart.user_id, total_price=cart.total_price.amount, version=0)
        self._session.add(row)
        try:
            self._session.flush()
        except IntegrityError as exc:
            if not is_unique_race(exc):
                raise
            raise ConcurrencyConflictError(
                f"User {cart.user_id} got a cart from a concurrent request"
            ) from exc
        cart.id = row.id
        cart.version = row.version
        return cart

    def save(self, cart: Cart) -> None:
        row = self._session.get(CartRow, cart.id)
        if row is None:
            raise EntityNotFoundError("Cart doesn't exist")

        persisted = {item.product_id: item for item in row.items}
        wanted = {line.product_id for line in cart.items}

        for product_id, item_row in persisted.items():
            if product_id not in wanted:
                row.items.remove(item_row)

        new_rows: list[tuple[CartLineItem, CartItemRow]] = []
        for line in cart.items:
            item_row = persisted.get(line.product_id)
            if item_row is None:
                item_row = CartItemRow(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=line.subtotal.amount,
                )
                row.items.append(item_row)
                new_rows.append((line, item_row))
            else:
                item_row.quantity = line.quantity
                item_row.price = line.subtotal.amount

        # Line items must hit the database before the total is derived
        try:
            self._session.flush()
        except IntegrityError as exc:
            if not is_unique_race(exc):
                raise
            raise ConcurrencyConflictError(f"Cart {cart.id} changed concurrently") from exc
        for line, item_row in new_rows:
            line.id = item_row.id

        total = self._session.execute(
            select(func.coalesce(func.sum(CartItemRow.price), 0)).where(
                CartItemRow.cart_id == cart.id
            )
        ).scalar_one()

        result = self._session.execute(
            update(CartRow)
            .where(CartRow.id == cart.id, CartRow.version == cart.version)
            .values(total_price=total, version=CartRow.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrencyConflictError(f"Cart {cart.id} changed concurrently")

        cart.total_price = to_money(total, self._currency)
        cart.version += 1

    # --- Mapping --------------------------------------------------------------

    def _to_domain(self, row: CartRow) -> Cart:
        return Cart(
            id=row.id,
            user_id=row.user_id,
            items=[
                CartLineItem(
                    id=item.id,
                    product_id=item.product_id,
                    product_title=item.product.title,
                    quantity=item.quantity,
                    subtotal=to_money(item.price, self._currency),
                )
                for item in row.items
            ],
            total_price=to_money(row.total_price, self._currency),
            version=row.version,
        )
