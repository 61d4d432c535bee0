"""SQLAlchemy implementation of OrderRepository (purchase history)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from shop.domain.model.order import Order, OrderLineItem, SaleRecord
from shop.domain.repository.order_repository import OrderRepository
from shop.infrastructure.persistence._mapping import to_money
from shop.infrastructure.persistence.tables import OrderItemRow, OrderRow


class SqlOrderRepository(OrderRepository):

    def __init__(self, session: Session, currency: str) -> None:
        self._session = session
        self._currency = currency

    # --- OrderRepository interface --------------------------------------------

    def add(self, order: Order) -> None:
        row = OrderRow(
            user_id=order.user_id,
            total_price=order.total_price.amount,
            created_at=order.created_at,
            items=[
                OrderItemRow(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price.amount,
                    price=item.subtotal.amount,
                )
                for item in order.items
            ],
        )
        self._session.add(row)
        self._session.flush()
        order.id = row.id

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.execute(
            self._select_orders().where(OrderRow.id == order_id)
        ).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    def list_for_user(self, user_id: str) -> list[Order]:
        rows = self._session.execute(
            self._select_orders()
            .where(OrderRow.user_id == user_id)
            .order_by(OrderRow.created_at.desc(), OrderRow.id.desc())
        ).scalars()
        return [self._to_domain(row) for row in rows]

    def list_sales(self, product_ids: list[str]) -> list[SaleRecord]:
        if not product_ids:
            return []
        rows = self._session.execute(
            select(OrderItemRow)
            .join(OrderItemRow.order)
            .where(OrderItemRow.product_id.in_(product_ids))
            .options(
                selectinload(OrderItemRow.product),
                selectinload(OrderItemRow.order).selectinload(OrderRow.user),
            )
            .order_by(OrderRow.created_at.desc(), OrderItemRow.id.desc())
        ).scalars()
        return [
            SaleRecord(
                order_id=item.order_id,
                product_id=item.product_id,
                product_title=item.product.title,
                quantity=item.quantity,
                subtotal=to_money(item.price, self._currency),
                buyer_id=item.order.user_id,
                buyer_name=item.order.user.name,
                created_at=item.order.created_at,
            )
            for item in rows
        ]

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _select_orders():
        return select(OrderRow).options(
            selectinload(OrderRow.items).selectinload(OrderItemRow.product)
        )

    def _to_domain(self, row: OrderRow) -> Order:
        return Order(
            id=row.id,
            user_id=row.user_id,
            total_price=to_money(row.total_price, self._currency),
            created_at=row.created_at,
            items=tuple(
                OrderLineItem(
                    product_id=item.product_id,
                    product_title=item.product.title,
                    quantity=item.quantity,
                    unit_price=to_money(item.unit_price, self._currency),
                    subtotal=to_money(item.price, self._currency),
                )
                for item in row.items
            ),
        )
