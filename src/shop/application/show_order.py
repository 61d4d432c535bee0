"""Application service: Show Order use case (query)."""

from __future__ import annotations

from shop.application.dto import OrderDTO
from shop.application.result import Failure, Result, Success
from shop.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, order_id: int, is_admin: bool = False) -> Result[OrderDTO]:
        """Only the buyer or an admin may see an order."""
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None:
            return Failure.not_found(f"Order #{order_id} not found")
        if not (order.is_owned_by(user_id) or is_admin):
            return Failure.unauthorized("Only the buyer or an admin can see this order")
        return Success(OrderDTO.from_domain(order))
