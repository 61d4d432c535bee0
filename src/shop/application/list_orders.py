"""Application service: List Orders use case (query)."""

from __future__ import annotations

from shop.application.dto import OrderDTO
from shop.application.result import Result, Success
from shop.domain.repository.unit_of_work import UnitOfWork


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str) -> Result[list[OrderDTO]]:
        """Return the user's purchase history, newest first."""
        with self._uow as uow:
            orders = uow.orders.list_for_user(user_id)
        return Success([OrderDTO.from_domain(order) for order in orders])
