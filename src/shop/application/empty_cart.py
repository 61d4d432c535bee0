"""Application service: Empty Cart use case."""

from __future__ import annotations

import structlog

from shop.application.result import Result, Success
from shop.application.retry import DEFAULT_CONFLICT_RETRIES, retry_on_conflict
from shop.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class EmptyCartHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._uow = uow
        self._conflict_retries = conflict_retries

    def handle(self, user_id: str) -> Result[None]:
        """Delete every line and zero the total.

        Emptying an empty cart, or a user with no cart yet, succeeds
        without writing anything.
        """
        return retry_on_conflict(
            lambda: self._empty(user_id),
            self._conflict_retries,
            "cart.empty",
            user_id=user_id,
        )

    def _empty(self, user_id: str) -> Result[None]:
        with self._uow as uow:
            cart = uow.carts.get_by_user(user_id, for_update=True)
            if cart is None or (cart.is_empty and cart.total_price.is_zero):
                return Success(None)
            cart.clear()
            uow.carts.save(cart)
            uow.commit()

        logger.info("Cart emptied", user_id=user_id)
        return Success(None)
