"""Application service: Add to Cart / Remove from Cart use cases.

Both are the same signed-delta operation on the Cart aggregate: a positive
delta adds units, a negative delta removes units, and a line whose
quantity drops to zero or below disappears.
"""

from __future__ import annotations

import structlog

from shop.application.dto import CartMutationDTO
from shop.application.result import Failure, Result, Success
from shop.application.retry import DEFAULT_CONFLICT_RETRIES, retry_on_conflict
from shop.domain.model.cart import Cart
from shop.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class AddToCartHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._uow = uow
        self._conflict_retries = conflict_retries

    def handle(
        self, user_id: str, product_id: str, quantity_delta: int
    ) -> Result[CartMutationDTO]:
        return retry_on_conflict(
            lambda: self._apply(user_id, product_id, quantity_delta),
            self._conflict_retries,
            "cart.add",
            user_id=user_id,
            product_id=product_id,
        )

    def _apply(
        self, user_id: str, product_id: str, quantity_delta: int
    ) -> Result[CartMutationDTO]:
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                return Failure.not_found("Product not found")

            # The cart row lock serializes concurrent mutations of one cart
            cart = uow.carts.get_by_user(user_id, for_update=True)
            if cart is None:
                if uow.accounts.get_by_id(user_id) is None:
                    return Failure.not_found("User not found")
                cart = uow.carts.add(Cart.open(user_id))

            mutation = cart.apply_delta(product, quantity_delta)
            uow.carts.save(cart)
            uow.commit()

        logger.info(
            "Cart updated",
            user_id=user_id,
            product_id=product_id,
            outcome=mutation.outcome.value,
            delta=quantity_delta,
            current_quantity=mutation.current_quantity,
            cart_total=str(cart.total_price),
        )
        return Success(CartMutationDTO.from_domain(mutation, cart))


class RemoveFromCartHandler:
    """Drop a product's line from the cart whatever its quantity."""

    def __init__(
        self,
        uow: UnitOfWork,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._uow = uow
        self._conflict_retries = conflict_retries

    def handle(self, user_id: str, product_id: str) -> Result[CartMutationDTO]:
        return retry_on_conflict(
            lambda: self._remove(user_id, product_id),
            self._conflict_retries,
            "cart.remove",
            user_id=user_id,
            product_id=product_id,
        )

    def _remove(self, user_id: str, product_id: str) -> Result[CartMutationDTO]:
        with self._uow as uow:
            cart = uow.carts.get_by_user(user_id, for_update=True)
            if cart is None:
                return Failure.not_found("Cart doesn't exist")
            line = cart.line_for(product_id)
            if line is None:
                return Failure.not_found("Product is not in the cart")
            product = uow.products.get_by_id(product_id)
            if product is None:
                return Failure.not_found("Product not found")

            mutation = cart.apply_delta(product, -line.quantity)
            uow.carts.save(cart)
            uow.commit()

        logger.info("Cart line removed", user_id=user_id, product_id=product_id)
        return Success(CartMutationDTO.from_domain(mutation, cart))
