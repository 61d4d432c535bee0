"""Application service: Show Cart use cases (queries)."""

from __future__ import annotations

from shop.application.dto import CartDTO, CartLineItemDTO
from shop.application.result import Failure, Result, Success
from shop.domain.repository.unit_of_work import UnitOfWork


class ShowCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str) -> Result[CartDTO]:
        with self._uow as uow:
            cart = uow.carts.get_by_user(user_id)
        if cart is None:
            return Failure.not_found("Cart doesn't exist")
        return Success(CartDTO.from_domain(cart))


class ShowCartLineHandler:
    """Look up a single product in the user's cart."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, product_id: str) -> Result[CartLineItemDTO]:
        with self._uow as uow:
            cart = uow.carts.get_by_user(user_id)
        if cart is None:
            return Failure.not_found("Cart doesn't exist")
        line = cart.line_for(product_id)
        if line is None:
            return Failure.not_found("Product is not in the cart")
        return Success(CartLineItemDTO.from_domain(line))
