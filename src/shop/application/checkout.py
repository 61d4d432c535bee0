"""Application service: Checkout use case.

Turns a user's cart into an Order. This is the only place that mutates
balances and stock, and it does so inside a single unit of work:

    IDLE -> VALIDATING -> COMMITTING -> COMPLETED

Validation can exit through REJECTED_EMPTY, REJECTED_FUNDS or
REJECTED_STOCK, each of which returns to IDLE without writing anything.

Rows are locked in a fixed order (cart, account, products by ID) before
anything is checked, so the stock and balance that pass validation are the
stock and balance that the commit changes.
"""

from __future__ import annotations

from enum import Enum

import structlog

from shop.application.dto import OrderDTO
from shop.application.result import Failure, Result, Success
from shop.application.retry import DEFAULT_CONFLICT_RETRIES, retry_on_conflict
from shop.domain.exceptions import (
    EmptyCartError,
    InsufficientFundsError,
    InsufficientStockError,
)
from shop.domain.model.cart import Cart
from shop.domain.model.order import Order, OrderLineItem
from shop.domain.repository.unit_of_work import UnitOfWork
from shop.domain.service.inventory_guard import InventoryGuard
from shop.domain.service.ledger import Ledger

logger = structlog.get_logger(__name__)


class CheckoutState(Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    COMMITTING = "COMMITTING"
    COMPLETED = "COMPLETED"
    REJECTED_EMPTY = "REJECTED_EMPTY"
    REJECTED_FUNDS = "REJECTED_FUNDS"
    REJECTED_STOCK = "REJECTED_STOCK"


class CheckoutHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
        inventory_guard: InventoryGuard | None = None,
    ) -> None:
        self._uow = uow
        self._conflict_retries = conflict_retries
        self._inventory_guard = inventory_guard or InventoryGuard()
        self.state = CheckoutState.IDLE
        self.transitions: list[CheckoutState] = []

    def handle(self, user_id: str) -> Result[OrderDTO]:
        """Check out the user's cart.

        Steps:
        1. Load and lock the cart; it must exist and hold items.
        2. The cached cart total must not exceed the balance.
        3. Every product must have stock for its line.
        4. Debit, record the order, take stock, clear the cart; one commit.
        """
        self.state = CheckoutState.IDLE
        self.transitions = []
        try:
            result = retry_on_conflict(
                lambda: self._checkout(user_id),
                self._conflict_retries,
                "checkout",
                user_id=user_id,
            )
        except Exception:
            self._transition(CheckoutState.IDLE, user_id)
            raise
        if not result.ok:
            self._transition(CheckoutState.IDLE, user_id)
        return result

    # --- Phases ---------------------------------------------------------------

    def _checkout(self, user_id: str) -> Result[OrderDTO]:
        with self._uow as uow:
            self._transition(CheckoutState.VALIDATING, user_id)

            cart = uow.carts.get_by_user(user_id, for_update=True)
            if cart is None:
                return Failure.not_found("Cart doesn't exist")
            if cart.is_empty:
                return self._reject(
                    CheckoutState.REJECTED_EMPTY,
                    user_id,
                    Failure.from_exception(EmptyCartError("Cart is empty")),
                )

            account = uow.accounts.get_for_update(user_id)
            if account is None:
                return Failure.not_found("User not found")
            if not account.can_afford(cart.total_price):
                return self._reject(
                    CheckoutState.REJECTED_FUNDS,
                    user_id,
                    Failure.from_exception(InsufficientFundsError("Insufficient funds")),
                )

            products = uow.products.get_many_for_update(
                [line.product_id for line in cart.items]
            )
            short = self._inventory_guard.check_availability(cart.items, products)
            if short:
                return self._reject(
                    CheckoutState.REJECTED_STOCK,
                    user_id,
                    Failure.from_exception(InsufficientStockError(short)),
                )

            self._transition(CheckoutState.COMMITTING, user_id)
            order = self._commit(uow, cart)

        self._transition(CheckoutState.COMPLETED, user_id)
        logger.info(
            "Checkout completed",
            user_id=user_id,
            order_id=order.id,
            total=str(order.total_price),
            lines=len(order.items),
        )
        return Success(OrderDTO.from_domain(order))

    def _commit(self, uow: UnitOfWork, cart: Cart) -> Order:
        total = cart.total_price

        new_balance = Ledger(uow.accounts).debit(cart.user_id, total)

        order = Order.place(
            user_id=cart.user_id,
            total_price=total,
            items=[OrderLineItem.from_cart_line(line) for line in cart.items],
        )
        uow.orders.add(order)

        # sold counts checkout lines, not units
        for line in cart.items:
            uow.products.decrement_stock(line.product_id, line.quantity)
            uow.products.increment_sold(line.product_id)

        cart.clear()
        uow.carts.save(cart)

        uow.commit()
        logger.debug("Balance debited", user_id=cart.user_id, balance=str(new_balance))
        return order

    # --- State tracking -------------------------------------------------------

    def _reject(
        self, state: CheckoutState, user_id: str, failure: Failure
    ) -> Failure:
        self._transition(state, user_id)
        logger.info("Checkout rejected", user_id=user_id, reason=failure.kind.value)
        return failure

    def _transition(self, state: CheckoutState, user_id: str) -> None:
        if state == self.state:
            return
        logger.debug(
            "Checkout state changed",
            user_id=user_id,
            from_state=self.state.value,
            to_state=state.value,
        )
        self.state = state
        self.transitions.append(state)
