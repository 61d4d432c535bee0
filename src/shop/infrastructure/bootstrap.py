"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from shop.application.add_to_cart import AddToCartHandler, RemoveFromCartHandler
from shop.application.checkout import CheckoutHandler
from shop.application.deposit import DepositHandler, ResetBalanceHandler, ShowBalanceHandler
from shop.application.empty_cart import EmptyCartHandler
from shop.application.list_orders import ListOrdersHandler
from shop.application.list_sales import ListSalesHandler
from shop.application.show_cart import ShowCartHandler, ShowCartLineHandler
from shop.application.show_order import ShowOrderHandler
from shop.domain.model.value_objects import Money
from shop.infrastructure.config import AppConfig
from shop.infrastructure.persistence.database import (
    create_engine_from_url,
    create_session_factory,
)
from shop.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork


@dataclass
class Container:
    """Everything a caller needs to build handlers for one process."""

    config: AppConfig
    engine: Engine
    session_factory: sessionmaker[Session]

    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self.session_factory, self.config.currency)

    @property
    def min_deposit(self) -> Money:
        return Money.of(self.config.min_deposit, self.config.currency)

    # --- Handlers (a fresh unit of work each) ---------------------------------

    def add_to_cart(self) -> AddToCartHandler:
        return AddToCartHandler(self.unit_of_work(), self.config.conflict_retries)

    def remove_from_cart(self) -> RemoveFromCartHandler:
        return RemoveFromCartHandler(self.unit_of_work(), self.config.conflict_retries)

    def empty_cart(self) -> EmptyCartHandler:
        return EmptyCartHandler(self.unit_of_work(), self.config.conflict_retries)

    def show_cart(self) -> ShowCartHandler:
        return ShowCartHandler(self.unit_of_work())

    def show_cart_line(self) -> ShowCartLineHandler:
        return ShowCartLineHandler(self.unit_of_work())

    def checkout(self) -> CheckoutHandler:
        return CheckoutHandler(self.unit_of_work(), self.config.conflict_retries)

    def list_orders(self) -> ListOrdersHandler:
        return ListOrdersHandler(self.unit_of_work())

    def show_order(self) -> ShowOrderHandler:
        return ShowOrderHandler(self.unit_of_work())

    def list_sales(self) -> ListSalesHandler:
        return ListSalesHandler(self.unit_of_work())

    def deposit(self) -> DepositHandler:
        return DepositHandler(
            self.unit_of_work(), self.min_deposit, self.config.conflict_retries
        )

    def reset_balance(self) -> ResetBalanceHandler:
        return ResetBalanceHandler(self.unit_of_work())

    def show_balance(self) -> ShowBalanceHandler:
        return ShowBalanceHandler(self.unit_of_work())


def build_container(config: AppConfig) -> Container:
    engine = create_engine_from_url(config.database_url, config.sqlite_timeout)
    return Container(
        config=config,
        engine=engine,
        session_factory=create_session_factory(engine),
    )
