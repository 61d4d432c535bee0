"""SQLAlchemy-backed UnitOfWork: one Session, one transaction."""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, sessionmaker

from shop.domain.exceptions import ConcurrencyConflictError
from shop.domain.model.value_objects import DEFAULT_CURRENCY
from shop.domain.repository.unit_of_work import UnitOfWork
from shop.infrastructure.persistence.database import is_conflict
from shop.infrastructure.persistence.sql_account_repository import SqlAccountRepository
from shop.infrastructure.persistence.sql_cart_repository import SqlCartRepository
from shop.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from shop.infrastructure.persistence.sql_product_repository import (
    SqlProductRepository,
    SqlStoreRepository,
)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Each ``with`` block opens a fresh Session.

    An instance may be reused for consecutive blocks (retries) but not
    shared between threads.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._session_factory = session_factory
        self._currency = currency
        self.session: Session | None = None

    def _begin(self) -> None:
        self.session = self._session_factory()
        self.products = SqlProductRepository(self.session, self._currency)
        self.stores = SqlStoreRepository(self.session)
        self.accounts = SqlAccountRepository(self.session, self._currency)
        self.carts = SqlCartRepository(self.session, self._currency)
        self.orders = SqlOrderRepository(self.session, self._currency)

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        super().__exit__(exc_type, exc_val, exc_tb)
        if isinstance(exc_val, DBAPIError) and is_conflict(exc_val):
            raise ConcurrencyConflictError(str(exc_val.orig)) from exc_val

    def _end(self) -> None:
        if self.session is not None:
            self.session.close()
        self.session = None

    def commit(self) -> None:
        if self.session is None:
            raise RuntimeError("commit() outside of a unit of work")
        try:
            self.session.commit()
        except DBAPIError as exc:
            if is_conflict(exc):
                raise ConcurrencyConflictError(str(exc.orig)) from exc
            raise

    def rollback(self) -> None:
        if self.session is not None:
            self.session.rollback()
