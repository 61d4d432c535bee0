"""Fixtures for the SQLite-backed persistence tests.

Every test gets its own database file so concurrent connections behave
like they would against a real deployment.
"""

import pytest

from shop.domain.model.account import Account
from shop.domain.model.product import Product, Store
from shop.domain.model.value_objects import Money
from shop.infrastructure.persistence.database import (
    create_engine_from_url,
    create_schema,
    create_session_factory,
)
from shop.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork


@pytest.fixture
def engine(tmp_path):
    engine = create_engine_from_url(f"sqlite:///{tmp_path / 'shop.db'}", sqlite_timeout=30)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = create_session_factory(engine)
    with SqlAlchemyUnitOfWork(factory) as uow:
        uow.accounts.add(Account(user_id="alice", name="Alice", balance=Money.of("30.00")))
        uow.accounts.add(Account(user_id="bob", name="Bob", balance=Money.of("0.00")))
        uow.stores.add(Store(id="s1", name="Bob's Shop", owner_id="bob"))
        uow.products.add(
            Product(id="p1", title="Widget", price=Money.of("10.00"), available_quantity=5, store_id="s1")
        )
        uow.products.add(
            Product(id="p2", title="Gadget", price=Money.of("20.00"), available_quantity=1, store_id="s1")
        )
        uow.commit()
    return factory


@pytest.fixture
def uow_factory(session_factory):
    return lambda: SqlAlchemyUnitOfWork(session_factory)
