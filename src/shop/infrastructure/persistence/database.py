"""Engine and session factory setup.

SQLite has no row-level locks, so every SQLite transaction is opened with
``BEGIN IMMEDIATE``: writers queue on the database lock instead of
interleaving read-modify-write sequences. Other backends rely on the
``SELECT ... FOR UPDATE`` issued by the repositories.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from shop.infrastructure.persistence.tables import Base

# Backend messages and SQLSTATEs that mean "lost a race, try again"
_CONFLICT_MESSAGES = (
    "database is locked",
    "deadlock",
    "could not serialize",
    "lock wait timeout",
)
_CONFLICT_SQLSTATES = {"40001", "40P01"}

# Unique constraints two racing requests can both try to satisfy. SQLite
# reports the columns instead of the constraint name.
_RACE_CONSTRAINTS = ("uq_carts_user", "uq_cart_items_product")
_RACE_COLUMNS = ("carts.user_id", "cart_items.cart_id, cart_items.product_id")


def create_engine_from_url(database_url: str, sqlite_timeout: float = 30.0) -> Engine:
    is_sqlite = database_url.startswith("sqlite")
    if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
        # Make sure the parent directory of the database file exists
        db_path = database_url.split("sqlite:///")[-1]
        Path(db_path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)

    connect_args = (
        {"timeout": sqlite_timeout, "check_same_thread": False} if is_sqlite else {}
    )
    engine = create_engine(database_url, connect_args=connect_args)
    if is_sqlite:
        _serialize_sqlite_writers(engine)
    return engine


def _serialize_sqlite_writers(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy's "begin" event own the transaction start
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)


def is_conflict(exc: DBAPIError) -> bool:
    """True when a database error means a concurrent writer won."""
    if isinstance(exc, IntegrityError):
        return is_unique_race(exc)
    if not isinstance(exc, OperationalError):
        return False
    if getattr(exc.orig, "pgcode", None) in _CONFLICT_SQLSTATES:
        return True
    message = str(exc.orig).lower()
    return any(fragment in message for fragment in _CONFLICT_MESSAGES)


def is_unique_race(exc: IntegrityError) -> bool:
    """True when a unique violation comes from two requests creating the
    same cart or the same cart line. Foreign key and check violations are
    never races.
    """
    diag = getattr(exc.orig, "diag", None)
    if getattr(diag, "constraint_name", None) in _RACE_CONSTRAINTS:
        return True
    message = str(exc.orig)
    if any(name in message for name in _RACE_CONSTRAINTS):
        return True
    return "UNIQUE constraint failed" in message and any(
        columns in message for columns in _RACE_COLUMNS
    )
