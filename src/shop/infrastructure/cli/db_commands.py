"""CLI commands for database setup.

``seed`` loads a JSON fixture so the cart and checkout commands have
users, stores and products to work with:

    {
      "users":    [{"id": "u1", "name": "Alice", "balance": "50.00", "admin": false}],
      "stores":   [{"id": "s1", "name": "Corner Shop", "owner_id": "u1"}],
      "products": [{"id": "p1", "title": "Widget", "price": "10.00",
                    "quantity": 5, "store_id": "s1"}]
    }
"""

from __future__ import annotations

import json
from pathlib import Path

import click
from sqlalchemy.exc import IntegrityError

from shop.domain.exceptions import DomainException
from shop.domain.model.account import Account
from shop.domain.model.product import Product, Store
from shop.domain.model.value_objects import Money
from shop.infrastructure.cli.common import container
from shop.infrastructure.persistence.database import create_schema


@click.command("init")
def db_init() -> None:
    """Create the database tables."""
    create_schema(container().engine)
    click.echo("Database initialised.")


@click.command("seed")
@click.argument("fixture", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def db_seed(fixture: Path) -> None:
    """Load users, stores and products from a JSON fixture."""
    try:
        data = json.loads(fixture.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid fixture: {exc}")

    app = container()
    currency = app.config.currency
    create_schema(app.engine)

    try:
        with app.unit_of_work() as uow:
            for raw in data.get("users", []):
                uow.accounts.add(
                    Account(
                        user_id=raw["id"],
                        name=raw["name"],
                        balance=Money.of(raw.get("balance", "0"), currency),
                        is_admin=bool(raw.get("admin", False)),
                    )
                )
            for raw in data.get("stores", []):
                uow.stores.add(Store(id=raw["id"], name=raw["name"], owner_id=raw["owner_id"]))
            for raw in data.get("products", []):
                uow.products.add(
                    Product(
                        id=raw["id"],
                        title=raw["title"],
                        price=Money.of(raw["price"], currency),
                        available_quantity=int(raw.get("quantity", 0)),
                        sold=int(raw.get("sold", 0)),
                        store_id=raw.get("store_id"),
                    )
                )
            uow.commit()
    except (KeyError, DomainException, IntegrityError) as exc:
        raise click.ClickException(f"Invalid fixture: {exc}")

    click.echo(
        f"Seeded {len(data.get('users', []))} users, {len(data.get('stores', []))} stores, "
        f"{len(data.get('products', []))} products."
    )
