import click

from shop.infrastructure.bootstrap import build_container
from shop.infrastructure.cli.account_commands import (
    account_balance,
    account_deposit,
    account_reset,
)
from shop.infrastructure.cli.cart_commands import (
    cart_add,
    cart_empty,
    cart_item,
    cart_remove,
    cart_show,
)
from shop.infrastructure.cli.db_commands import db_init, db_seed
from shop.infrastructure.cli.order_commands import checkout, order_list, order_show
from shop.infrastructure.cli.sales_commands import sales_product, sales_store
from shop.infrastructure.config import load_env
from shop.infrastructure.logging import configure_logging


@click.group()
@click.option("--database-url", default=None, help="Overrides SHOP_DATABASE_URL.")
@click.pass_context
def cli(ctx: click.Context, database_url: str | None) -> None:
    """Shop — carts, checkout and purchase history"""
    try:
        config = load_env().with_database_url(database_url)
    except ValueError as exc:
        raise click.ClickException(str(exc))
    configure_logging(config.log_level, config.log_json)
    app = build_container(config)
    ctx.call_on_close(app.engine.dispose)
    ctx.obj = app


@cli.group()
def db() -> None:
    """Set up the database."""


@cli.group()
def cart() -> None:
    """Manage shopping carts."""


@cli.group()
def order() -> None:
    """Browse purchase history."""


@cli.group()
def account() -> None:
    """Manage account balances."""


@cli.group()
def sales() -> None:
    """Sales reports for store owners."""


# Register subcommands
db.add_command(db_init)
db.add_command(db_seed)
cart.add_command(cart_add)
cart.add_command(cart_remove)
cart.add_command(cart_empty)
cart.add_command(cart_show)
cart.add_command(cart_item)
cli.add_command(checkout)
order.add_command(order_list)
order.add_command(order_show)
account.add_command(account_deposit)
account.add_command(account_balance)
account.add_command(account_reset)
sales.add_command(sales_store)
sales.add_command(sales_product)
