"""CLI commands for checkout and purchase history."""

from __future__ import annotations

import click

from shop.domain.exceptions import ErrorKind
from shop.infrastructure.cli.common import container, display_order, unwrap


@click.command("checkout")
@click.option("--user", "user_id", required=True, help="User ID.")
def checkout(user_id: str) -> None:
    """Buy everything in the cart."""
    result = container().checkout().handle(user_id)
    if not result.ok and result.kind == ErrorKind.INSUFFICIENT_STOCK:
        for title in result.product_titles:
            click.echo(f"  short: {title}", err=True)
    dto = unwrap(result)

    click.echo("Checkout complete.")
    display_order(dto)


@click.command("list")
@click.option("--user", "user_id", required=True, help="User ID.")
def order_list(user_id: str) -> None:
    """List a user's orders, newest first."""
    orders = unwrap(container().list_orders().handle(user_id))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Created':<22} {'Items':>5} {'Total':>10}")
    click.echo("-" * 46)
    for dto in orders:
        click.echo(f"{dto.id:<6} {dto.created_at:<22} {len(dto.items):>5} {dto.total_price:>10}")


@click.command("show")
@click.option("--user", "user_id", required=True, help="Requesting user ID.")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.option("--admin", is_flag=True, default=False, help="Request with admin privilege.")
def order_show(user_id: str, order_id: int, admin: bool) -> None:
    """Show details of an existing order."""
    dto = unwrap(container().show_order().handle(user_id, order_id, is_admin=admin))
    display_order(dto)
