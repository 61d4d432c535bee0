"""CLI commands for store sales reports."""

from __future__ import annotations

import click

from shop.application.dto import SaleDTO
from shop.infrastructure.cli.common import container, unwrap


def _display_sales(sales: list[SaleDTO]) -> None:
    if not sales:
        click.echo("No sales found.")
        return

    click.echo(f"{'Order':<6} {'Product':<20} {'Qty':>5} {'Total':>10} {'Buyer':<16} {'Date':<20}")
    click.echo("-" * 82)
    for sale in sales:
        click.echo(
            f"{sale.order_id:<6} {sale.product_title:<20} {sale.quantity:>5} "
            f"{sale.subtotal:>10} {sale.buyer_name:<16} {sale.created_at:<20}"
        )


@click.command("store")
@click.option("--owner", "owner_id", required=True, help="Store owner's user ID.")
def sales_store(owner_id: str) -> None:
    """List every sale of the owner's store."""
    _display_sales(unwrap(container().list_sales().for_store(owner_id)))


@click.command("product")
@click.option("--user", "user_id", required=True, help="Requesting user ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--admin", is_flag=True, default=False, help="Request with admin privilege.")
def sales_product(user_id: str, product_id: str, admin: bool) -> None:
    """List the sales of one product."""
    _display_sales(
        unwrap(container().list_sales().for_product(user_id, product_id, is_admin=admin))
    )
