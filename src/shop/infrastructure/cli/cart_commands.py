"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from shop.infrastructure.cli.common import container, unwrap


@click.command("add")
@click.option("--user", "user_id", required=True, help="User ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option(
    "--quantity", required=True, type=int,
    help="Signed quantity change; negative removes units.",
)
def cart_add(user_id: str, product_id: str, quantity: int) -> None:
    """Add units of a product to the cart (or remove, with a negative quantity)."""
    dto = unwrap(container().add_to_cart().handle(user_id, product_id, quantity))

    if dto.outcome == "removed":
        click.echo(f"Removed '{dto.product_title}' from the cart.")
    else:
        click.echo(
            f"Added {dto.quantity} x '{dto.product_title}' "
            f"(now {dto.current_quantity} in cart)."
        )
    click.echo(f"Cart total: {dto.cart_total}")


@click.command("remove")
@click.option("--user", "user_id", required=True, help="User ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
def cart_remove(user_id: str, product_id: str) -> None:
    """Remove a product from the cart entirely."""
    dto = unwrap(container().remove_from_cart().handle(user_id, product_id))
    click.echo(f"Removed '{dto.product_title}' from the cart.")
    click.echo(f"Cart total: {dto.cart_total}")


@click.command("empty")
@click.option("--user", "user_id", required=True, help="User ID.")
def cart_empty(user_id: str) -> None:
    """Remove every item from the cart."""
    unwrap(container().empty_cart().handle(user_id))
    click.echo("Cart emptied.")


@click.command("show")
@click.option("--user", "user_id", required=True, help="User ID.")
def cart_show(user_id: str) -> None:
    """Show the cart with its items."""
    dto = unwrap(container().show_cart().handle(user_id))

    if not dto.items:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'Product':<20} {'Qty':>5} {'Subtotal':>10}")
    click.echo(f"  {'-'*37}")
    for item in dto.items:
        click.echo(f"  {item.product_title:<20} {item.quantity:>5} {item.subtotal:>10}")
    click.echo(f"  {'-'*37}")
    click.echo(f"  {'Cart Total':<26} {dto.total_price:>10}")


@click.command("item")
@click.option("--user", "user_id", required=True, help="User ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
def cart_item(user_id: str, product_id: str) -> None:
    """Show how many units of a product are in the cart."""
    item = unwrap(container().show_cart_line().handle(user_id, product_id))
    click.echo(f"{item.product_title}: {item.quantity} (subtotal {item.subtotal})")
