"""CLI commands for account balances."""

from __future__ import annotations

import click

from shop.infrastructure.cli.common import container, unwrap


@click.command("deposit")
@click.option("--user", "user_id", required=True, help="User ID.")
@click.option("--amount", required=True, help="Amount (e.g. 50.00).")
def account_deposit(user_id: str, amount: str) -> None:
    """Add funds to a user's balance."""
    dto = unwrap(container().deposit().handle(user_id, amount))
    click.echo(f"Deposited {amount} for {dto.name}. Current balance: {dto.balance}")


@click.command("balance")
@click.option("--user", "user_id", required=True, help="User ID.")
def account_balance(user_id: str) -> None:
    """Show a user's balance."""
    dto = unwrap(container().show_balance().handle(user_id))
    click.echo(f"{dto.name}: {dto.balance}")


@click.command("reset")
@click.option("--user", "user_id", required=True, help="User whose balance is reset.")
@click.option("--admin", is_flag=True, default=False, help="Request with admin privilege.")
def account_reset(user_id: str, admin: bool) -> None:
    """Set a user's balance to zero (admin only)."""
    dto = unwrap(container().reset_balance().handle(admin, user_id))
    click.echo(f"Balance of {dto.name} reset to {dto.balance}")
