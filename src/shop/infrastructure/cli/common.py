"""Helpers shared by the CLI command modules."""

from __future__ import annotations

from typing import TypeVar

import click

from shop.application.dto import OrderDTO
from shop.application.result import Result
from shop.infrastructure.bootstrap import Container

T = TypeVar("T")


def container() -> Container:
    return click.get_current_context().find_object(Container)


def unwrap(result: Result[T]) -> T:
    """Return the success value or abort the command with the failure."""
    if not result.ok:
        raise click.ClickException(result.message)
    return result.value


def display_order(dto: OrderDTO) -> None:
    click.echo(f"Order #{dto.id}  (user={dto.user_id})")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_title:<20} {item.quantity:>5} {item.unit_price:>10} {item.subtotal:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total_price:>20}")
