"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data from the application layer to the outer surface (CLI or
any other transport) without exposing domain internals. Money values are
rendered as strings like "30.00".
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shop.domain.model.account import Account
from shop.domain.model.cart import Cart, CartLineItem, CartMutation
from shop.domain.model.order import Order, SaleRecord

_TIMESTAMP = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class CartMutationDTO:
    """Output of add/remove: ``outcome`` is "added" or "removed"."""

    outcome: str
    product_id: str
    product_title: str
    quantity: int
    current_quantity: int
    cart_total: str

    @staticmethod
    def from_domain(mutation: CartMutation, cart: Cart) -> CartMutationDTO:
        return CartMutationDTO(
            outcome=mutation.outcome.value,
            product_id=mutation.product_id,
            product_title=mutation.product_title,
            quantity=mutation.quantity_delta,
            current_quantity=mutation.current_quantity,
            cart_total=str(cart.total_price),
        )


@dataclass(frozen=True)
class CartLineItemDTO:
    product_id: str
    product_title: str
    quantity: int
    subtotal: str

    @staticmethod
    def from_domain(item: CartLineItem) -> CartLineItemDTO:
        return CartLineItemDTO(
            product_id=item.product_id,
            product_title=item.product_title,
            quantity=item.quantity,
            subtotal=str(item.subtotal),
        )


@dataclass(frozen=True)
class CartDTO:
    id: int
    user_id: str
    total_price: str
    items: list[CartLineItemDTO] = field(default_factory=list)

    @staticmethod
    def from_domain(cart: Cart) -> CartDTO:
        return CartDTO(
            id=cart.id,  # type: ignore[arg-type]
            user_id=cart.user_id,
            total_price=str(cart.total_price),
            items=[CartLineItemDTO.from_domain(item) for item in cart.items],
        )


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    product_title: str
    quantity: int
    unit_price: str
    subtotal: str


@dataclass(frozen=True)
class OrderDTO:
    id: int
    user_id: str
    total_price: str
    created_at: str
    items: list[OrderLineItemDTO]

    @staticmethod
    def from_domain(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            user_id=order.user_id,
            total_price=str(order.total_price),
            created_at=order.created_at.strftime(_TIMESTAMP),
            items=[
                OrderLineItemDTO(
                    product_id=item.product_id,
                    product_title=item.product_title,
                    quantity=item.quantity,
                    unit_price=str(item.unit_price),
                    subtotal=str(item.subtotal),
                )
                for item in order.items
            ],
        )


@dataclass(frozen=True)
class BalanceDTO:
    user_id: str
    name: str
    balance: str

    @staticmethod
    def from_domain(account: Account) -> BalanceDTO:
        return BalanceDTO(
            user_id=account.user_id,
            name=account.name,
            balance=str(account.balance),
        )


@dataclass(frozen=True)
class SaleDTO:
    order_id: int
    product_id: str
    product_title: str
    quantity: int
    subtotal: str
    buyer_name: str
    created_at: str

    @staticmethod
    def from_domain(sale: SaleRecord) -> SaleDTO:
        return SaleDTO(
            order_id=sale.order_id,
            product_id=sale.product_id,
            product_title=sale.product_title,
            quantity=sale.quantity,
            subtotal=str(sale.subtotal),
            buyer_name=sale.buyer_name,
            created_at=sale.created_at.strftime(_TIMESTAMP),
        )
