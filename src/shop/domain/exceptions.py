"""Domain-level exceptions.

Every business rule violation is a subclass of DomainException and carries
an ``ErrorKind`` so the application layer can turn it into a typed
``Failure`` without string matching.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    NOT_FOUND = "NOT_FOUND"
    EMPTY_CART = "EMPTY_CART"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONCURRENCY_CONFLICT = "CONCURRENCY_CONFLICT"
    VALIDATION = "VALIDATION"


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = ErrorKind.VALIDATION


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = ErrorKind.NOT_FOUND


class EmptyCartError(DomainException):
    kind = ErrorKind.EMPTY_CART


class InsufficientFundsError(DomainException):
    kind = ErrorKind.INSUFFICIENT_FUNDS


class InsufficientStockError(DomainException):
    """One or more products cannot cover the requested quantity."""

    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, product_titles: list[str]) -> None:
        self.product_titles = list(product_titles)
        super().__init__(
            f"Insufficient products: '{', '.join(self.product_titles)}'"
        )


class UnauthorizedError(DomainException):
    kind = ErrorKind.UNAUTHORIZED


class ConcurrencyConflictError(DomainException):
    """A commit lost a race against a concurrent writer; safe to retry."""

    kind = ErrorKind.CONCURRENCY_CONFLICT
