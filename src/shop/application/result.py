"""Typed outcomes returned by every use-case handler.

Handlers do not raise for expected business outcomes (empty cart, missing
funds, ...). They return ``Success`` or ``Failure`` and the caller checks
``result.ok`` before using ``result.value``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

from shop.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    ErrorKind,
    InsufficientStockError,
    UnauthorizedError,
)

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    ok = True


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    product_titles: tuple[str, ...] = field(default_factory=tuple)
    ok = False

    @staticmethod
    def from_exception(exc: DomainException) -> Failure:
        titles: tuple[str, ...] = ()
        if isinstance(exc, InsufficientStockError):
            titles = tuple(exc.product_titles)
        return Failure(kind=exc.kind, message=str(exc), product_titles=titles)

    @staticmethod
    def not_found(message: str) -> Failure:
        return Failure.from_exception(EntityNotFoundError(message))

    @staticmethod
    def unauthorized(message: str) -> Failure:
        return Failure.from_exception(UnauthorizedError(message))


Result = Union[Success[T], Failure]
