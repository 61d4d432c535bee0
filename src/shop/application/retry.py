"""Bounded retry of a unit of work that lost a race."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog

from shop.application.result import Failure, Result
from shop.domain.exceptions import ConcurrencyConflictError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_CONFLICT_RETRIES = 1


def retry_on_conflict(
    attempt: Callable[[], Result[T]],
    retries: int,
    operation: str,
    **context,
) -> Result[T]:
    """Run *attempt*, re-running it up to *retries* times on a conflict.

    Each call of *attempt* must open its own unit of work. When the last
    try still conflicts the conflict is returned as a Failure.
    """
    tries = 0
    while True:
        try:
            return attempt()
        except ConcurrencyConflictError as exc:
            if tries >= retries:
                logger.warning(
                    "Concurrency conflict, giving up",
                    operation=operation,
                    retries=tries,
                    error=str(exc),
                    **context,
                )
                return Failure.from_exception(exc)
            tries += 1
            logger.info(
                "Concurrency conflict, retrying",
                operation=operation,
                attempt=tries,
                **context,
            )
