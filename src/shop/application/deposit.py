"""Application service: account balance use cases.

Deposits and resets are the only balance changes outside checkout.
"""

from __future__ import annotations

import structlog

from shop.application.dto import BalanceDTO
from shop.application.result import Failure, Result, Success
from shop.application.retry import DEFAULT_CONFLICT_RETRIES, retry_on_conflict
from shop.domain.exceptions import DomainException, ErrorKind
from shop.domain.model.value_objects import Money
from shop.domain.repository.unit_of_work import UnitOfWork
from shop.domain.service.ledger import MIN_DEPOSIT, Ledger

logger = structlog.get_logger(__name__)


class DepositHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        min_deposit: Money = MIN_DEPOSIT,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._uow = uow
        self._min_deposit = min_deposit
        self._conflict_retries = conflict_retries

    def handle(self, user_id: str, amount: str) -> Result[BalanceDTO]:
        try:
            value = Money.of(amount, self._min_deposit.currency)
        except DomainException as exc:
            return Failure.from_exception(exc)
        if value < self._min_deposit:
            return Failure(
                ErrorKind.VALIDATION,
                f"The minimum deposit value is {self._min_deposit}",
            )
        return retry_on_conflict(
            lambda: self._deposit(user_id, value),
            self._conflict_retries,
            "account.deposit",
            user_id=user_id,
        )

    def _deposit(self, user_id: str, value: Money) -> Result[BalanceDTO]:
        with self._uow as uow:
            if uow.accounts.get_for_update(user_id) is None:
                return Failure.not_found("User not found")
            Ledger(uow.accounts, self._min_deposit).deposit(user_id, value)
            account = uow.accounts.get_by_id(user_id)
            uow.commit()

        logger.info("Deposit recorded", user_id=user_id, amount=str(value))
        return Success(BalanceDTO.from_domain(account))  # type: ignore[arg-type]


class ResetBalanceHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, requester_is_admin: bool, user_id: str) -> Result[BalanceDTO]:
        if not requester_is_admin:
            return Failure.unauthorized("You need to be an admin to reset a user balance")
        with self._uow as uow:
            if uow.accounts.get_for_update(user_id) is None:
                return Failure.not_found("User not found")
            Ledger(uow.accounts).reset(user_id)
            account = uow.accounts.get_by_id(user_id)
            uow.commit()

        logger.info("Balance reset", user_id=user_id)
        return Success(BalanceDTO.from_domain(account))  # type: ignore[arg-type]


class ShowBalanceHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str) -> Result[BalanceDTO]:
        with self._uow as uow:
            account = uow.accounts.get_by_id(user_id)
        if account is None:
            return Failure.not_found("User not found")
        return Success(BalanceDTO.from_domain(account))
