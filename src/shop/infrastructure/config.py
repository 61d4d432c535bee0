"""Application settings, read from SHOP_* environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation

DEFAULT_DATABASE_URL = "sqlite:///data/shop.db"
_TRUE = {"1", "true", "yes", "on"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class AppConfig:
    database_url: str
    log_level: str
    log_json: bool
    currency: str
    conflict_retries: int
    min_deposit: Decimal
    sqlite_timeout: float

    def with_database_url(self, database_url: str | None) -> AppConfig:
        if not database_url:
            return self
        return replace(self, database_url=database_url)


def validate_currency(value: str | None) -> str:
    v = (value or "BRL").strip().upper()
    if len(v) != 3:
        raise ValueError("Invalid currency code: expected ISO4217 length 3")
    return v


def _int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name) or default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"{name} must be a decimal amount, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative")
    return value


def load_env() -> AppConfig:
    log_level = os.getenv("SHOP_LOG_LEVEL", "INFO").strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"Invalid SHOP_LOG_LEVEL: {log_level!r}")
    try:
        sqlite_timeout = float(os.getenv("SHOP_SQLITE_TIMEOUT", "30"))
    except ValueError:
        raise ValueError("SHOP_SQLITE_TIMEOUT must be a number of seconds")
    return AppConfig(
        database_url=os.getenv("SHOP_DATABASE_URL", DEFAULT_DATABASE_URL),
        log_level=log_level,
        log_json=os.getenv("SHOP_LOG_JSON", "false").strip().lower() in _TRUE,
        currency=validate_currency(os.getenv("SHOP_CURRENCY")),
        conflict_retries=_int("SHOP_CONFLICT_RETRIES", 1),
        min_deposit=_decimal("SHOP_MIN_DEPOSIT", "10.00"),
        sqlite_timeout=sqlite_timeout,
    )
