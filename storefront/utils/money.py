# storefront/utils/money.py
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

# tolerance for comparing declared against computed totals
EPSILON = Decimal("0.01")


def to_money(value) -> Decimal:
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable) -> Decimal:
    return sum((to_money(v) for v in values), ZERO)


def reconciles(computed, declared) -> bool:
    return abs(to_money(computed) - to_money(declared)) <= EPSILON


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes (SQLite drops the offset) are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
