# ledger/services/money.py

"""
MONEY HELPERS

All ledger amounts are Decimal with 2 places. Equality between money
values is tolerant to one cent so that split schedules and partial
payments never strand a sub-cent remainder.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ledger.services.exceptions import InvalidScheduleError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

MONEY_TOLERANCE = Decimal("0.01")


def _money(v) -> Decimal:
    try:
        return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidScheduleError(f"Invalid money amount: {v!r}", value=str(v)) from exc


def to_money(v) -> Decimal:
    return _money(v)


def equal_within_tolerance(a, b) -> bool:
    return abs(_money(a) - _money(b)) <= MONEY_TOLERANCE


def exceeds(a, b) -> bool:
    """True when `a` is greater than `b` by more than the tolerance."""
    return _money(a) - _money(b) > MONEY_TOLERANCE


def money_sum(values) -> Decimal:
    total = ZERO
    for v in values:
        total += _money(v)
    return _money(total)
