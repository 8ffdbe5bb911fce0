# ledger/services/status_rules.py

"""
INSTALLMENT / ACCOUNT STATUS RULES

This module defines the ONLY status derivations for installments and
accounts, and the allowed installment transitions.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth (services call these, never re-derive inline)
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.utils import timezone

from ledger.models.base import LedgerStatus
from ledger.services.exceptions import InvalidStatusTransitionError
from ledger.services.money import MONEY_TOLERANCE, ZERO, _money

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    LedgerStatus.CANCELLED,
}

# Backward moves (PAID/PARTIAL -> PENDING/PARTIAL) only happen through an
# explicit payment reversal.
ALLOWED_TRANSITIONS = {
    LedgerStatus.PENDING: {
        LedgerStatus.PARTIAL,
        LedgerStatus.PAID,
        LedgerStatus.CANCELLED,
    },
    LedgerStatus.PARTIAL: {
        LedgerStatus.PAID,
        LedgerStatus.PENDING,
    },
    LedgerStatus.PAID: {
        LedgerStatus.PARTIAL,
        LedgerStatus.PENDING,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status == to_status:
        return from_status not in TERMINAL_STATES

    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, installment, target_status: str):
    if not can_transition(from_status=installment.status, to_status=target_status):
        raise InvalidStatusTransitionError(
            f"Installment {installment.id} cannot transition from "
            f"'{installment.status}' to '{target_status}'"
        )


def installment_status(*, amount, paid_amount) -> str:
    """
    0 paid                      -> PENDING
    paid >= amount (± 1 cent)   -> PAID
    otherwise                   -> PARTIAL
    """
    paid = _money(paid_amount)
    if paid <= ZERO:
        return LedgerStatus.PENDING
    if paid >= _money(amount) - MONEY_TOLERANCE:
        return LedgerStatus.PAID
    return LedgerStatus.PARTIAL


def account_status(statuses) -> str:
    """
    Derive an account status from its installments' statuses.

    Cancelled installments are ignored unless every installment is cancelled.
    """
    statuses = list(statuses)
    if not statuses:
        return LedgerStatus.PENDING

    live = [s for s in statuses if s != LedgerStatus.CANCELLED]
    if not live:
        return LedgerStatus.CANCELLED

    if all(s == LedgerStatus.PAID for s in live):
        return LedgerStatus.PAID
    if all(s == LedgerStatus.PENDING for s in live):
        return LedgerStatus.PENDING
    return LedgerStatus.PARTIAL


def is_overdue(*, status: str, due_date: date, today: date | None = None) -> bool:
    today = today or timezone.localdate()
    return status in LedgerStatus.OPEN and due_date < today


def reversed_paid_amount(*, paid_amount, reversal) -> Decimal:
    return max(_money(paid_amount) - _money(reversal), ZERO)
