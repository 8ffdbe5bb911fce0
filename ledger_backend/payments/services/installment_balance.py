# payments/services/installment_balance.py

"""
INSTALLMENT BALANCE MANAGER

Applies / reverses allocation amounts on installment rows and re-derives
their status. Callers hold the row locks (select_for_update) and the
ledger transaction.
"""

from __future__ import annotations

from ledger.services.kinds import get_kind
from ledger.services.money import _money
from ledger.services.reconciler import recompute_account_totals
from ledger.services.status_rules import (
    installment_status,
    reversed_paid_amount,
    validate_transition,
)


def _save_balance(installment, *, paid_amount):
    new_status = installment_status(
        amount=installment.amount, paid_amount=paid_amount
    )
    validate_transition(installment=installment, target_status=new_status)

    installment.paid_amount = paid_amount
    installment.status = new_status
    installment.save(update_fields=["paid_amount", "status", "updated_at"])
    return installment


def apply_allocation(*, installment, amount):
    return _save_balance(
        installment, paid_amount=_money(installment.paid_amount + _money(amount))
    )


def reverse_allocation(*, installment, amount):
    return _save_balance(
        installment,
        paid_amount=reversed_paid_amount(
            paid_amount=installment.paid_amount, reversal=amount
        ),
    )


def reconcile_accounts(*, touched: dict) -> None:
    """
    touched: {kind_name: {account_id, ...}}. Accounts are recomputed in a
    stable order so concurrent operations lock them consistently.
    """
    for kind_name in sorted(touched):
        kind = get_kind(kind_name)
        for account_id in sorted(touched[kind_name], key=str):
            recompute_account_totals(kind=kind, account_id=account_id)
