# payments/services/allocation_validator.py

"""
ALLOCATION VALIDATOR

Pure-ish checks run BEFORE any payment write:

1) validate_targets            every line targets exactly one installment, amount > 0
2) validate_sum                Σ line.amount == payment.amount (± 1 cent)
3) validate_installments_exist every referenced installment exists in the
                               organization (cross-tenant == missing)
4) validate_outstanding        no installment is pushed beyond its amount,
                               cancelled installments take no money

(3) and (4) read the database and must run inside the caller's transaction;
(3) locks the installments it returns.
"""

from __future__ import annotations

from collections import defaultdict

from ledger.models.base import LedgerStatus
from ledger.services.exceptions import (
    AmountMismatchError,
    InstallmentNotPayableError,
    InvalidAllocationAmountError,
    InvalidAllocationTargetError,
    OverAllocationError,
)
from ledger.services.kinds import PAYABLE, RECEIVABLE
from ledger.services.lookups import fetch_scoped_many, normalize_ids
from ledger.services.money import ZERO, _money, equal_within_tolerance, exceeds, money_sum


def line_target(line):
    """
    (kind, installment_id) of a validated allocation line.
    """
    if line.payable_installment_id:
        return PAYABLE, line.payable_installment_id
    return RECEIVABLE, line.receivable_installment_id


def validate_targets(allocations) -> None:
    for index, line in enumerate(allocations):
        if line.target_count != 1:
            raise InvalidAllocationTargetError(
                "Each allocation must target exactly one installment "
                "(payable or receivable)",
                index=index,
            )
        if _money(line.amount) <= ZERO:
            raise InvalidAllocationAmountError(
                "Allocation amount must be greater than zero",
                index=index,
            )


def validate_sum(allocations, payment_amount) -> None:
    total = money_sum(line.amount for line in allocations)
    if not equal_within_tolerance(total, payment_amount):
        raise AmountMismatchError(
            f"Sum of allocations ({total}) must equal the payment amount "
            f"({_money(payment_amount)})",
            allocations_total=str(total),
            payment_amount=str(_money(payment_amount)),
        )


def validate_installments_exist(*, organization_id, allocations) -> dict:
    """
    Returns {kind_name: {installment_uuid: locked installment}}.
    """
    requested = defaultdict(list)
    for line in allocations:
        kind, installment_id = line_target(line)
        requested[kind.name].append(installment_id)

    found = {}
    for kind in (PAYABLE, RECEIVABLE):
        ids = requested.get(kind.name)
        if not ids:
            found[kind.name] = {}
            continue
        found[kind.name] = fetch_scoped_many(
            kind.installments_for(organization_id).order_by("id"),
            ids=ids,
            label=f"{kind.name.capitalize()} installment",
            for_update=True,
        )
    return found


def validate_outstanding(*, installments: dict, allocations) -> None:
    """
    Lines aimed at the same installment are accumulated before comparing
    with its outstanding balance.
    """
    requested = defaultdict(lambda: ZERO)
    for line in allocations:
        kind, installment_id = line_target(line)
        (uid,) = normalize_ids([installment_id], label="Installment")
        requested[(kind.name, uid)] += _money(line.amount)

    for (kind_name, uid), amount in requested.items():
        installment = installments[kind_name][uid]

        if installment.status == LedgerStatus.CANCELLED:
            raise InstallmentNotPayableError(
                "Cancelled installments cannot receive payments",
                installment_id=str(uid),
            )

        if exceeds(amount, installment.outstanding_amount):
            raise OverAllocationError(
                f"Allocation ({amount}) exceeds the installment's outstanding "
                f"balance ({installment.outstanding_amount})",
                installment_id=str(uid),
                outstanding=str(installment.outstanding_amount),
            )
