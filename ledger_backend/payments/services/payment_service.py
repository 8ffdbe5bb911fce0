# payments/services/payment_service.py

"""
PAYMENT LIFECYCLE MANAGER

Operations:
- create_payment   validate -> insert payment + allocations -> apply balances
                   -> reconcile accounts (one transaction)
- quick_pay        create_payment with a single allocation
- update_payment   descriptive fields only (date / method / reference / notes)
- delete_payment   user-initiated reversal: every allocation is taken back
                   off its installment, then the payment is removed

Amount and allocations are immutable after creation.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from ledger.services.exceptions import (
    InvalidAllocationAmountError,
    InvalidAllocationTargetError,
)
from ledger.services.kinds import KINDS, get_kind
from ledger.services.lookups import get_scoped, normalize_ids
from ledger.services.money import ZERO, _money
from ledger.services.transactions import ledger_transaction
from payments.commands import CreatePayment, QuickPay, UpdatePayment
from payments.models import Payment, PaymentAllocation
from payments.services.allocation_validator import (
    line_target,
    validate_installments_exist,
    validate_outstanding,
    validate_sum,
    validate_targets,
)
from payments.services.installment_balance import (
    apply_allocation,
    reconcile_accounts,
    reverse_allocation,
)

logger = logging.getLogger("payments")


def _payments_for(organization_id):
    return Payment.objects.filter(organization_id=organization_id)


@ledger_transaction
def create_payment(*, organization_id, command: CreatePayment) -> Payment:
    """
    CREATE PAYMENT (atomic)
    """
    allocations = list(command.allocations)
    amount = _money(command.amount)

    logger.info(
        "Initiating payment",
        extra={
            "organization_id": str(organization_id),
            "amount": str(amount),
            "payment_method": command.payment_method,
            "allocations": len(allocations),
        },
    )

    if amount <= ZERO:
        raise InvalidAllocationAmountError("Payment amount must be greater than zero")

    validate_targets(allocations)
    validate_sum(allocations, amount)

    installments = validate_installments_exist(
        organization_id=organization_id, allocations=allocations
    )
    validate_outstanding(installments=installments, allocations=allocations)

    payment = Payment.objects.create(
        organization_id=organization_id,
        amount=amount,
        payment_date=command.payment_date,
        payment_method=command.payment_method,
        reference=command.reference,
        notes=command.notes,
    )

    rows = []
    touched = defaultdict(set)
    for line in allocations:
        kind, installment_id = line_target(line)
        (uid,) = normalize_ids([installment_id], label="Installment")
        installment = installments[kind.name][uid]
        line_amount = _money(line.amount)

        rows.append(
            PaymentAllocation(
                payment=payment,
                amount=line_amount,
                **{kind.allocation_field: installment},
            )
        )
        apply_allocation(installment=installment, amount=line_amount)
        touched[kind.name].add(installment.account_id)

    PaymentAllocation.objects.bulk_create(rows)
    reconcile_accounts(touched=touched)

    logger.info(
        "Payment recorded",
        extra={
            "payment_id": str(payment.id),
            "organization_id": str(organization_id),
            "amount": str(amount),
        },
    )
    return payment


@ledger_transaction
def quick_pay(*, organization_id, command: QuickPay) -> Payment:
    """
    QUICK PAY: one payment, one installment.
    """
    try:
        get_kind(command.type)
    except ValueError as exc:
        raise InvalidAllocationTargetError(str(exc)) from exc

    return create_payment(
        organization_id=organization_id, command=command.to_create_payment()
    )


@ledger_transaction
def update_payment(*, payment_id, organization_id, command: UpdatePayment) -> Payment:
    """
    UPDATE PAYMENT (descriptive fields only)
    """
    payment = get_scoped(
        _payments_for(organization_id),
        pk=payment_id,
        label="Payment",
        for_update=True,
    )

    update_fields = ["payment_date", "updated_at"]
    payment.payment_date = command.payment_date

    if command.payment_method:
        payment.payment_method = command.payment_method
        update_fields.append("payment_method")

    if "reference" in command.provided:
        payment.reference = command.reference
        update_fields.append("reference")

    if "notes" in command.provided:
        payment.notes = command.notes
        update_fields.append("notes")

    payment.save(update_fields=update_fields)

    logger.info(
        "Payment updated",
        extra={"payment_id": str(payment.id), "fields": update_fields},
    )
    return payment


@ledger_transaction
def delete_payment(*, payment_id, organization_id) -> dict:
    """
    DELETE PAYMENT (atomic reversal)
    """
    payment = get_scoped(
        _payments_for(organization_id),
        pk=payment_id,
        label="Payment",
        for_update=True,
    )
    allocations = list(payment.allocations.all())

    locked = {}
    for kind in KINDS.values():
        ids = [
            getattr(a, f"{kind.allocation_field}_id")
            for a in allocations
            if getattr(a, f"{kind.allocation_field}_id")
        ]
        locked[kind.name] = {
            inst.id: inst
            for inst in kind.installment_model.objects.select_for_update()
            .filter(id__in=ids)
            .order_by("id")
        }

    touched = defaultdict(set)
    for allocation in allocations:
        kind = get_kind(allocation.target_type)
        installment = locked[kind.name][allocation.installment_id]
        reverse_allocation(installment=installment, amount=allocation.amount)
        touched[kind.name].add(installment.account_id)

    payment.delete()
    reconcile_accounts(touched=touched)

    logger.info(
        "Payment deleted and reversed",
        extra={
            "payment_id": str(payment_id),
            "organization_id": str(organization_id),
            "allocations_reversed": len(allocations),
        },
    )
    return {"payment_id": str(payment_id), "allocations_reversed": len(allocations)}
