# ledger/services/installment_store.py

"""
INSTALLMENT STORE & REORDERING

Owns installment rows: edits, schedule reordering, removal and re-splitting.

RULES:
- amount / due_date edits require status PENDING and no allocations
- notes / tags are always editable
- installment_number is 1..N, contiguous, chronological by due_date
  (ties keep their previous relative order)
- every mutation ends with an account recompute (reconciler)
"""

from __future__ import annotations

import logging
from decimal import ROUND_DOWN, Decimal

from django.utils import timezone

from ledger.commands import InstallmentUpdate
from ledger.models.base import LedgerStatus
from ledger.services.dates import coerce_due_date
from ledger.services.exceptions import (
    InstallmentHasPaymentsError,
    InstallmentNotEditableError,
    InvalidScheduleError,
    LastInstallmentError,
)
from ledger.services.kinds import get_kind
from ledger.services.lookups import fetch_scoped_many, get_scoped
from ledger.services.money import TWOPLACES, ZERO, _money
from ledger.services.reconciler import (
    lock_account,
    purge_installments,
    recompute_account_totals,
)
from ledger.services.transactions import ledger_transaction
from organizations.models import Tag
from payments.models import PaymentAllocation

logger = logging.getLogger("ledger")


# ============================================================
# HELPERS
# ============================================================


def split_amount(*, total, count: int) -> list[Decimal]:
    """
    Split `total` into `count` cent-exact slices. Every slice is the floor
    share; the last slice absorbs the remainder.
    """
    total = _money(total)
    if count < 1:
        raise InvalidScheduleError("Installment count must be at least 1")

    base = (total / count).quantize(TWOPLACES, rounding=ROUND_DOWN)
    if base <= ZERO:
        raise InvalidScheduleError(
            "Amount is too small to split into the requested installments"
        )

    parts = [base] * count
    parts[-1] = _money(total - base * (count - 1))
    return parts


def has_allocations(*, kind, installment_ids) -> bool:
    kind = get_kind(kind)
    return PaymentAllocation.objects.filter(
        **{kind.allocation_filter_key: list(installment_ids)}
    ).exists()


def resolve_tags(*, organization_id, tag_ids):
    found = fetch_scoped_many(
        Tag.objects.for_organization(organization_id),
        ids=tag_ids,
        label="Tag",
    )
    return list(found.values())


def ordered_installments(*, kind, account_id):
    kind = get_kind(kind)
    return list(
        kind.installment_model.objects.filter(account_id=account_id)
        .prefetch_related("tags")
        .order_by("installment_number")
    )


@ledger_transaction
def reorder_installments(*, kind, account_id):
    """
    Sort by (due_date, previous installment_number) and renumber 1..N.
    Stable and idempotent: an already ordered schedule writes nothing.
    """
    kind = get_kind(kind)
    rows = list(
        kind.installment_model.objects.select_for_update()
        .filter(account_id=account_id)
        .order_by("due_date", "installment_number", "created_at")
    )

    count = len(rows)
    now = timezone.now()
    changed = []
    for number, inst in enumerate(rows, start=1):
        if inst.installment_number != number or inst.total_installments != count:
            inst.installment_number = number
            inst.total_installments = count
            inst.updated_at = now
            changed.append(inst)

    if changed:
        kind.installment_model.objects.bulk_update(
            changed, ["installment_number", "total_installments", "updated_at"]
        )

    return rows


# ============================================================
# OPERATIONS
# ============================================================


@ledger_transaction
def update_installment(
    *,
    kind,
    account_id,
    installment_id,
    organization_id,
    command: InstallmentUpdate,
):
    """
    UPDATE INSTALLMENT (atomic)

    Returns the account's installments in chronological order.
    """
    kind = get_kind(kind)
    account = lock_account(
        kind=kind, account_id=account_id, organization_id=organization_id
    )
    installment = get_scoped(
        kind.installment_model.objects.filter(account_id=account.id),
        pk=installment_id,
        label="Installment",
        for_update=True,
    )

    new_amount = _money(command.amount) if command.amount is not None else None
    new_due_date = coerce_due_date(command.due_date)

    amount_changed = new_amount is not None and new_amount != installment.amount
    due_date_changed = (
        new_due_date is not None and new_due_date != installment.due_date
    )

    if amount_changed or due_date_changed:
        if installment.status != LedgerStatus.PENDING:
            raise InstallmentNotEditableError(
                "Only pending installments can change amount or due date",
                installment_id=str(installment.id),
                status=installment.status,
            )
        if has_allocations(kind=kind, installment_ids=[installment.id]):
            raise InstallmentHasPaymentsError(
                "Installment has payments; amount and due date are locked",
                installment_id=str(installment.id),
            )

    update_fields = ["updated_at"]

    if amount_changed:
        if new_amount <= ZERO:
            raise InvalidScheduleError("Installment amount must be greater than zero")
        installment.amount = new_amount
        update_fields.append("amount")

    if due_date_changed:
        installment.due_date = new_due_date
        update_fields.append("due_date")

    if command.notes is not None:
        installment.notes = command.notes.strip() or None
        update_fields.append("notes")

    installment.save(update_fields=update_fields)

    if command.tag_ids is not None:
        installment.tags.set(
            resolve_tags(organization_id=organization_id, tag_ids=command.tag_ids)
        )

    if new_due_date is not None:
        reorder_installments(kind=kind, account_id=account.id)

    recompute_account_totals(kind=kind, account_id=account.id)

    logger.info(
        "Installment updated",
        extra={
            "kind": kind.name,
            "account_id": str(account.id),
            "installment_id": str(installment.id),
            "amount_changed": amount_changed,
            "due_date_changed": due_date_changed,
        },
    )

    return ordered_installments(kind=kind, account_id=account.id)


@ledger_transaction
def delete_installment(*, kind, account_id, installment_id, organization_id):
    """
    DELETE INSTALLMENT (atomic)

    Removes one PENDING, unpaid installment, renumbers the rest and
    reconciles the account. Returns the remaining installments.
    """
    kind = get_kind(kind)
    account = lock_account(
        kind=kind, account_id=account_id, organization_id=organization_id
    )
    installment = get_scoped(
        kind.installment_model.objects.filter(account_id=account.id),
        pk=installment_id,
        label="Installment",
        for_update=True,
    )

    if kind.installment_model.objects.filter(account_id=account.id).count() <= 1:
        raise LastInstallmentError(
            "Cannot delete the only installment of an account",
            account_id=str(account.id),
        )
    if installment.status != LedgerStatus.PENDING:
        raise InstallmentNotEditableError(
            "Only pending installments can be deleted",
            installment_id=str(installment.id),
            status=installment.status,
        )
    if has_allocations(kind=kind, installment_ids=[installment.id]):
        raise InstallmentHasPaymentsError(
            "Installment has payments and cannot be deleted",
            installment_id=str(installment.id),
        )

    purge_installments(kind=kind, installment_ids=[installment.id])
    reorder_installments(kind=kind, account_id=account.id)
    recompute_account_totals(kind=kind, account_id=account.id)

    logger.info(
        "Installment deleted",
        extra={
            "kind": kind.name,
            "account_id": str(account.id),
            "installment_id": str(installment_id),
        },
    )

    return ordered_installments(kind=kind, account_id=account.id)


@ledger_transaction
def resplit_installments(*, kind, account_id, amount):
    """
    Spread a new account total over the existing schedule (due dates kept).
    Refused once any installment has money applied.
    """
    kind = get_kind(kind)
    rows = list(
        kind.installment_model.objects.select_for_update()
        .filter(account_id=account_id)
        .order_by("installment_number")
    )

    if any(inst.paid_amount > ZERO for inst in rows) or has_allocations(
        kind=kind, installment_ids=[inst.id for inst in rows]
    ):
        raise InstallmentHasPaymentsError(
            "Account has payments; its amount can no longer change",
            account_id=str(account_id),
        )

    now = timezone.now()
    for inst, part in zip(rows, split_amount(total=amount, count=len(rows))):
        inst.amount = part
        inst.updated_at = now

    kind.installment_model.objects.bulk_update(rows, ["amount", "updated_at"])
    return recompute_account_totals(kind=kind, account_id=account_id)
