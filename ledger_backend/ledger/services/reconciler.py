# ledger/services/reconciler.py

"""
ACCOUNT RECONCILER (AUTHORITATIVE)

Keeps an account's aggregate fields consistent with its installments and
owns the destructive cascades.

RULES:
- account.amount             = Σ installment.amount
- account.paid_amount        = Σ installment.paid_amount
- account.total_installments = N (and every installment carries N)
- account.status             = status_rules.account_status(installment statuses)
- Recompute always runs inside the caller's transaction

Cascade (account or installment removal), as one transaction script:
  a) collect the installment ids being removed
  b) delete every allocation referencing them
  c) delete every payment that held one of those allocations and now has none
  d) delete the installments
  e) (account removal) delete the account
Payments that still hold allocations to other installments survive.
No installment-side reversal happens here: the installments are going away.
"""

from __future__ import annotations

import logging

from django.db.models import Count
from django.utils import timezone

from ledger.models.base import LedgerStatus
from ledger.services.exceptions import AccountNotCancellableError
from ledger.services.kinds import get_kind
from ledger.services.lookups import get_scoped
from ledger.services.money import ZERO, money_sum
from ledger.services.status_rules import account_status
from ledger.services.transactions import ledger_transaction
from payments.models import Payment, PaymentAllocation

logger = logging.getLogger("ledger")


def lock_account(*, kind, account_id, organization_id):
    kind = get_kind(kind)
    return get_scoped(
        kind.accounts_for(organization_id),
        pk=account_id,
        label=kind.name.capitalize(),
        for_update=True,
    )


@ledger_transaction
def recompute_account_totals(*, kind, account_id):
    """
    Re-derive amount / paid_amount / status / total_installments from the
    account's installments and persist them.
    """
    kind = get_kind(kind)
    account = get_scoped(
        kind.account_model.objects.all(),
        pk=account_id,
        label=kind.name.capitalize(),
        for_update=True,
    )

    rows = list(
        kind.installment_model.objects.filter(account_id=account.id).values_list(
            "amount", "paid_amount", "status"
        )
    )
    count = len(rows)

    account.amount = money_sum(r[0] for r in rows)
    account.paid_amount = money_sum(r[1] for r in rows)
    account.status = account_status(r[2] for r in rows)
    account.total_installments = count
    account.save(
        update_fields=[
            "amount",
            "paid_amount",
            "status",
            "total_installments",
            "updated_at",
        ]
    )

    if count:
        kind.installment_model.objects.filter(account_id=account.id).exclude(
            total_installments=count
        ).update(total_installments=count, updated_at=timezone.now())

    return account


def purge_installments(*, kind, installment_ids) -> dict:
    """
    Cascade steps (b)-(d). Must run inside the caller's ledger transaction.
    """
    kind = get_kind(kind)
    installment_ids = list(installment_ids)
    if not installment_ids:
        return {
            "installments_deleted": 0,
            "allocations_deleted": 0,
            "payments_deleted": 0,
        }

    allocations = PaymentAllocation.objects.filter(
        **{kind.allocation_filter_key: installment_ids}
    )
    touched_payment_ids = set(allocations.values_list("payment_id", flat=True))
    allocations_deleted, _ = allocations.delete()

    orphan_ids = list(
        Payment.objects.filter(id__in=touched_payment_ids)
        .annotate(allocation_count=Count("allocations"))
        .filter(allocation_count=0)
        .values_list("id", flat=True)
    )
    if orphan_ids:
        Payment.objects.filter(id__in=orphan_ids).delete()

    kind.installment_model.objects.filter(
        id__in=installment_ids
    ).delete()

    return {
        "installments_deleted": len(installment_ids),
        "allocations_deleted": allocations_deleted,
        "payments_deleted": len(orphan_ids),
    }


@ledger_transaction
def delete_account(*, kind, account_id, organization_id) -> dict:
    """
    DELETE ACCOUNT (atomic cascade)
    """
    kind = get_kind(kind)
    account = lock_account(
        kind=kind, account_id=account_id, organization_id=organization_id
    )

    installment_ids = list(
        kind.installment_model.objects.select_for_update()
        .filter(account_id=account.id)
        .values_list("id", flat=True)
    )

    summary = purge_installments(kind=kind, installment_ids=installment_ids)
    account.delete()

    logger.info(
        "Account deleted",
        extra={
            "kind": kind.name,
            "account_id": str(account_id),
            "organization_id": str(organization_id),
            **summary,
        },
    )

    return {"account_id": str(account_id), **summary}


@ledger_transaction
def cancel_account(*, kind, account_id, organization_id):
    """
    CANCEL ACCOUNT

    Only accounts with no money applied can be cancelled. The account and
    every installment become CANCELLED (terminal).
    """
    kind = get_kind(kind)
    account = lock_account(
        kind=kind, account_id=account_id, organization_id=organization_id
    )

    if account.status == LedgerStatus.CANCELLED:
        raise AccountNotCancellableError(
            f"{kind.name.capitalize()} is already cancelled",
            account_id=str(account.id),
        )

    installments = list(
        kind.installment_model.objects.select_for_update().filter(
            account_id=account.id
        )
    )
    if any(inst.paid_amount > ZERO for inst in installments):
        raise AccountNotCancellableError(
            f"{kind.name.capitalize()} has payments and cannot be cancelled",
            account_id=str(account.id),
        )

    kind.installment_model.objects.filter(account_id=account.id).update(
        status=LedgerStatus.CANCELLED, updated_at=timezone.now()
    )
    account = recompute_account_totals(kind=kind, account_id=account.id)

    logger.info(
        "Account cancelled",
        extra={
            "kind": kind.name,
            "account_id": str(account.id),
            "organization_id": str(organization_id),
        },
    )
    return account
