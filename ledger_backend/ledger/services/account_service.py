# ledger/services/account_service.py

"""
ACCOUNT SERVICE

create_account
- installment_count in 1..MAX_INSTALLMENTS
- exactly one due date per installment, strictly ascending
- amount split in cents; the last installment absorbs the remainder
- optional `payment` block settles the listed installments in full through
  the payment lifecycle, inside the same transaction

update_account
- counterparty / category / document number / notes / tags
- amount re-splits the schedule (refused once money was applied)
- aggregate fields are never written directly
"""

from __future__ import annotations

import logging

from ledger.commands import CreateAccount, UpdateAccount
from ledger.models.base import LedgerStatus
from ledger.services.exceptions import (
    InstallmentNotEditableError,
    InvalidScheduleError,
)
from ledger.services.installment_store import (
    ordered_installments,
    resolve_tags,
    resplit_installments,
    split_amount,
)
from ledger.services.kinds import get_kind
from ledger.services.lookups import get_scoped
from ledger.services.money import ZERO, _money
from ledger.services.reconciler import lock_account, recompute_account_totals
from ledger.services.transactions import ledger_transaction
from organizations.models import Category
from payments.commands import AllocationLine, CreatePayment
from payments.services.payment_service import create_payment

logger = logging.getLogger("ledger")

MAX_INSTALLMENTS = 120


def _validate_schedule(command: CreateAccount):
    count = command.installment_count
    if count < 1 or count > MAX_INSTALLMENTS:
        raise InvalidScheduleError(
            f"installment_count must be between 1 and {MAX_INSTALLMENTS}",
            installment_count=count,
        )

    due_dates = list(command.due_dates)
    if len(due_dates) != count:
        raise InvalidScheduleError(
            f"due_dates must contain exactly {count} date(s)",
            received=len(due_dates),
        )

    for previous, current in zip(due_dates, due_dates[1:]):
        if current <= previous:
            raise InvalidScheduleError(
                "due_dates must be in strictly ascending order",
                previous=str(previous),
                current=str(current),
            )

    if _money(command.amount) <= ZERO:
        raise InvalidScheduleError("Amount must be greater than zero")

    return due_dates


def _resolve_counterparty(*, kind, organization_id, counterparty_id):
    return get_scoped(
        kind.counterparty_model.objects.active(organization_id),
        pk=counterparty_id,
        label=kind.counterparty_model.__name__,
    )


def _resolve_category(*, kind, organization_id, category_id):
    return get_scoped(
        Category.objects.active(organization_id).filter(type=kind.category_type),
        pk=category_id,
        label="Category",
    )


def _settle_installments(*, kind, organization_id, account, payment):
    by_number = {
        inst.installment_number: inst
        for inst in ordered_installments(kind=kind, account_id=account.id)
    }

    numbers = sorted(set(payment.installment_numbers))
    if not numbers:
        raise InvalidScheduleError("payment.installment_numbers must not be empty")

    unknown = [n for n in numbers if n not in by_number]
    if unknown:
        raise InvalidScheduleError(
            "payment.installment_numbers references unknown installments",
            installment_numbers=unknown,
        )

    lines = tuple(
        AllocationLine(
            amount=by_number[n].amount,
            **{f"{kind.allocation_field}_id": by_number[n].id},
        )
        for n in numbers
    )

    return create_payment(
        organization_id=organization_id,
        command=CreatePayment(
            amount=_money(sum(line.amount for line in lines)),
            payment_date=payment.payment_date,
            payment_method=payment.payment_method,
            allocations=lines,
            reference=payment.reference,
            notes=payment.notes,
        ),
    )


@ledger_transaction
def create_account(*, kind, organization_id, command: CreateAccount):
    """
    CREATE ACCOUNT + SCHEDULE (atomic)
    """
    kind = get_kind(kind)
    due_dates = _validate_schedule(command)

    counterparty = _resolve_counterparty(
        kind=kind,
        organization_id=organization_id,
        counterparty_id=command.counterparty_id,
    )
    category = None
    if command.category_id:
        category = _resolve_category(
            kind=kind,
            organization_id=organization_id,
            category_id=command.category_id,
        )
    tags = resolve_tags(organization_id=organization_id, tag_ids=command.tag_ids)

    parts = split_amount(total=command.amount, count=command.installment_count)

    account = kind.account_model.objects.create(
        organization_id=organization_id,
        category=category,
        document_number=command.document_number or "",
        notes=command.notes or "",
        amount=_money(command.amount),
        total_installments=command.installment_count,
        **{kind.counterparty_field: counterparty},
    )
    if tags:
        account.tags.set(tags)

    kind.installment_model.objects.bulk_create(
        [
            kind.installment_model(
                account=account,
                installment_number=number,
                total_installments=command.installment_count,
                amount=part,
                due_date=due_date,
                status=LedgerStatus.PENDING,
            )
            for number, (part, due_date) in enumerate(zip(parts, due_dates), start=1)
        ]
    )

    if command.payment is not None:
        _settle_installments(
            kind=kind,
            organization_id=organization_id,
            account=account,
            payment=command.payment,
        )

    account = recompute_account_totals(kind=kind, account_id=account.id)

    logger.info(
        "Account created",
        extra={
            "kind": kind.name,
            "account_id": str(account.id),
            "organization_id": str(organization_id),
            "amount": str(account.amount),
            "installments": account.total_installments,
            "paid_on_creation": command.payment is not None,
        },
    )
    return account


@ledger_transaction
def update_account(*, kind, account_id, organization_id, command: UpdateAccount):
    """
    UPDATE ACCOUNT METADATA (atomic)
    """
    kind = get_kind(kind)
    account = lock_account(
        kind=kind, account_id=account_id, organization_id=organization_id
    )

    update_fields = ["updated_at"]

    if command.counterparty_id:
        setattr(
            account,
            kind.counterparty_field,
            _resolve_counterparty(
                kind=kind,
                organization_id=organization_id,
                counterparty_id=command.counterparty_id,
            ),
        )
        update_fields.append(kind.counterparty_field)

    if command.clear_category:
        account.category = None
        update_fields.append("category")
    elif command.category_id:
        account.category = _resolve_category(
            kind=kind,
            organization_id=organization_id,
            category_id=command.category_id,
        )
        update_fields.append("category")

    if command.document_number is not None:
        account.document_number = command.document_number.strip()
        update_fields.append("document_number")

    if command.notes is not None:
        account.notes = command.notes
        update_fields.append("notes")

    account.save(update_fields=update_fields)

    if command.tag_ids is not None:
        account.tags.set(
            resolve_tags(organization_id=organization_id, tag_ids=command.tag_ids)
        )

    if command.amount is not None and _money(command.amount) != account.amount:
        if _money(command.amount) <= ZERO:
            raise InvalidScheduleError("Amount must be greater than zero")
        if account.status == LedgerStatus.CANCELLED:
            raise InstallmentNotEditableError(
                f"{kind.name.capitalize()} is cancelled; its amount cannot change",
                account_id=str(account.id),
            )
        resplit_installments(kind=kind, account_id=account.id, amount=command.amount)

    account = recompute_account_totals(kind=kind, account_id=account.id)

    logger.info(
        "Account updated",
        extra={
            "kind": kind.name,
            "account_id": str(account.id),
            "fields": update_fields,
        },
    )
    return account
