# ledger/services/installment_query.py

"""
INSTALLMENT / ACCOUNT READ SERVICE

RULES:
- READ-ONLY: no writes, ever
- Tenant-scoped: foreign records are NotFoundError
- OVERDUE is derived at read time (never stored)
"""

from __future__ import annotations

from django_filters.utils import translate_validation

from ledger.filters import FILTERSETS
from ledger.serializers.account_read import (
    InstallmentSerializer,
    PayableSerializer,
    ReceivableSerializer,
)
from ledger.services.installment_store import ordered_installments
from ledger.services.kinds import get_kind
from ledger.services.lookups import get_scoped
from payments.models import Payment

ACCOUNT_SERIALIZERS = {
    "payable": PayableSerializer,
    "receivable": ReceivableSerializer,
}


def _account(*, kind, account_id, organization_id):
    return get_scoped(
        kind.accounts_for(organization_id).select_related(
            kind.counterparty_field, "category"
        ),
        pk=account_id,
        label=kind.name.capitalize(),
    )


def get_account(*, kind, account_id, organization_id, today=None) -> dict:
    kind = get_kind(kind)
    account = _account(kind=kind, account_id=account_id, organization_id=organization_id)
    serializer = ACCOUNT_SERIALIZERS[kind.name](account, context={"today": today})
    return serializer.data


def list_account_installments(*, kind, account_id, organization_id, today=None):
    kind = get_kind(kind)
    account = _account(kind=kind, account_id=account_id, organization_id=organization_id)
    rows = ordered_installments(kind=kind, account_id=account.id)
    return InstallmentSerializer(rows, many=True, context={"today": today}).data


def filter_installments(*, kind, organization_id, params=None, today=None):
    """
    Organization-wide installment search. `params` follows the
    InstallmentFilter field names; invalid params raise DRF ValidationError.
    """
    kind = get_kind(kind)
    queryset = kind.installments_for(organization_id).prefetch_related("tags")

    filterset = FILTERSETS[kind.name](data=params or {}, queryset=queryset, today=today)
    if not filterset.is_valid():
        raise translate_validation(filterset.errors)

    rows = filterset.qs.order_by("due_date", "installment_number")
    return InstallmentSerializer(rows, many=True, context={"today": filterset.today}).data


def list_account_payments(*, kind, account_id, organization_id):
    """
    Payments that hold at least one allocation on the account's installments.
    """
    kind = get_kind(kind)
    account = _account(kind=kind, account_id=account_id, organization_id=organization_id)
    return list(
        Payment.objects.filter(
            organization_id=organization_id,
            **{f"allocations__{kind.allocation_field}__account_id": account.id},
        )
        .distinct()
        .prefetch_related("allocations")
        .order_by("-payment_date", "-created_at")
    )
