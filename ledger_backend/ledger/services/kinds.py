# ledger/services/kinds.py

"""
ACCOUNT KINDS

Payables and receivables run through the same engine. An AccountKind
bundles everything that differs between the two sides so services can be
written once:

    kind = get_kind("payable")
    kind.installment_model.objects.filter(account__organization_id=org_id)
"""

from __future__ import annotations

from dataclasses import dataclass

from ledger.models import (
    Payable,
    PayableInstallment,
    Receivable,
    ReceivableInstallment,
)
from organizations.models import Category, Customer, Vendor


@dataclass(frozen=True)
class AccountKind:
    name: str
    account_model: type
    installment_model: type
    counterparty_model: type
    counterparty_field: str
    allocation_field: str
    category_type: str

    def __str__(self):
        return self.name

    @property
    def allocation_filter_key(self) -> str:
        return f"{self.allocation_field}_id__in"

    def accounts_for(self, organization_id):
        return self.account_model.objects.filter(organization_id=organization_id)

    def installments_for(self, organization_id):
        return self.installment_model.objects.filter(
            account__organization_id=organization_id
        )


PAYABLE = AccountKind(
    name="payable",
    account_model=Payable,
    installment_model=PayableInstallment,
    counterparty_model=Vendor,
    counterparty_field="vendor",
    allocation_field="payable_installment",
    category_type=Category.TYPE_PAYABLE,
)

RECEIVABLE = AccountKind(
    name="receivable",
    account_model=Receivable,
    installment_model=ReceivableInstallment,
    counterparty_model=Customer,
    counterparty_field="customer",
    allocation_field="receivable_installment",
    category_type=Category.TYPE_RECEIVABLE,
)

KINDS = {
    PAYABLE.name: PAYABLE,
    RECEIVABLE.name: RECEIVABLE,
}

KIND_CHOICES = [(k, k.capitalize()) for k in KINDS]


def get_kind(kind) -> AccountKind:
    if isinstance(kind, AccountKind):
        return kind

    key = (kind or "").strip().lower()
    try:
        return KINDS[key]
    except KeyError as exc:
        raise ValueError(
            f"Unknown account kind '{kind}'. Use 'payable' or 'receivable'."
        ) from exc
