# ledger/tests/helpers.py

from datetime import date, timedelta
from decimal import Decimal

from ledger.commands import CreateAccount
from ledger.services.account_service import create_account
from organizations.models import Customer, Organization, Vendor
from payments.commands import AllocationLine, CreatePayment
from payments.models import Payment


def make_organization(name="Acme Ltda"):
    return Organization.objects.create(name=name)


def make_vendor(organization, name="Paper Supplies"):
    return Vendor.objects.create(organization=organization, name=name)


def make_customer(organization, name="Northwind"):
    return Customer.objects.create(organization=organization, name=name)


def monthly_due_dates(count, start=date(2030, 1, 10)):
    return tuple(start + timedelta(days=30 * i) for i in range(count))


def create_test_account(
    kind,
    *,
    organization,
    counterparty,
    amount="100.00",
    installments=1,
    due_dates=None,
    **extra,
):
    return create_account(
        kind=kind,
        organization_id=organization.id,
        command=CreateAccount(
            counterparty_id=counterparty.id,
            amount=Decimal(amount),
            installment_count=installments,
            due_dates=due_dates or monthly_due_dates(installments),
            **extra,
        ),
    )


def payment_command(lines, *, amount=None, payment_date=date(2030, 1, 5), **extra):
    """
    lines: [(kind_name, installment, "amount"), ...]
    """
    allocations = tuple(
        AllocationLine(
            amount=Decimal(line_amount),
            **{f"{kind_name}_installment_id": installment.id},
        )
        for kind_name, installment, line_amount in lines
    )
    total = Decimal(amount) if amount is not None else sum(
        (a.amount for a in allocations), Decimal("0.00")
    )
    return CreatePayment(
        amount=total,
        payment_date=payment_date,
        payment_method=extra.pop("payment_method", Payment.METHOD_PIX),
        allocations=allocations,
        **extra,
    )
