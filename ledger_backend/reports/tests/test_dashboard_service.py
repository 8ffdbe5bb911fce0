# reports/tests/test_dashboard_service.py

from datetime import date
from decimal import Decimal

from django.test import TestCase

from ledger.models import LedgerStatus
from ledger.services.reconciler import cancel_account
from ledger.tests.helpers import (
    create_test_account,
    make_customer,
    make_organization,
    make_vendor,
    payment_command,
)
from payments.services.payment_service import create_payment
from reports.services.dashboard_service import (
    dashboard_summary,
    installment_status_summary,
    overdue_installments,
    payment_totals,
)

TODAY = date(2030, 2, 15)
START = date(2030, 1, 1)
END = date(2030, 3, 31)


class DashboardTests(TestCase):
    """
    GUARANTEES:
    - Buckets are per stored status plus a derived OVERDUE bucket
    - Figures never leak across organizations
    """

    def setUp(self):
        self.org = make_organization()
        vendor = make_vendor(self.org)
        customer = make_customer(self.org)

        # Payable installments due 2030-01-10 / 2030-02-09 / 2030-03-11
        self.payable = create_test_account(
            "payable",
            organization=self.org,
            counterparty=vendor,
            amount="300.00",
            installments=3,
        )
        self.p1, self.p2, self.p3 = list(
            self.payable.installments.order_by("installment_number")
        )
        create_payment(
            organization_id=self.org.id,
            command=payment_command(
                [("payable", self.p1, "100.00"), ("payable", self.p2, "30.00")],
                payment_date=date(2030, 1, 20),
            ),
        )

        self.receivable = create_test_account(
            "receivable",
            organization=self.org,
            counterparty=customer,
            amount="500.00",
            due_dates=(date(2030, 3, 1),),
        )
        create_payment(
            organization_id=self.org.id,
            command=payment_command(
                [("receivable", self.receivable.installments.get(), "200.00")],
                payment_date=date(2030, 2, 1),
            ),
        )

        cancelled = create_test_account(
            "payable",
            organization=self.org,
            counterparty=vendor,
            amount="50.00",
            due_dates=(date(2030, 2, 1),),
        )
        cancel_account(kind="payable", account_id=cancelled.id, organization_id=self.org.id)

        # Noise in another tenant.
        other = make_organization("Other")
        create_test_account(
            "payable", organization=other, counterparty=make_vendor(other), amount="999.00"
        )

    def test_payable_buckets(self):
        summary = installment_status_summary(
            kind="payable", organization_id=self.org.id, start=START, end=END, today=TODAY
        )

        self.assertEqual(summary[LedgerStatus.PAID]["count"], 1)
        self.assertEqual(summary[LedgerStatus.PAID]["amount"], Decimal("100.00"))

        # p2 is PARTIAL and past due: reported as OVERDUE.
        self.assertEqual(summary[LedgerStatus.OVERDUE]["count"], 1)
        self.assertEqual(summary[LedgerStatus.OVERDUE]["paid_amount"], Decimal("30.00"))
        self.assertEqual(summary[LedgerStatus.OVERDUE]["outstanding"], Decimal("70.00"))
        self.assertEqual(summary[LedgerStatus.PARTIAL]["count"], 0)

        self.assertEqual(summary[LedgerStatus.PENDING]["count"], 1)
        self.assertEqual(summary[LedgerStatus.CANCELLED]["count"], 1)
        self.assertEqual(summary[LedgerStatus.CANCELLED]["amount"], Decimal("50.00"))

    def test_window_excludes_installments(self):
        summary = installment_status_summary(
            kind="payable",
            organization_id=self.org.id,
            start=date(2030, 3, 1),
            end=date(2030, 3, 31),
            today=TODAY,
        )
        self.assertEqual(summary[LedgerStatus.PENDING]["count"], 1)
        self.assertEqual(summary[LedgerStatus.PAID]["count"], 0)
        self.assertEqual(summary[LedgerStatus.OVERDUE]["amount"], Decimal("0.00"))

    def test_payment_totals(self):
        totals = payment_totals(organization_id=self.org.id, start=START, end=END)
        self.assertEqual(totals["payable"], Decimal("130.00"))
        self.assertEqual(totals["receivable"], Decimal("200.00"))

        january = payment_totals(
            organization_id=self.org.id, start=START, end=date(2030, 1, 31)
        )
        self.assertEqual(january["receivable"], Decimal("0.00"))

    def test_overdue_installments(self):
        rows = overdue_installments(
            kind="payable", organization_id=self.org.id, start=START, end=END, today=TODAY
        )
        self.assertEqual([r.id for r in rows], [self.p2.id])

    def test_dashboard_summary(self):
        data = dashboard_summary(
            organization_id=self.org.id, start=START, end=END, today=TODAY
        )

        self.assertEqual(data["paid_in_period"], Decimal("130.00"))
        self.assertEqual(data["received_in_period"], Decimal("200.00"))
        self.assertEqual(data["to_pay"], Decimal("170.00"))
        self.assertEqual(data["to_receive"], Decimal("300.00"))
        self.assertEqual(data["net_position"], Decimal("130.00"))
