# ledger/tests/test_installment_query.py

from datetime import date

from django.test import TestCase
from rest_framework.exceptions import ValidationError

from ledger.models import LedgerStatus
from ledger.services.exceptions import NotFoundError
from ledger.services.installment_query import (
    filter_installments,
    get_account,
    list_account_installments,
    list_account_payments,
)
from ledger.tests.helpers import (
    create_test_account,
    make_customer,
    make_organization,
    make_vendor,
    payment_command,
)
from organizations.models import Category, Tag
from payments.services.payment_service import create_payment

TODAY = date(2030, 2, 15)


class InstallmentQueryTests(TestCase):
    """
    GUARANTEES:
    - OVERDUE is derived from (open status, due_date < today)
    - Every read is organization-scoped
    """

    def setUp(self):
        self.org = make_organization()
        self.vendor = make_vendor(self.org)
        self.category = Category.objects.create(
            organization=self.org, name="Utilities", type=Category.TYPE_PAYABLE
        )
        self.tag = Tag.objects.create(organization=self.org, name="monthly")

        # Due 2030-01-10, 2030-02-09, 2030-03-11
        self.account = create_test_account(
            "payable",
            organization=self.org,
            counterparty=self.vendor,
            amount="300.00",
            installments=3,
            category_id=self.category.id,
        )
        self.first, self.second, self.third = list(
            self.account.installments.order_by("installment_number")
        )
        self.third.tags.add(self.tag)

        # First installment paid: past due but not overdue.
        create_payment(
            organization_id=self.org.id,
            command=payment_command([("payable", self.first, "100.00")]),
        )

        other_vendor = make_vendor(self.org, name="Water Co")
        self.other_account = create_test_account(
            "payable",
            organization=self.org,
            counterparty=other_vendor,
            amount="10.00",
            due_dates=(date(2030, 2, 20),),
        )

    def _ids(self, rows):
        return [row["id"] for row in rows]

    def test_overdue_filter(self):
        rows = filter_installments(
            kind="payable",
            organization_id=self.org.id,
            params={"status": [LedgerStatus.OVERDUE]},
            today=TODAY,
        )
        self.assertEqual(self._ids(rows), [str(self.second.id)])
        self.assertTrue(rows[0]["is_overdue"])

    def test_overdue_combined_with_stored_status(self):
        rows = filter_installments(
            kind="payable",
            organization_id=self.org.id,
            params={"status": [LedgerStatus.OVERDUE, LedgerStatus.PAID]},
            today=TODAY,
        )
        self.assertEqual(self._ids(rows), [str(self.first.id), str(self.second.id)])

    def test_due_date_window_and_counterparty(self):
        rows = filter_installments(
            kind="payable",
            organization_id=self.org.id,
            params={
                "due_date_from": "2030-02-01",
                "due_date_to": "2030-02-28",
                "counterparty": str(self.vendor.id),
            },
            today=TODAY,
        )
        self.assertEqual(self._ids(rows), [str(self.second.id)])

    def test_tag_and_category_filters(self):
        rows = filter_installments(
            kind="payable",
            organization_id=self.org.id,
            params={"tag": str(self.tag.id), "category": str(self.category.id)},
            today=TODAY,
        )
        self.assertEqual(self._ids(rows), [str(self.third.id)])
        self.assertEqual(rows[0]["tag_ids"], [str(self.tag.id)])

    def test_invalid_status_rejected(self):
        with self.assertRaises(ValidationError):
            filter_installments(
                kind="payable",
                organization_id=self.org.id,
                params={"status": ["LOST"]},
                today=TODAY,
            )

    def test_other_organization_sees_nothing(self):
        rows = filter_installments(
            kind="payable", organization_id=make_organization("Other").id, today=TODAY
        )
        self.assertEqual(list(rows), [])

    def test_account_installments_in_order(self):
        rows = list_account_installments(
            kind="payable",
            account_id=self.account.id,
            organization_id=self.org.id,
            today=TODAY,
        )
        self.assertEqual([r["installment_number"] for r in rows], [1, 2, 3])
        self.assertEqual([r["is_overdue"] for r in rows], [False, True, False])

    def test_account_detail(self):
        data = get_account(
            kind="payable",
            account_id=self.account.id,
            organization_id=self.org.id,
            today=TODAY,
        )
        self.assertEqual(data["vendor_name"], self.vendor.name)
        self.assertEqual(data["category_name"], "Utilities")
        self.assertEqual(data["status"], LedgerStatus.PARTIAL)
        self.assertEqual(data["paid_amount"], "100.00")
        self.assertEqual(len(data["installments"]), 3)

    def test_receivable_detail_exposes_received_amount(self):
        customer = make_customer(self.org)
        receivable = create_test_account(
            "receivable", organization=self.org, counterparty=customer, amount="25.00"
        )
        data = get_account(
            kind="receivable", account_id=receivable.id, organization_id=self.org.id
        )
        self.assertEqual(data["customer_name"], customer.name)
        self.assertEqual(data["received_amount"], "0.00")

    def test_account_of_other_organization_is_not_found(self):
        with self.assertRaises(NotFoundError):
            list_account_installments(
                kind="payable",
                account_id=self.account.id,
                organization_id=make_organization("Other").id,
            )

    def test_account_payments(self):
        payments = list_account_payments(
            kind="payable", account_id=self.account.id, organization_id=self.org.id
        )
        self.assertEqual(len(payments), 1)
        self.assertEqual(
            list_account_payments(
                kind="payable",
                account_id=self.other_account.id,
                organization_id=self.org.id,
            ),
            [],
        )
