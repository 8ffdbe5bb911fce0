# ledger/tests/test_installment_store.py

from datetime import date
from decimal import Decimal

from django.test import TestCase

from ledger.commands import InstallmentUpdate
from ledger.models import LedgerStatus, PayableInstallment
from ledger.services.exceptions import (
    InstallmentHasPaymentsError,
    InstallmentNotEditableError,
    InvalidDueDateError,
    LastInstallmentError,
    NotFoundError,
)
from ledger.services.installment_store import (
    delete_installment,
    reorder_installments,
    update_installment,
)
from ledger.tests.helpers import (
    create_test_account,
    make_organization,
    make_vendor,
    payment_command,
)
from organizations.models import Tag
from payments.services.payment_service import create_payment


class InstallmentEditTests(TestCase):
    """
    GUARANTEES:
    - Amount / due date edits only on PENDING installments without payments
    - Notes / tags always editable
    - Schedule stays numbered 1..N chronologically
    - Account aggregates follow every edit
    """

    def setUp(self):
        self.org = make_organization()
        self.vendor = make_vendor(self.org)
        self.account = create_test_account(
            "payable",
            organization=self.org,
            counterparty=self.vendor,
            amount="300.00",
            installments=3,
            due_dates=(date(2030, 1, 10), date(2030, 2, 10), date(2030, 3, 10)),
        )
        self.first, self.second, self.third = list(
            self.account.installments.order_by("installment_number")
        )

    def _update(self, installment, **fields):
        return update_installment(
            kind="payable",
            account_id=self.account.id,
            installment_id=installment.id,
            organization_id=self.org.id,
            command=InstallmentUpdate(**fields),
        )

    def _pay(self, installment, amount):
        return create_payment(
            organization_id=self.org.id,
            command=payment_command([("payable", installment, amount)]),
        )

    def test_amount_edit_recomputes_account(self):
        self._update(self.second, amount=Decimal("150.00"))

        self.account.refresh_from_db()
        self.assertEqual(self.account.amount, Decimal("350.00"))

    def test_due_date_edit_reorders_schedule(self):
        rows = self._update(self.first, due_date="2030-04-10")

        self.assertEqual(
            [r.id for r in rows], [self.second.id, self.third.id, self.first.id]
        )
        self.assertEqual([r.installment_number for r in rows], [1, 2, 3])

    def test_blank_due_date_is_ignored(self):
        rows = self._update(self.first, due_date="  ")
        self.assertEqual(rows[0].id, self.first.id)
        self.assertEqual(rows[0].due_date, date(2030, 1, 10))

    def test_invalid_due_date(self):
        with self.assertRaises(InvalidDueDateError):
            self._update(self.first, due_date="31/31/2030")

    def test_partially_paid_installment_is_locked(self):
        self._pay(self.first, "10.00")

        with self.assertRaises(InstallmentNotEditableError):
            self._update(self.first, amount=Decimal("50.00"))
        with self.assertRaises(InstallmentNotEditableError):
            self._update(self.first, due_date=date(2030, 5, 1))

    def test_pending_installment_with_allocations_is_locked(self):
        self._pay(self.first, "10.00")
        # Force a stale PENDING status while the allocation still exists.
        PayableInstallment.objects.filter(pk=self.first.pk).update(
            status=LedgerStatus.PENDING
        )

        with self.assertRaises(InstallmentHasPaymentsError):
            self._update(self.first, amount=Decimal("50.00"))

    def test_notes_and_tags_editable_after_payment(self):
        self._pay(self.first, "100.00")
        tag = Tag.objects.create(organization=self.org, name="reviewed")

        self._update(self.first, notes="  paid at the counter  ", tag_ids=(tag.id,))

        self.first.refresh_from_db()
        self.assertEqual(self.first.status, LedgerStatus.PAID)
        self.assertEqual(self.first.notes, "paid at the counter")
        self.assertEqual(list(self.first.tags.all()), [tag])

        self._update(self.first, notes="   ", tag_ids=())
        self.first.refresh_from_db()
        self.assertIsNone(self.first.notes)
        self.assertFalse(self.first.tags.exists())

    def test_unchanged_amount_on_paid_installment_is_allowed(self):
        self._pay(self.first, "100.00")
        self._update(self.first, amount=Decimal("100.00"), notes="ok")
        self.first.refresh_from_db()
        self.assertEqual(self.first.notes, "ok")

    def test_foreign_tag_is_not_found(self):
        foreign_tag = Tag.objects.create(
            organization=make_organization("Other"), name="foreign"
        )
        with self.assertRaises(NotFoundError):
            self._update(self.first, tag_ids=(foreign_tag.id,))

    def test_installment_of_other_account_is_not_found(self):
        other = create_test_account(
            "payable", organization=self.org, counterparty=self.vendor
        )
        with self.assertRaises(NotFoundError):
            update_installment(
                kind="payable",
                account_id=self.account.id,
                installment_id=other.installments.get().id,
                organization_id=self.org.id,
                command=InstallmentUpdate(notes="x"),
            )

    def test_equal_due_dates_keep_previous_order(self):
        rows = self._update(self.third, due_date=date(2030, 1, 10))

        self.assertEqual(
            [r.id for r in rows], [self.first.id, self.third.id, self.second.id]
        )
        self.assertEqual([r.installment_number for r in rows], [1, 2, 3])

    def test_moving_last_installment_to_the_front(self):
        rows = self._update(self.third, due_date="2026-01-01")

        self.assertEqual(
            [r.id for r in rows], [self.third.id, self.first.id, self.second.id]
        )
        self.assertEqual([r.installment_number for r in rows], [1, 2, 3])
        self.assertTrue(all(r.total_installments == 3 for r in rows))

    def test_repeating_a_due_date_edit_changes_nothing(self):
        first_pass = self._update(self.first, due_date="2030-04-10")
        second_pass = self._update(self.first, due_date="2030-04-10")

        def snapshot(rows):
            return [(r.id, r.installment_number, r.due_date) for r in rows]

        self.assertEqual(snapshot(first_pass), snapshot(second_pass))
        self.assertEqual(
            [r.id for r in second_pass],
            [self.second.id, self.third.id, self.first.id],
        )

        self.account.refresh_from_db()
        self.assertEqual(self.account.amount, Decimal("300.00"))
        self.assertEqual(self.account.total_installments, 3)

    def test_reorder_is_idempotent(self):
        before = list(
            self.account.installments.order_by("installment_number").values_list(
                "id", "installment_number", "updated_at"
            )
        )
        reorder_installments(kind="payable", account_id=self.account.id)
        after = list(
            self.account.installments.order_by("installment_number").values_list(
                "id", "installment_number", "updated_at"
            )
        )
        self.assertEqual(before, after)


class InstallmentDeleteTests(TestCase):
    def setUp(self):
        self.org = make_organization()
        self.vendor = make_vendor(self.org)
        self.account = create_test_account(
            "payable",
            organization=self.org,
            counterparty=self.vendor,
            amount="300.00",
            installments=3,
        )
        self.first, self.second, self.third = list(
            self.account.installments.order_by("installment_number")
        )

    def _delete(self, installment):
        return delete_installment(
            kind="payable",
            account_id=self.account.id,
            installment_id=installment.id,
            organization_id=self.org.id,
        )

    def test_delete_renumbers_and_recomputes(self):
        rows = self._delete(self.second)

        self.assertEqual([r.id for r in rows], [self.first.id, self.third.id])
        self.assertEqual([r.installment_number for r in rows], [1, 2])
        self.assertTrue(all(r.total_installments == 2 for r in rows))

        self.account.refresh_from_db()
        self.assertEqual(self.account.amount, Decimal("200.00"))
        self.assertEqual(self.account.total_installments, 2)

    def test_cannot_delete_last_installment(self):
        single = create_test_account(
            "payable", organization=self.org, counterparty=self.vendor
        )
        with self.assertRaises(LastInstallmentError):
            delete_installment(
                kind="payable",
                account_id=single.id,
                installment_id=single.installments.get().id,
                organization_id=self.org.id,
            )

    def test_cannot_delete_paid_installment(self):
        create_payment(
            organization_id=self.org.id,
            command=payment_command([("payable", self.first, "100.00")]),
        )
        with self.assertRaises(InstallmentNotEditableError):
            self._delete(self.first)
        self.assertEqual(self.account.installments.count(), 3)
