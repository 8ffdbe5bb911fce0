# ledger/tests/test_status_rules.py

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from ledger.models import LedgerStatus
from ledger.services.dates import coerce_due_date
from ledger.services.exceptions import (
    InvalidDueDateError,
    InvalidScheduleError,
    InvalidStatusTransitionError,
)
from ledger.services.installment_store import split_amount
from ledger.services.money import _money, equal_within_tolerance, exceeds, money_sum
from ledger.services.status_rules import (
    account_status,
    can_transition,
    installment_status,
    is_overdue,
    reversed_paid_amount,
    validate_transition,
)


class InstallmentStatusTests(SimpleTestCase):
    def test_unpaid_is_pending(self):
        self.assertEqual(
            installment_status(amount=Decimal("100.00"), paid_amount=Decimal("0")),
            LedgerStatus.PENDING,
        )

    def test_partial_payment_is_partial(self):
        self.assertEqual(
            installment_status(amount=Decimal("100.00"), paid_amount=Decimal("40.00")),
            LedgerStatus.PARTIAL,
        )

    def test_paid_within_one_cent_is_paid(self):
        self.assertEqual(
            installment_status(amount=Decimal("100.00"), paid_amount=Decimal("99.99")),
            LedgerStatus.PAID,
        )
        self.assertEqual(
            installment_status(amount=Decimal("100.00"), paid_amount=Decimal("99.98")),
            LedgerStatus.PARTIAL,
        )


class AccountStatusTests(SimpleTestCase):
    def test_no_installments_is_pending(self):
        self.assertEqual(account_status([]), LedgerStatus.PENDING)

    def test_all_paid(self):
        self.assertEqual(
            account_status([LedgerStatus.PAID, LedgerStatus.PAID]), LedgerStatus.PAID
        )

    def test_mixed_is_partial(self):
        self.assertEqual(
            account_status([LedgerStatus.PAID, LedgerStatus.PENDING]),
            LedgerStatus.PARTIAL,
        )

    def test_cancelled_installments_are_ignored(self):
        self.assertEqual(
            account_status([LedgerStatus.PAID, LedgerStatus.CANCELLED]),
            LedgerStatus.PAID,
        )

    def test_all_cancelled(self):
        self.assertEqual(
            account_status([LedgerStatus.CANCELLED, LedgerStatus.CANCELLED]),
            LedgerStatus.CANCELLED,
        )


class TransitionTests(SimpleTestCase):
    def test_cancelled_is_terminal(self):
        self.assertFalse(
            can_transition(from_status=LedgerStatus.CANCELLED, to_status=LedgerStatus.PENDING)
        )
        self.assertFalse(
            can_transition(
                from_status=LedgerStatus.CANCELLED, to_status=LedgerStatus.CANCELLED
            )
        )

    def test_reversal_moves_back(self):
        self.assertTrue(
            can_transition(from_status=LedgerStatus.PAID, to_status=LedgerStatus.PENDING)
        )

    def test_paid_installment_cannot_be_cancelled(self):
        self.assertFalse(
            can_transition(from_status=LedgerStatus.PAID, to_status=LedgerStatus.CANCELLED)
        )

    def test_validate_transition_rejects_terminal_state(self):
        installment = SimpleNamespace(id="i-1", status=LedgerStatus.CANCELLED)
        with self.assertRaises(InvalidStatusTransitionError) as ctx:
            validate_transition(installment=installment, target_status=LedgerStatus.PAID)
        self.assertEqual(ctx.exception.code, "INVALID_STATUS_TRANSITION")

    def test_reversal_never_goes_negative(self):
        self.assertEqual(
            reversed_paid_amount(paid_amount=Decimal("10.00"), reversal=Decimal("15.00")),
            Decimal("0.00"),
        )


class OverdueTests(SimpleTestCase):
    today = date(2030, 3, 1)

    def test_open_and_past_due(self):
        self.assertTrue(
            is_overdue(status=LedgerStatus.PARTIAL, due_date=date(2030, 2, 28), today=self.today)
        )

    def test_due_today_is_not_overdue(self):
        self.assertFalse(
            is_overdue(status=LedgerStatus.PENDING, due_date=self.today, today=self.today)
        )

    def test_paid_is_never_overdue(self):
        self.assertFalse(
            is_overdue(status=LedgerStatus.PAID, due_date=date(2020, 1, 1), today=self.today)
        )


class MoneyTests(SimpleTestCase):
    def test_split_last_installment_absorbs_remainder(self):
        self.assertEqual(
            split_amount(total=Decimal("100.00"), count=3),
            [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")],
        )

    def test_split_sums_to_total(self):
        parts = split_amount(total=Decimal("1000.01"), count=7)
        self.assertEqual(money_sum(parts), Decimal("1000.01"))

    def test_split_too_small(self):
        with self.assertRaises(InvalidScheduleError):
            split_amount(total=Decimal("0.02"), count=3)

    def test_non_numeric_amount_is_a_schedule_error(self):
        with self.assertRaises(InvalidScheduleError):
            _money("twelve")
        with self.assertRaises(InvalidScheduleError):
            _money(Decimal("Infinity"))

    def test_tolerance(self):
        self.assertTrue(equal_within_tolerance(Decimal("10.00"), Decimal("10.01")))
        self.assertFalse(equal_within_tolerance(Decimal("10.00"), Decimal("10.02")))
        self.assertFalse(exceeds(Decimal("10.01"), Decimal("10.00")))
        self.assertTrue(exceeds(Decimal("10.02"), Decimal("10.00")))


class DueDateCoercionTests(SimpleTestCase):
    def test_blank_is_ignored(self):
        self.assertIsNone(coerce_due_date("   "))
        self.assertIsNone(coerce_due_date(None))

    def test_iso_strings(self):
        self.assertEqual(coerce_due_date("2030-05-01"), date(2030, 5, 1))
        self.assertEqual(coerce_due_date("2030-05-01T10:00:00"), date(2030, 5, 1))

    def test_garbage_raises(self):
        with self.assertRaises(InvalidDueDateError):
            coerce_due_date("next tuesday")

    def test_impossible_date_raises(self):
        with self.assertRaises(InvalidDueDateError):
            coerce_due_date("2030-02-30")
