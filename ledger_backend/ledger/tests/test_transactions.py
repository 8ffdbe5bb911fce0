# ledger/tests/test_transactions.py

from unittest import mock

from django.db import IntegrityError, OperationalError
from django.test import SimpleTestCase, TestCase, TransactionTestCase, override_settings

from ledger.services.exceptions import ConflictError, NotFoundError
from ledger.services.transactions import (
    is_serialization_failure,
    ledger_transaction,
    translate_integrity_error,
)


class _DriverError(Exception):
    def __init__(self, sqlstate):
        super().__init__(sqlstate)
        self.sqlstate = sqlstate


def _wrap(body):
    @ledger_transaction
    def operation():
        return body()

    return operation


def _operational_error(sqlstate):
    try:
        raise OperationalError("could not serialize access") from _DriverError(sqlstate)
    except OperationalError as exc:
        return exc


class ErrorTranslationTests(SimpleTestCase):
    def test_serialization_failure_detected_from_driver_cause(self):
        self.assertTrue(is_serialization_failure(_operational_error("40001")))
        self.assertTrue(is_serialization_failure(_operational_error("40P01")))
        self.assertFalse(is_serialization_failure(_operational_error("57014")))

    def test_foreign_key_violation_is_not_found(self):
        exc = IntegrityError("FOREIGN KEY constraint failed")
        self.assertIsInstance(
            translate_integrity_error(exc, operation="test"), NotFoundError
        )

    def test_other_violations_are_conflicts(self):
        exc = IntegrityError("UNIQUE constraint failed: organizations_tag.name")
        self.assertIsInstance(
            translate_integrity_error(exc, operation="test"), ConflictError
        )


class NestedTransactionTests(TestCase):
    def test_nested_call_does_not_retry(self):
        body = mock.Mock(side_effect=_operational_error("40001"))
        wrapped = _wrap(body)

        with self.assertRaises(OperationalError):
            wrapped()
        self.assertEqual(body.call_count, 1)

    def test_integrity_error_translated(self):
        wrapped = _wrap(
            mock.Mock(side_effect=IntegrityError("CHECK constraint failed"))
        )
        with self.assertRaises(ConflictError):
            wrapped()


class RetryTests(TransactionTestCase):
    @override_settings(LEDGER_TRANSACTION_MAX_ATTEMPTS=3)
    def test_retries_then_succeeds(self):
        body = mock.Mock(
            side_effect=[_operational_error("40001"), _operational_error("40P01"), "ok"]
        )
        self.assertEqual(_wrap(body)(), "ok")
        self.assertEqual(body.call_count, 3)

    @override_settings(LEDGER_TRANSACTION_MAX_ATTEMPTS=2)
    def test_exhausted_retries_surface_as_conflict(self):
        body = mock.Mock(side_effect=_operational_error("40001"))
        with self.assertRaises(ConflictError):
            _wrap(body)()
        self.assertEqual(body.call_count, 2)

    def test_other_operational_errors_propagate(self):
        body = mock.Mock(side_effect=_operational_error("57014"))
        with self.assertRaises(OperationalError):
            _wrap(body)()
        self.assertEqual(body.call_count, 1)
