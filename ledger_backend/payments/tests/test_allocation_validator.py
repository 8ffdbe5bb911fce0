# payments/tests/test_allocation_validator.py

import uuid
from decimal import Decimal

from django.test import SimpleTestCase

from ledger.services.exceptions import (
    AmountMismatchError,
    InvalidAllocationAmountError,
    InvalidAllocationTargetError,
)
from ledger.services.kinds import PAYABLE, RECEIVABLE
from payments.commands import AllocationLine, QuickPay
from payments.serializers import PaymentCreateSerializer
from payments.services.allocation_validator import (
    line_target,
    validate_sum,
    validate_targets,
)


class AllocationLineTests(SimpleTestCase):
    def test_target_type_shape(self):
        target = uuid.uuid4()
        line = AllocationLine.from_raw(
            {"target_type": "Receivable", "target_id": target, "amount": Decimal("5.00")}
        )
        self.assertEqual(line.receivable_installment_id, target)
        self.assertIsNone(line.payable_installment_id)
        self.assertEqual(line_target(line), (RECEIVABLE, target))

    def test_column_shape(self):
        target = uuid.uuid4()
        line = AllocationLine.from_raw(
            {"payable_installment_id": target, "amount": Decimal("5.00")}
        )
        self.assertEqual(line_target(line), (PAYABLE, target))

    def test_quick_pay_builds_single_line(self):
        target = uuid.uuid4()
        command = QuickPay.from_raw(
            {
                "type": "payable",
                "installment_id": target,
                "amount": Decimal("12.50"),
                "payment_date": "2030-01-01",
                "payment_method": "CASH",
            }
        ).to_create_payment()

        self.assertEqual(command.amount, Decimal("12.50"))
        (line,) = command.allocations
        self.assertEqual(line.payable_installment_id, target)


class AllocationValidatorTests(SimpleTestCase):
    def _line(self, amount, **targets):
        return AllocationLine(amount=Decimal(amount), **targets)

    def test_exactly_one_target(self):
        with self.assertRaises(InvalidAllocationTargetError) as ctx:
            validate_targets(
                [
                    self._line("1.00", payable_installment_id=uuid.uuid4()),
                    self._line("1.00"),
                ]
            )
        self.assertEqual(ctx.exception.context["index"], 1)
        self.assertEqual(ctx.exception.code, "INVALID_ALLOCATION_TARGET")

    def test_negative_amount(self):
        with self.assertRaises(InvalidAllocationAmountError):
            validate_targets([self._line("-1.00", payable_installment_id=uuid.uuid4())])

    def test_sum_within_tolerance(self):
        lines = [
            self._line("33.33", payable_installment_id=uuid.uuid4()),
            self._line("33.33", payable_installment_id=uuid.uuid4()),
            self._line("33.33", payable_installment_id=uuid.uuid4()),
        ]
        validate_sum(lines, Decimal("100.00"))

        with self.assertRaises(AmountMismatchError):
            validate_sum(lines, Decimal("100.01"))


class PaymentSerializerTests(SimpleTestCase):
    def test_to_command(self):
        target = uuid.uuid4()
        serializer = PaymentCreateSerializer(
            data={
                "amount": "10.00",
                "payment_date": "2030-01-01",
                "payment_method": "PIX",
                "allocations": [
                    {"target_type": "payable", "target_id": str(target), "amount": "10.00"}
                ],
            }
        )
        self.assertTrue(serializer.is_valid(), serializer.errors)

        command = serializer.to_command()
        self.assertEqual(command.amount, Decimal("10.00"))
        self.assertEqual(command.allocations[0].payable_installment_id, target)

    def test_rejects_empty_allocations(self):
        serializer = PaymentCreateSerializer(
            data={
                "amount": "10.00",
                "payment_date": "2030-01-01",
                "payment_method": "PIX",
                "allocations": [],
            }
        )
        self.assertFalse(serializer.is_valid())
        self.assertIn("allocations", serializer.errors)
