"""
======================================================
PATH: payments/migrations/0001_initial.py
======================================================
MIGRATION: PAYMENTS + ALLOCATIONS

Creates:
- Payment (organization-scoped money movement)
- PaymentAllocation (payment slice applied to exactly one installment)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("organizations", "0001_initial"),
        ("ledger", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("amount", models.DecimalField(max_digits=14, decimal_places=2)),
                ("payment_date", models.DateField()),
                (
                    "payment_method",
                    models.CharField(
                        max_length=32,
                        choices=[
                            ("CASH", "Cash"),
                            ("PIX", "PIX"),
                            ("BOLETO", "Boleto"),
                            ("BANK_TRANSFER", "Bank transfer"),
                            ("CREDIT_CARD", "Credit card"),
                            ("DEBIT_CARD", "Debit card"),
                            ("OTHER", "Other"),
                        ],
                    ),
                ),
                (
                    "reference",
                    models.CharField(max_length=128, blank=True, null=True),
                ),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "organization",
                    models.ForeignKey(
                        to="organizations.organization",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                    ),
                ),
            ],
            options={
                "ordering": ["-payment_date", "-created_at"],
                "indexes": [
                    models.Index(
                        fields=["organization", "payment_date"],
                        name="payment_org_date_idx",
                    ),
                    models.Index(fields=["payment_method"], name="payment_method_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=0),
                        name="payment_amount_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentAllocation",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        max_digits=14, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "payment",
                    models.ForeignKey(
                        to="payments.payment",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="allocations",
                    ),
                ),
                (
                    "payable_installment",
                    models.ForeignKey(
                        to="ledger.payableinstallment",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="allocations",
                        null=True,
                        blank=True,
                    ),
                ),
                (
                    "receivable_installment",
                    models.ForeignKey(
                        to="ledger.receivableinstallment",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="allocations",
                        null=True,
                        blank=True,
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["payment"], name="allocation_payment_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(
                                payable_installment__isnull=False,
                                receivable_installment__isnull=True,
                            )
                            | models.Q(
                                payable_installment__isnull=True,
                                receivable_installment__isnull=False,
                            )
                        ),
                        name="allocation_exactly_one_target",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=0),
                        name="allocation_amount_positive",
                    ),
                ],
            },
        ),
    ]
