"""
======================================================
PATH: ledger/migrations/0001_initial.py
======================================================
MIGRATION: PAYABLES + RECEIVABLES WITH INSTALLMENT SCHEDULES

Creates:
- Payable / PayableInstallment
- Receivable / ReceivableInstallment

Installment numbering is renumbered in place, so (account, installment_number)
is indexed but intentionally NOT unique.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion

STATUS_CHOICES = [
    ("PENDING", "Pending"),
    ("PARTIAL", "Partially paid"),
    ("PAID", "Paid"),
    ("CANCELLED", "Cancelled"),
]


def _id_field():
    return (
        "id",
        models.UUIDField(
            primary_key=True,
            default=uuid.uuid4,
            editable=False,
            serialize=False,
        ),
    )


def _account_fields(*, counterparty_field, counterparty_model, counterparty_related_name):
    return [
        _id_field(),
        ("document_number", models.CharField(max_length=64, blank=True, default="")),
        ("notes", models.TextField(blank=True, default="")),
        (
            "amount",
            models.DecimalField(
                max_digits=14, decimal_places=2, default=Decimal("0.00")
            ),
        ),
        (
            "paid_amount",
            models.DecimalField(
                max_digits=14, decimal_places=2, default=Decimal("0.00")
            ),
        ),
        (
            "status",
            models.CharField(max_length=20, choices=STATUS_CHOICES, default="PENDING"),
        ),
        ("total_installments", models.PositiveIntegerField(default=1)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "organization",
            models.ForeignKey(
                to="organizations.organization",
                on_delete=django.db.models.deletion.CASCADE,
                related_name="%(class)ss",
            ),
        ),
        (
            "category",
            models.ForeignKey(
                to="organizations.category",
                on_delete=django.db.models.deletion.PROTECT,
                related_name="%(class)ss",
                null=True,
                blank=True,
            ),
        ),
        (
            "tags",
            models.ManyToManyField(
                to="organizations.tag", related_name="%(class)ss", blank=True
            ),
        ),
        (
            counterparty_field,
            models.ForeignKey(
                to=counterparty_model,
                on_delete=django.db.models.deletion.PROTECT,
                related_name=counterparty_related_name,
            ),
        ),
    ]


def _account_constraints(prefix):
    return [
        models.CheckConstraint(
            condition=models.Q(amount__gte=0),
            name=f"{prefix}_amount_non_negative",
        ),
        models.CheckConstraint(
            condition=models.Q(paid_amount__gte=0),
            name=f"{prefix}_paid_amount_non_negative",
        ),
    ]


def _installment_fields(*, account_model):
    return [
        _id_field(),
        ("installment_number", models.PositiveIntegerField()),
        ("total_installments", models.PositiveIntegerField()),
        ("amount", models.DecimalField(max_digits=14, decimal_places=2)),
        (
            "paid_amount",
            models.DecimalField(
                max_digits=14, decimal_places=2, default=Decimal("0.00")
            ),
        ),
        ("due_date", models.DateField()),
        (
            "status",
            models.CharField(max_length=20, choices=STATUS_CHOICES, default="PENDING"),
        ),
        ("notes", models.TextField(blank=True, null=True)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "account",
            models.ForeignKey(
                to=account_model,
                on_delete=django.db.models.deletion.CASCADE,
                related_name="installments",
            ),
        ),
        (
            "tags",
            models.ManyToManyField(
                to="organizations.tag", related_name="%(class)ss", blank=True
            ),
        ),
    ]


def _installment_constraints(prefix):
    return [
        models.CheckConstraint(
            condition=models.Q(amount__gt=0),
            name=f"{prefix}_amount_positive",
        ),
        models.CheckConstraint(
            condition=models.Q(paid_amount__gte=0),
            name=f"{prefix}_paid_amount_non_negative",
        ),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("organizations", "0001_initial"),
    ]

    operations = [
        # ---------------- PAYABLES ----------------
        migrations.CreateModel(
            name="Payable",
            fields=_account_fields(
                counterparty_field="vendor",
                counterparty_model="organizations.vendor",
                counterparty_related_name="payables",
            ),
            options={
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["organization", "status"],
                        name="payable_org_status_idx",
                    ),
                    models.Index(
                        fields=["organization", "vendor"],
                        name="payable_org_vendor_idx",
                    ),
                ],
                "constraints": _account_constraints("payable"),
            },
        ),
        migrations.CreateModel(
            name="PayableInstallment",
            fields=_installment_fields(
                account_model="ledger.payable",
            ),
            options={
                "ordering": ["installment_number"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["account", "installment_number"],
                        name="pay_inst_account_number_idx",
                    ),
                    models.Index(
                        fields=["status", "due_date"],
                        name="pay_inst_status_due_idx",
                    ),
                ],
                "constraints": _installment_constraints("payableinstallment"),
            },
        ),
        # ---------------- RECEIVABLES ----------------
        migrations.CreateModel(
            name="Receivable",
            fields=_account_fields(
                counterparty_field="customer",
                counterparty_model="organizations.customer",
                counterparty_related_name="receivables",
            ),
            options={
                "ordering": ["-created_at"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["organization", "status"],
                        name="receivable_org_status_idx",
                    ),
                    models.Index(
                        fields=["organization", "customer"],
                        name="receivable_org_customer_idx",
                    ),
                ],
                "constraints": _account_constraints("receivable"),
            },
        ),
        migrations.CreateModel(
            name="ReceivableInstallment",
            fields=_installment_fields(
                account_model="ledger.receivable",
            ),
            options={
                "ordering": ["installment_number"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["account", "installment_number"],
                        name="rec_inst_account_number_idx",
                    ),
                    models.Index(
                        fields=["status", "due_date"],
                        name="rec_inst_status_due_idx",
                    ),
                ],
                "constraints": _installment_constraints("receivableinstallment"),
            },
        ),
    ]
