"""
======================================================
PATH: organizations/migrations/0001_initial.py
======================================================
MIGRATION: TENANTS + REFERENCE ENTITIES

Creates:
- Organization (tenant root)
- Vendor / Customer (counterparties)
- Category (PAYABLE | RECEIVABLE classification)
- Tag
"""

from __future__ import annotations

import uuid

from django.db import migrations, models
import django.db.models.deletion


def _counterparty_fields(related_name):
    return [
        (
            "id",
            models.UUIDField(
                primary_key=True,
                default=uuid.uuid4,
                editable=False,
                serialize=False,
            ),
        ),
        ("name", models.CharField(max_length=200)),
        ("document", models.CharField(max_length=32, blank=True, default="")),
        ("email", models.EmailField(max_length=254, blank=True, default="")),
        ("phone", models.CharField(max_length=50, blank=True, default="")),
        ("address", models.TextField(blank=True, default="")),
        ("notes", models.TextField(blank=True, default="")),
        ("is_active", models.BooleanField(default=True)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "organization",
            models.ForeignKey(
                to="organizations.organization",
                on_delete=django.db.models.deletion.CASCADE,
                related_name=related_name,
            ),
        ),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Organization",
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
                ("name", models.CharField(max_length=200)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="Vendor",
            fields=_counterparty_fields("vendors"),
            options={
                "ordering": ["name"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["organization", "name"], name="vendor_org_name_idx"
                    ),
                    models.Index(
                        fields=["organization", "is_active"],
                        name="vendor_org_active_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=_counterparty_fields("customers"),
            options={
                "ordering": ["name"],
                "abstract": False,
                "indexes": [
                    models.Index(
                        fields=["organization", "name"], name="customer_org_name_idx"
                    ),
                    models.Index(
                        fields=["organization", "is_active"],
                        name="customer_org_active_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Category",
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
                ("name", models.CharField(max_length=120)),
                (
                    "type",
                    models.CharField(
                        max_length=20,
                        choices=[("PAYABLE", "Payable"), ("RECEIVABLE", "Receivable")],
                    ),
                ),
                ("color", models.CharField(max_length=16, blank=True, default="")),
                ("description", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "organization",
                    models.ForeignKey(
                        to="organizations.organization",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="categories",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(
                        fields=["organization", "type"], name="category_org_type_idx"
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=["organization", "type", "name"],
                        name="uniq_category_name_per_org_type",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Tag",
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
                ("name", models.CharField(max_length=80)),
                ("color", models.CharField(max_length=16, blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "organization",
                    models.ForeignKey(
                        to="organizations.organization",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tags",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=["organization", "name"],
                        name="uniq_tag_name_per_org",
                    ),
                ],
            },
        ),
    ]
