# organizations/models.py

import uuid

from django.db import models

from organizations.managers import TenantManager


class Organization(models.Model):
    """
    Tenant root. Every ledger record is scoped to exactly one organization.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Counterparty(models.Model):
    """
    Shared shape for vendors and customers.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    document = models.CharField(max_length=32, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    address = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        abstract = True
        ordering = ["name"]

    def __str__(self):
        return self.name


class Vendor(Counterparty):
    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="vendors",
    )

    class Meta(Counterparty.Meta):
        indexes = [
            models.Index(fields=["organization", "name"], name="vendor_org_name_idx"),
            models.Index(fields=["organization", "is_active"], name="vendor_org_active_idx"),
        ]


class Customer(Counterparty):
    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="customers",
    )

    class Meta(Counterparty.Meta):
        indexes = [
            models.Index(fields=["organization", "name"], name="customer_org_name_idx"),
            models.Index(
                fields=["organization", "is_active"], name="customer_org_active_idx"
            ),
        ]


class Category(models.Model):
    """
    Classification for payables or receivables (never both).
    """

    TYPE_PAYABLE = "PAYABLE"
    TYPE_RECEIVABLE = "RECEIVABLE"

    TYPES = [
        (TYPE_PAYABLE, "Payable"),
        (TYPE_RECEIVABLE, "Receivable"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="categories",
    )

    name = models.CharField(max_length=120)
    type = models.CharField(max_length=20, choices=TYPES)
    color = models.CharField(max_length=16, blank=True, default="")
    description = models.TextField(blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "type", "name"],
                name="uniq_category_name_per_org_type",
            ),
        ]
        indexes = [
            models.Index(fields=["organization", "type"], name="category_org_type_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.type})"


class Tag(models.Model):
    """
    Free-form label attachable to accounts and installments.
    Tags carry no is_active flag: removal is always a hard delete.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="tags",
    )

    name = models.CharField(max_length=80)
    color = models.CharField(max_length=16, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "name"],
                name="uniq_tag_name_per_org",
            ),
        ]

    def __str__(self):
        return self.name
