# ledger/models/base.py

"""
======================================================
PATH: ledger/models/base.py
======================================================
ACCOUNT + INSTALLMENT ABSTRACT BASES

Payables and receivables share one shape:

    Account (amount = Σ installment.amount)
      └── Installment 1..N (contiguous, chronological by due_date)

Stored status is one of PENDING / PARTIAL / PAID / CANCELLED.
OVERDUE is never stored: it is a read-time projection
(status in {PENDING, PARTIAL} and due_date < today).
"""

import uuid
from decimal import Decimal

from django.db import models

from organizations.models import Category, Organization, Tag


class LedgerStatus:
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"
    CANCELLED = "CANCELLED"

    # Pseudo-status (filters / read models only)
    OVERDUE = "OVERDUE"

    CHOICES = [
        (PENDING, "Pending"),
        (PARTIAL, "Partially paid"),
        (PAID, "Paid"),
        (CANCELLED, "Cancelled"),
    ]

    OPEN = (PENDING, PARTIAL)


class AccountBase(models.Model):
    """
    Header of a payable / receivable obligation.
    """

    STATUS_PENDING = LedgerStatus.PENDING
    STATUS_PARTIAL = LedgerStatus.PARTIAL
    STATUS_PAID = LedgerStatus.PAID
    STATUS_CANCELLED = LedgerStatus.CANCELLED

    STATUSES = LedgerStatus.CHOICES

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="%(class)ss",
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="%(class)ss",
        null=True,
        blank=True,
    )
    tags = models.ManyToManyField(Tag, related_name="%(class)ss", blank=True)

    document_number = models.CharField(max_length=64, blank=True, default="")
    notes = models.TextField(blank=True, default="")

    amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    paid_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    status = models.CharField(
        max_length=20, choices=STATUSES, default=STATUS_PENDING
    )
    total_installments = models.PositiveIntegerField(default=1)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name="%(class)s_amount_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=0),
                name="%(class)s_paid_amount_non_negative",
            ),
        ]

    @property
    def outstanding_amount(self) -> Decimal:
        return max(self.amount - self.paid_amount, Decimal("0.00"))


class InstallmentBase(models.Model):
    """
    One scheduled slice of an account.

    installment_number is 1-based and contiguous; it is rewritten whenever
    the schedule is reordered or an installment is removed, so it is NOT
    protected by a unique constraint (renumbering runs row by row).
    """

    STATUS_PENDING = LedgerStatus.PENDING
    STATUS_PARTIAL = LedgerStatus.PARTIAL
    STATUS_PAID = LedgerStatus.PAID
    STATUS_CANCELLED = LedgerStatus.CANCELLED

    STATUSES = LedgerStatus.CHOICES

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    installment_number = models.PositiveIntegerField()
    total_installments = models.PositiveIntegerField()

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    paid_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    due_date = models.DateField()
    status = models.CharField(
        max_length=20, choices=STATUSES, default=STATUS_PENDING
    )

    notes = models.TextField(blank=True, null=True)
    tags = models.ManyToManyField(Tag, related_name="%(class)ss", blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["installment_number"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="%(class)s_amount_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=0),
                name="%(class)s_paid_amount_non_negative",
            ),
        ]

    @property
    def outstanding_amount(self) -> Decimal:
        return max(self.amount - self.paid_amount, Decimal("0.00"))
