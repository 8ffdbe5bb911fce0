# payments/models.py

import uuid
from decimal import Decimal

from django.db import models

from organizations.models import Organization


class Payment(models.Model):
    """
    Money movement recorded by an organization.

    RULES:
    - amount > 0
    - Sum(allocations.amount) == amount (within one cent), enforced by the
      allocation validator at creation time
    - amount and allocations are immutable after creation; only
      payment_date / payment_method / reference / notes are editable
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    METHOD_CASH = "CASH"
    METHOD_PIX = "PIX"
    METHOD_BOLETO = "BOLETO"
    METHOD_BANK_TRANSFER = "BANK_TRANSFER"
    METHOD_CREDIT_CARD = "CREDIT_CARD"
    METHOD_DEBIT_CARD = "DEBIT_CARD"
    METHOD_OTHER = "OTHER"

    METHOD_CHOICES = [
        (METHOD_CASH, "Cash"),
        (METHOD_PIX, "PIX"),
        (METHOD_BOLETO, "Boleto"),
        (METHOD_BANK_TRANSFER, "Bank transfer"),
        (METHOD_CREDIT_CARD, "Credit card"),
        (METHOD_DEBIT_CARD, "Debit card"),
        (METHOD_OTHER, "Other"),
    ]

    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="payments",
    )

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    payment_date = models.DateField()
    payment_method = models.CharField(max_length=32, choices=METHOD_CHOICES)

    reference = models.CharField(max_length=128, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-payment_date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="payment_amount_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["organization", "payment_date"], name="payment_org_date_idx"),
            models.Index(fields=["payment_method"], name="payment_method_idx"),
        ]

    def __str__(self):
        return f"{self.payment_date} | {self.payment_method} | {self.amount}"


class PaymentAllocation(models.Model):
    """
    Portion of a payment applied to exactly one installment.

    RULES:
    - exactly one of payable_installment / receivable_installment is set
    - amount > 0
    - Installment FKs are PROTECT: removing an installment must first remove
      its allocations explicitly (see ledger.services.reconciler)
    """

    TARGET_PAYABLE = "payable"
    TARGET_RECEIVABLE = "receivable"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    payment = models.ForeignKey(
        Payment,
        on_delete=models.CASCADE,
        related_name="allocations",
    )

    payable_installment = models.ForeignKey(
        "ledger.PayableInstallment",
        on_delete=models.PROTECT,
        related_name="allocations",
        null=True,
        blank=True,
    )
    receivable_installment = models.ForeignKey(
        "ledger.ReceivableInstallment",
        on_delete=models.PROTECT,
        related_name="allocations",
        null=True,
        blank=True,
    )

    amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
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
        ]
        indexes = [
            models.Index(fields=["payment"], name="allocation_payment_idx"),
        ]

    @property
    def target_type(self) -> str:
        if self.payable_installment_id:
            return self.TARGET_PAYABLE
        return self.TARGET_RECEIVABLE

    @property
    def installment_id(self):
        return self.payable_installment_id or self.receivable_installment_id

    def __str__(self):
        return f"{self.payment_id} → {self.target_type}:{self.installment_id} | {self.amount}"
