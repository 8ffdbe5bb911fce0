# ledger/models/receivable.py

from django.db import models

from ledger.models.base import AccountBase, InstallmentBase
from organizations.models import Customer


class Receivable(AccountBase):
    """
    Obligation owed BY a customer.

    `paid_amount` is stored under the shared column name; receivable
    vocabulary reads it as `received_amount`.
    """

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="receivables",
    )

    class Meta(AccountBase.Meta):
        indexes = [
            models.Index(fields=["organization", "status"], name="receivable_org_status_idx"),
            models.Index(fields=["organization", "customer"], name="receivable_org_customer_idx"),
        ]

    @property
    def received_amount(self):
        return self.paid_amount

    def __str__(self):
        return f"Receivable {self.id} · {self.amount} ({self.status})"


class ReceivableInstallment(InstallmentBase):
    account = models.ForeignKey(
        Receivable,
        on_delete=models.CASCADE,
        related_name="installments",
    )

    class Meta(InstallmentBase.Meta):
        indexes = [
            models.Index(
                fields=["account", "installment_number"],
                name="rec_inst_account_number_idx",
            ),
            models.Index(fields=["status", "due_date"], name="rec_inst_status_due_idx"),
        ]

    @property
    def received_amount(self):
        return self.paid_amount

    def __str__(self):
        return f"{self.installment_number}/{self.total_installments} · {self.amount}"
