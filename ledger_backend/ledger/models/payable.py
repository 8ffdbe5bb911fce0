# ledger/models/payable.py

from django.db import models

from ledger.models.base import AccountBase, InstallmentBase
from organizations.models import Vendor


class Payable(AccountBase):
    """
    Obligation owed TO a vendor.
    """

    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        related_name="payables",
    )

    class Meta(AccountBase.Meta):
        indexes = [
            models.Index(fields=["organization", "status"], name="payable_org_status_idx"),
            models.Index(fields=["organization", "vendor"], name="payable_org_vendor_idx"),
        ]

    def __str__(self):
        return f"Payable {self.id} · {self.amount} ({self.status})"


class PayableInstallment(InstallmentBase):
    account = models.ForeignKey(
        Payable,
        on_delete=models.CASCADE,
        related_name="installments",
    )

    class Meta(InstallmentBase.Meta):
        indexes = [
            models.Index(
                fields=["account", "installment_number"],
                name="pay_inst_account_number_idx",
            ),
            models.Index(fields=["status", "due_date"], name="pay_inst_status_due_idx"),
        ]

    def __str__(self):
        return f"{self.installment_number}/{self.total_installments} · {self.amount}"
