# ledger/models/__init__.py

"""
LEDGER MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Aggregate fields (amount, paid_amount, status, total_installments) are
  written only by ledger/payments services.
"""

from ledger.models.base import AccountBase, InstallmentBase, LedgerStatus
from ledger.models.payable import Payable, PayableInstallment
from ledger.models.receivable import Receivable, ReceivableInstallment

__all__ = [
    "LedgerStatus",
    "AccountBase",
    "InstallmentBase",
    "Payable",
    "PayableInstallment",
    "Receivable",
    "ReceivableInstallment",
]
