# ledger/serializers/__init__.py

from ledger.serializers.account_command import (
    AccountCreateSerializer,
    AccountPaymentSerializer,
    AccountUpdateSerializer,
    InstallmentUpdateSerializer,
)
from ledger.serializers.account_read import (
    InstallmentSerializer,
    PayableSerializer,
    ReceivableSerializer,
)

__all__ = [
    "AccountCreateSerializer",
    "AccountPaymentSerializer",
    "AccountUpdateSerializer",
    "InstallmentUpdateSerializer",
    "InstallmentSerializer",
    "PayableSerializer",
    "ReceivableSerializer",
]
