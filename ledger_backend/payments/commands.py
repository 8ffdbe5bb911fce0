# payments/commands.py

"""
PATH: payments/commands.py

PAYMENT COMMANDS (FRAMEWORK-AGNOSTIC)

Immutable inputs for the payment lifecycle. Built by payments/serializers.py.
Allocation lines keep BOTH target columns so that a malformed line (no
target, or two targets) reaches the allocation validator intact.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class AllocationLine:
    amount: Decimal
    payable_installment_id: object = None
    receivable_installment_id: object = None

    @property
    def target_count(self) -> int:
        return sum(
            1
            for target in (self.payable_installment_id, self.receivable_installment_id)
            if target
        )

    @staticmethod
    def from_raw(raw: dict) -> "AllocationLine":
        payable_id = raw.get("payable_installment_id")
        receivable_id = raw.get("receivable_installment_id")

        # {target_type, target_id} shape
        target_type = (raw.get("target_type") or "").strip().lower()
        if target_type == "payable" and raw.get("target_id"):
            payable_id = raw["target_id"]
        elif target_type == "receivable" and raw.get("target_id"):
            receivable_id = raw["target_id"]

        return AllocationLine(
            amount=raw.get("amount"),
            payable_installment_id=payable_id,
            receivable_installment_id=receivable_id,
        )


@dataclass(frozen=True)
class CreatePayment:
    amount: Decimal
    payment_date: date
    payment_method: str
    allocations: Tuple[AllocationLine, ...]
    reference: Optional[str] = None
    notes: Optional[str] = None

    @staticmethod
    def from_raw(raw: dict) -> "CreatePayment":
        return CreatePayment(
            amount=raw["amount"],
            payment_date=raw["payment_date"],
            payment_method=raw["payment_method"],
            allocations=tuple(
                AllocationLine.from_raw(line) for line in raw.get("allocations") or ()
            ),
            reference=raw.get("reference"),
            notes=raw.get("notes"),
        )


@dataclass(frozen=True)
class UpdatePayment:
    """
    Only descriptive fields are editable. payment_date is mandatory;
    reference / notes are applied only when present in `provided`
    (so an explicit null clears them).
    """

    payment_date: date
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    provided: FrozenSet[str] = frozenset()

    @staticmethod
    def from_raw(raw: dict) -> "UpdatePayment":
        return UpdatePayment(
            payment_date=raw["payment_date"],
            payment_method=raw.get("payment_method"),
            reference=raw.get("reference"),
            notes=raw.get("notes"),
            provided=frozenset(raw.keys()),
        )


@dataclass(frozen=True)
class QuickPay:
    type: str
    installment_id: object
    amount: Decimal
    payment_date: date
    payment_method: str
    reference: Optional[str] = None
    notes: Optional[str] = None

    @staticmethod
    def from_raw(raw: dict) -> "QuickPay":
        return QuickPay(
            type=raw["type"],
            installment_id=raw["installment_id"],
            amount=raw["amount"],
            payment_date=raw["payment_date"],
            payment_method=raw["payment_method"],
            reference=raw.get("reference"),
            notes=raw.get("notes"),
        )

    def to_create_payment(self) -> CreatePayment:
        line = AllocationLine.from_raw(
            {
                "target_type": self.type,
                "target_id": self.installment_id,
                "amount": self.amount,
            }
        )
        return CreatePayment(
            amount=self.amount,
            payment_date=self.payment_date,
            payment_method=self.payment_method,
            allocations=(line,),
            reference=self.reference,
            notes=self.notes,
        )
