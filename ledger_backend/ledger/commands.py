# ledger/commands.py

"""
PATH: ledger/commands.py

LEDGER COMMANDS (FRAMEWORK-AGNOSTIC)

Validated, immutable inputs for account / installment operations.
Built by the DRF serializers in ledger/serializers (API layer) and consumed
by ledger/services (application layer). Business rules that need the
database (tenancy, statuses, allocations) are NOT checked here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class AccountPayment:
    """
    Optional "already paid" block on account creation: the listed
    installment numbers are settled in full by a single payment.
    """

    installment_numbers: Tuple[int, ...]
    payment_date: date
    payment_method: str
    reference: Optional[str] = None
    notes: Optional[str] = None

    @staticmethod
    def from_raw(raw: dict | None) -> Optional["AccountPayment"]:
        if not raw:
            return None
        return AccountPayment(
            installment_numbers=tuple(raw.get("installment_numbers") or ()),
            payment_date=raw["payment_date"],
            payment_method=raw["payment_method"],
            reference=raw.get("reference"),
            notes=raw.get("notes"),
        )


@dataclass(frozen=True)
class CreateAccount:
    counterparty_id: object
    amount: Decimal
    installment_count: int
    due_dates: Tuple[date, ...]
    category_id: object = None
    tag_ids: Tuple[object, ...] = ()
    notes: str = ""
    document_number: str = ""
    payment: Optional[AccountPayment] = None

    @staticmethod
    def from_raw(raw: dict) -> "CreateAccount":
        due_dates = tuple(raw.get("due_dates") or ())
        count = raw.get("installment_count") or 1

        # Single-installment shorthand: one due_date instead of a list.
        if not due_dates and raw.get("due_date") and count == 1:
            due_dates = (raw["due_date"],)

        return CreateAccount(
            counterparty_id=raw["counterparty_id"],
            amount=raw["amount"],
            installment_count=count,
            due_dates=due_dates,
            category_id=raw.get("category_id"),
            tag_ids=tuple(raw.get("tag_ids") or ()),
            notes=raw.get("notes") or "",
            document_number=raw.get("document_number") or "",
            payment=AccountPayment.from_raw(raw.get("payment")),
        )


@dataclass(frozen=True)
class UpdateAccount:
    """
    Metadata edit of an account. None means "not supplied".

    amount re-splits the schedule (refused once money was applied).
    clear_category=True removes the category.
    """

    counterparty_id: object = None
    category_id: object = None
    clear_category: bool = False
    document_number: Optional[str] = None
    notes: Optional[str] = None
    tag_ids: Optional[Tuple[object, ...]] = None
    amount: Optional[Decimal] = None

    @staticmethod
    def from_raw(raw: dict) -> "UpdateAccount":
        clear_category = "category_id" in raw and not raw["category_id"]
        tag_ids = raw.get("tag_ids")
        return UpdateAccount(
            counterparty_id=raw.get("counterparty_id"),
            category_id=raw.get("category_id") or None,
            clear_category=clear_category,
            document_number=raw.get("document_number"),
            notes=raw.get("notes"),
            tag_ids=tuple(tag_ids) if tag_ids is not None else None,
            amount=raw.get("amount"),
        )


@dataclass(frozen=True)
class InstallmentUpdate:
    """
    Partial edit of one installment. None means "not supplied".

    - due_date: date or raw string; "" / whitespace is ignored
    - notes: "" (or whitespace) clears the note
    - tag_ids: replaces the whole tag set ([] clears it)
    """

    amount: Optional[Decimal] = None
    due_date: object = None
    notes: Optional[str] = None
    tag_ids: Optional[Tuple[object, ...]] = field(default=None)

    @staticmethod
    def from_raw(raw: dict) -> "InstallmentUpdate":
        tag_ids = raw.get("tag_ids")
        return InstallmentUpdate(
            amount=raw.get("amount"),
            due_date=raw.get("due_date"),
            notes=raw.get("notes"),
            tag_ids=tuple(tag_ids) if tag_ids is not None else None,
        )
