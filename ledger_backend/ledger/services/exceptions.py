# ledger/services/exceptions.py

"""
LEDGER SERVICE ERRORS

Centralized domain errors for the ledger core (accounts, installments,
payments, allocations).

Every error carries a stable `code` so the gateway can map it to a
transport status without string matching.
"""


class LedgerServiceError(Exception):
    """Base exception for all ledger service failures."""

    code = "LEDGER_ERROR"

    def __init__(self, message: str = "", **context):
        super().__init__(message or self.__class__.__doc__)
        self.context = context


class NotFoundError(LedgerServiceError):
    """Referenced record does not exist in the caller's organization."""

    code = "NOT_FOUND"


class ConflictError(LedgerServiceError):
    """Concurrent modification or uniqueness conflict; retry later."""

    code = "CONFLICT"


class AmountMismatchError(LedgerServiceError):
    """Allocation amounts do not add up to the payment amount."""

    code = "AMOUNT_MISMATCH"


class InvalidAllocationTargetError(LedgerServiceError):
    """An allocation must target exactly one installment."""

    code = "INVALID_ALLOCATION_TARGET"


class InvalidAllocationAmountError(LedgerServiceError):
    """Allocation amount must be greater than zero."""

    code = "INVALID_ALLOCATION_AMOUNT"


class OverAllocationError(LedgerServiceError):
    """Allocation would push an installment beyond its amount."""

    code = "OVER_ALLOCATION"


class InstallmentNotPayableError(LedgerServiceError):
    """Cancelled installments cannot receive allocations."""

    code = "INSTALLMENT_NOT_PAYABLE"


class InstallmentNotEditableError(LedgerServiceError):
    """Only PENDING installments can change amount or due date."""

    code = "INSTALLMENT_NOT_EDITABLE"


class InstallmentHasPaymentsError(LedgerServiceError):
    """Installments with allocations cannot change amount or due date."""

    code = "INSTALLMENT_HAS_PAYMENTS"


class LastInstallmentError(LedgerServiceError):
    """An account must keep at least one installment."""

    code = "LAST_INSTALLMENT"


class InvalidDueDateError(LedgerServiceError):
    """Due date could not be parsed."""

    code = "INVALID_DUE_DATE"


class InvalidScheduleError(LedgerServiceError):
    """Installment schedule (count, amount or due dates) is invalid."""

    code = "INVALID_SCHEDULE"


class AccountNotCancellableError(LedgerServiceError):
    """Account is already cancelled or has received payments."""

    code = "ACCOUNT_NOT_CANCELLABLE"


class InvalidStatusTransitionError(LedgerServiceError):
    """Installment status transition is not allowed."""

    code = "INVALID_STATUS_TRANSITION"
