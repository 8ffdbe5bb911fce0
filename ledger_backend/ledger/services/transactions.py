# ledger/services/transactions.py

"""
LEDGER TRANSACTION BOUNDARY

Every mutating ledger operation is wrapped by `ledger_transaction`:

RULES:
- The whole operation runs inside ONE transaction.atomic() block
- Production connections run at SERIALIZABLE isolation (see settings.prod);
  rows that are read-then-written are also locked with select_for_update()
- Serialization failures / deadlocks are retried at the OUTERMOST boundary only,
  up to settings.LEDGER_TRANSACTION_MAX_ATTEMPTS, then surface as ConflictError
- Nested calls (an operation invoked by another operation) join the caller's
  transaction and never retry on their own
- IntegrityError is translated: foreign-key violation -> NotFoundError,
  anything else (unique / check) -> ConflictError
"""

from __future__ import annotations

import functools
import logging

from django.conf import settings
from django.db import IntegrityError, OperationalError, transaction

from ledger.services.exceptions import ConflictError, NotFoundError

logger = logging.getLogger("ledger")

SERIALIZATION_FAILURE = "40001"
DEADLOCK_DETECTED = "40P01"
FOREIGN_KEY_VIOLATION = "23503"

RETRYABLE_SQLSTATES = {SERIALIZATION_FAILURE, DEADLOCK_DETECTED}


def _sqlstate(exc: Exception) -> str | None:
    cause = exc.__cause__ or exc
    return getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)


def is_serialization_failure(exc: Exception) -> bool:
    return _sqlstate(exc) in RETRYABLE_SQLSTATES


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    if _sqlstate(exc) == FOREIGN_KEY_VIOLATION:
        return True
    return "foreign key" in str(exc).lower()


def translate_integrity_error(exc: IntegrityError, *, operation: str):
    if _is_foreign_key_violation(exc):
        logger.warning(
            "Ledger operation referenced a missing record",
            extra={"operation": operation, "error": str(exc)},
        )
        return NotFoundError("Referenced record not found")

    logger.warning(
        "Ledger operation violated a constraint",
        extra={"operation": operation, "error": str(exc)},
    )
    return ConflictError("Operation conflicts with existing data")


def _max_attempts() -> int:
    return max(1, int(getattr(settings, "LEDGER_TRANSACTION_MAX_ATTEMPTS", 3)))


def ledger_transaction(func):
    """
    Decorator: run `func` as one atomic ledger operation.
    """

    operation = func.__qualname__

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        nested = transaction.get_connection().in_atomic_block
        attempts = 1 if nested else _max_attempts()

        for attempt in range(1, attempts + 1):
            try:
                with transaction.atomic():
                    return func(*args, **kwargs)
            except IntegrityError as exc:
                raise translate_integrity_error(exc, operation=operation) from exc
            except OperationalError as exc:
                if not is_serialization_failure(exc):
                    raise

                if nested:
                    # The outermost boundary owns the retry.
                    raise

                logger.warning(
                    "Serialization failure in ledger operation",
                    extra={
                        "operation": operation,
                        "attempt": attempt,
                        "max_attempts": attempts,
                    },
                )
                if attempt == attempts:
                    raise ConflictError(
                        "Concurrent modification detected; please retry."
                    ) from exc

    return wrapper
