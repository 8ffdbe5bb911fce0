# ledger/services/dates.py

from __future__ import annotations

from datetime import date, datetime

from django.utils.dateparse import parse_date, parse_datetime

from ledger.services.exceptions import InvalidDueDateError


def coerce_due_date(value) -> date | None:
    """
    Normalize an incoming due date to a calendar date.

    - None / "" / whitespace -> None (caller leaves the stored value unchanged)
    - date / datetime        -> date
    - "YYYY-MM-DD" or an ISO datetime string -> date
    - anything else          -> InvalidDueDateError
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    if not raw:
        return None

    try:
        parsed = parse_date(raw)
        if parsed is None:
            parsed_dt = parse_datetime(raw)
            parsed = parsed_dt.date() if parsed_dt else None
    except ValueError as exc:
        raise InvalidDueDateError(f"Invalid due date: {raw}") from exc

    if parsed is None:
        raise InvalidDueDateError(f"Invalid due date: {raw}")
    return parsed
