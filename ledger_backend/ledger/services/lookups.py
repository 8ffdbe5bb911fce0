# ledger/services/lookups.py

"""
TENANT-SCOPED LOOKUPS

A record outside the caller's organization is indistinguishable from a
missing one: both raise NotFoundError. Malformed ids are treated the same.
"""

from __future__ import annotations

import uuid

from django.core.exceptions import ObjectDoesNotExist, ValidationError

from ledger.services.exceptions import NotFoundError


def get_scoped(queryset, *, pk, label: str, for_update: bool = False):
    if for_update:
        queryset = queryset.select_for_update()

    try:
        return queryset.get(pk=pk)
    except (ObjectDoesNotExist, ValidationError, ValueError) as exc:
        raise NotFoundError(f"{label} not found", id=str(pk)) from exc


def normalize_ids(ids, *, label: str) -> set[uuid.UUID]:
    try:
        return {i if isinstance(i, uuid.UUID) else uuid.UUID(str(i)) for i in ids}
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"{label} not found") from exc


def fetch_scoped_many(queryset, *, ids, label: str, for_update: bool = False):
    """
    Fetch every id in `ids` (duplicates collapsed) or raise NotFoundError.
    Returns {uuid: instance}.
    """
    wanted = normalize_ids(ids, label=label)
    if not wanted:
        return {}

    if for_update:
        queryset = queryset.select_for_update()

    found = {obj.pk: obj for obj in queryset.filter(pk__in=wanted)}

    missing = sorted(str(i) for i in wanted - set(found))
    if missing:
        raise NotFoundError(f"{label} not found", ids=missing)

    return found
