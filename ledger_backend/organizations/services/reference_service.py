# organizations/services/reference_service.py

"""
REFERENCE ENTITY SERVICE

Tenant-scoped CRUD for vendors, customers, categories and tags.

Removal rules:
- supports_soft_delete=True and the record is in use -> is_active=False
- otherwise                                          -> hard delete
- a hard delete blocked by PROTECT references        -> ConflictError

Capabilities are declared per instance (no dispatch on model names).
"""

from __future__ import annotations

import logging

from django.db.models import ProtectedError

from ledger.services.exceptions import ConflictError
from ledger.services.lookups import get_scoped
from ledger.services.transactions import ledger_transaction
from organizations.models import Category, Customer, Tag, Vendor

logger = logging.getLogger("organizations")


class TenantEntityService:
    def __init__(
        self,
        model,
        *,
        display_name: str,
        supports_soft_delete: bool = False,
        in_use=None,
        ordering=("name",),
    ):
        self.model = model
        self.display_name = display_name
        self.supports_soft_delete = supports_soft_delete
        self.in_use = in_use
        self.ordering = tuple(ordering)

    def __repr__(self):
        return f"<TenantEntityService {self.display_name}>"

    def _queryset(self, organization_id):
        return self.model.objects.for_organization(organization_id)

    def list(self, *, organization_id, include_inactive: bool = False, **filters):
        qs = self._queryset(organization_id).filter(**filters)
        if self.supports_soft_delete and not include_inactive:
            qs = qs.filter(is_active=True)
        return list(qs.order_by(*self.ordering))

    def get(self, *, organization_id, entity_id, for_update: bool = False):
        return get_scoped(
            self._queryset(organization_id),
            pk=entity_id,
            label=self.display_name,
            for_update=for_update,
        )

    @ledger_transaction
    def create(self, *, organization_id, **data):
        instance = self.model.objects.create(organization_id=organization_id, **data)
        logger.info(
            "Reference entity created",
            extra={
                "entity": self.display_name,
                "entity_id": str(instance.pk),
                "organization_id": str(organization_id),
            },
        )
        return instance

    @ledger_transaction
    def update(self, *, organization_id, entity_id, **data):
        instance = self.get(
            organization_id=organization_id, entity_id=entity_id, for_update=True
        )

        data.pop("organization", None)
        data.pop("organization_id", None)
        if not self.supports_soft_delete:
            data.pop("is_active", None)

        for field_name, value in data.items():
            setattr(instance, field_name, value)
        instance.save()
        return instance

    @ledger_transaction
    def remove(self, *, organization_id, entity_id) -> str:
        """
        Returns "deactivated" or "deleted".
        """
        instance = self.get(
            organization_id=organization_id, entity_id=entity_id, for_update=True
        )

        if self.supports_soft_delete and self.in_use is not None and self.in_use(instance):
            instance.is_active = False
            instance.save(update_fields=["is_active", "updated_at"])
            outcome = "deactivated"
        else:
            try:
                instance.delete()
            except ProtectedError as exc:
                raise ConflictError(
                    f"{self.display_name} is referenced and cannot be deleted",
                    id=str(entity_id),
                ) from exc
            outcome = "deleted"

        logger.info(
            "Reference entity removed",
            extra={
                "entity": self.display_name,
                "entity_id": str(entity_id),
                "organization_id": str(organization_id),
                "outcome": outcome,
            },
        )
        return outcome


vendors = TenantEntityService(
    Vendor,
    display_name="Vendor",
    supports_soft_delete=True,
    in_use=lambda vendor: vendor.payables.exists(),
)

customers = TenantEntityService(
    Customer,
    display_name="Customer",
    supports_soft_delete=True,
    in_use=lambda customer: customer.receivables.exists(),
)

categories = TenantEntityService(
    Category,
    display_name="Category",
    supports_soft_delete=True,
    in_use=lambda category: (
        category.payables.exists() or category.receivables.exists()
    ),
)

tags = TenantEntityService(Tag, display_name="Tag")
