# organizations/managers.py

"""
TENANT SCOPING

Every model that belongs to an organization uses TenantManager so that
`.for_organization()` is always available:

    Vendor.objects.for_organization(org_id)
    Vendor.objects.active(org_id)
"""

from django.db import models


class TenantQuerySet(models.QuerySet):
    def for_organization(self, organization_id):
        return self.filter(organization_id=organization_id)

    def active(self, organization_id):
        return self.filter(organization_id=organization_id, is_active=True)


TenantManager = models.Manager.from_queryset(TenantQuerySet)
