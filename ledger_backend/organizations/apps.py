# organizations/apps.py

"""
ORGANIZATIONS APP CONFIG

Tenant + reference entities:
- Organization (tenant root)
- Vendor / Customer (counterparties)
- Category / Tag (classification)
"""

from django.apps import AppConfig


class OrganizationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "organizations"
    verbose_name = "Organizations & Reference Data"
