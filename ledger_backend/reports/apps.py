# reports/apps.py

"""
REPORTS APP CONFIG

Read-only dashboard / report projections over the ledger.
"""

from django.apps import AppConfig


class ReportsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "reports"
    verbose_name = "Dashboard & Reports"
