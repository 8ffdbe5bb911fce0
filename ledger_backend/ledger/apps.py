# ledger/apps.py

"""
LEDGER APP CONFIG

Accounts (payables / receivables) and their installment schedules.
"""

from django.apps import AppConfig


class LedgerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ledger"
    verbose_name = "Payables & Receivables Ledger"
