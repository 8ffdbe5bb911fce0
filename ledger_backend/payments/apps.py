# payments/apps.py

"""
PAYMENTS APP CONFIG

Payments and their allocations against payable / receivable installments.
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments & Allocations"
