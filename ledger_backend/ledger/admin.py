# ledger/admin.py

"""
Ledger admin is read-mostly: aggregate fields and installment schedules are
owned by ledger services, so they are never editable here.
"""

from django.contrib import admin

from ledger.models import (
    Payable,
    PayableInstallment,
    Receivable,
    ReceivableInstallment,
)

AGGREGATE_FIELDS = (
    "amount",
    "paid_amount",
    "status",
    "total_installments",
    "created_at",
    "updated_at",
)

INSTALLMENT_FIELDS = (
    "installment_number",
    "total_installments",
    "amount",
    "paid_amount",
    "due_date",
    "status",
)


class PayableInstallmentInline(admin.TabularInline):
    model = PayableInstallment
    fields = INSTALLMENT_FIELDS
    readonly_fields = INSTALLMENT_FIELDS
    extra = 0
    can_delete = False
    ordering = ("installment_number",)


class ReceivableInstallmentInline(admin.TabularInline):
    model = ReceivableInstallment
    fields = INSTALLMENT_FIELDS
    readonly_fields = INSTALLMENT_FIELDS
    extra = 0
    can_delete = False
    ordering = ("installment_number",)


# ======================================================
# PAYABLE ADMIN
# ======================================================


@admin.register(Payable)
class PayableAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "vendor",
        "organization",
        "amount",
        "paid_amount",
        "status",
        "total_installments",
        "created_at",
    )
    readonly_fields = AGGREGATE_FIELDS
    search_fields = ("document_number", "vendor__name")
    list_filter = ("status", "organization")
    inlines = [PayableInstallmentInline]


# ======================================================
# RECEIVABLE ADMIN
# ======================================================


@admin.register(Receivable)
class ReceivableAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer",
        "organization",
        "amount",
        "paid_amount",
        "status",
        "total_installments",
        "created_at",
    )
    readonly_fields = AGGREGATE_FIELDS
    search_fields = ("document_number", "customer__name")
    list_filter = ("status", "organization")
    inlines = [ReceivableInstallmentInline]
