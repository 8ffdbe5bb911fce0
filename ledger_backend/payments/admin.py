# payments/admin.py

from django.contrib import admin

from payments.models import Payment, PaymentAllocation


class PaymentAllocationInline(admin.TabularInline):
    model = PaymentAllocation
    fields = ("payable_installment", "receivable_installment", "amount", "created_at")
    readonly_fields = fields
    extra = 0
    can_delete = False


# ======================================================
# PAYMENT ADMIN
# ======================================================


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = (
        "payment_date",
        "organization",
        "payment_method",
        "amount",
        "reference",
        "created_at",
    )
    readonly_fields = ("amount", "created_at", "updated_at")
    search_fields = ("reference", "notes")
    list_filter = ("payment_method", "payment_date", "organization")
    inlines = [PaymentAllocationInline]
