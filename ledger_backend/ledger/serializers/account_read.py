# ledger/serializers/account_read.py

"""
READ SERIALIZERS

Render stored state plus the derived `is_overdue` flag (day granularity).
Pass {"today": date} in the serializer context to pin the reference day.
"""

from rest_framework import serializers

from ledger.models import Payable, Receivable
from ledger.services.status_rules import is_overdue


class InstallmentSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    account_id = serializers.UUIDField(read_only=True)
    installment_number = serializers.IntegerField(read_only=True)
    total_installments = serializers.IntegerField(read_only=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    paid_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True
    )
    due_date = serializers.DateField(read_only=True)
    status = serializers.CharField(read_only=True)
    is_overdue = serializers.SerializerMethodField()
    notes = serializers.CharField(read_only=True, allow_null=True)
    tag_ids = serializers.SerializerMethodField()

    def get_is_overdue(self, obj) -> bool:
        return is_overdue(
            status=obj.status,
            due_date=obj.due_date,
            today=self.context.get("today"),
        )

    def get_tag_ids(self, obj):
        return [str(tag.id) for tag in obj.tags.all()]


class _AccountSerializer(serializers.ModelSerializer):
    category_name = serializers.SerializerMethodField()
    tag_ids = serializers.SerializerMethodField()
    installments = serializers.SerializerMethodField()

    def get_category_name(self, obj):
        return getattr(getattr(obj, "category", None), "name", None)

    def get_tag_ids(self, obj):
        return [str(tag.id) for tag in obj.tags.all()]

    def get_installments(self, obj):
        qs = obj.installments.prefetch_related("tags").order_by("installment_number")
        return InstallmentSerializer(qs, many=True, context=self.context).data


ACCOUNT_FIELDS = [
    "id",
    "organization",
    "category",
    "category_name",
    "document_number",
    "notes",
    "amount",
    "paid_amount",
    "status",
    "total_installments",
    "tag_ids",
    "installments",
    "created_at",
    "updated_at",
]


class PayableSerializer(_AccountSerializer):
    vendor_name = serializers.CharField(source="vendor.name", read_only=True)

    class Meta:
        model = Payable
        fields = ACCOUNT_FIELDS + ["vendor", "vendor_name"]
        read_only_fields = fields


class ReceivableSerializer(_AccountSerializer):
    customer_name = serializers.CharField(source="customer.name", read_only=True)
    received_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = Receivable
        fields = ACCOUNT_FIELDS + ["customer", "customer_name", "received_amount"]
        read_only_fields = fields
