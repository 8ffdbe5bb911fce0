# payments/serializers.py

from decimal import Decimal

from rest_framework import serializers

from ledger.services.kinds import KIND_CHOICES
from payments.commands import CreatePayment, QuickPay, UpdatePayment
from payments.models import Payment, PaymentAllocation


class AllocationInputSerializer(serializers.Serializer):
    """
    Either {target_type, target_id, amount} or
    {payable_installment_id | receivable_installment_id, amount}.
    Target cardinality is checked by the allocation validator.
    """

    target_type = serializers.ChoiceField(choices=KIND_CHOICES, required=False)
    target_id = serializers.UUIDField(required=False)
    payable_installment_id = serializers.UUIDField(required=False, allow_null=True)
    receivable_installment_id = serializers.UUIDField(required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class PaymentCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01")
    )
    payment_date = serializers.DateField()
    payment_method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES)
    reference = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=128
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    allocations = AllocationInputSerializer(many=True, allow_empty=False)

    def to_command(self) -> CreatePayment:
        return CreatePayment.from_raw(self.validated_data)


class PaymentUpdateSerializer(serializers.Serializer):
    payment_date = serializers.DateField()
    payment_method = serializers.ChoiceField(
        choices=Payment.METHOD_CHOICES, required=False
    )
    reference = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=128
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_command(self) -> UpdatePayment:
        return UpdatePayment.from_raw(self.validated_data)


class QuickPaySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=KIND_CHOICES)
    installment_id = serializers.UUIDField()
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01")
    )
    payment_date = serializers.DateField()
    payment_method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES)
    reference = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=128
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_command(self) -> QuickPay:
        return QuickPay.from_raw(self.validated_data)


class PaymentAllocationSerializer(serializers.ModelSerializer):
    target_type = serializers.CharField(read_only=True)
    installment_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = PaymentAllocation
        fields = [
            "id",
            "target_type",
            "installment_id",
            "payable_installment",
            "receivable_installment",
            "amount",
            "created_at",
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    allocations = PaymentAllocationSerializer(many=True, read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "organization",
            "amount",
            "payment_date",
            "payment_method",
            "reference",
            "notes",
            "allocations",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
