# ledger/serializers/account_command.py

"""
ACCOUNT / INSTALLMENT COMMAND SERIALIZERS

Shape validation only. Each serializer exposes `to_command()` which turns
validated_data into the immutable command consumed by ledger services.
"""

from decimal import Decimal

from rest_framework import serializers

from ledger.commands import (
    CreateAccount,
    InstallmentUpdate,
    UpdateAccount,
)
from ledger.services.account_service import MAX_INSTALLMENTS
from payments.models import Payment


class AccountPaymentSerializer(serializers.Serializer):
    installment_numbers = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
    )
    payment_date = serializers.DateField()
    payment_method = serializers.ChoiceField(choices=Payment.METHOD_CHOICES)
    reference = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AccountCreateSerializer(serializers.Serializer):
    counterparty_id = serializers.UUIDField()
    category_id = serializers.UUIDField(required=False, allow_null=True)

    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01")
    )
    installment_count = serializers.IntegerField(
        min_value=1, max_value=MAX_INSTALLMENTS, default=1
    )
    due_dates = serializers.ListField(
        child=serializers.DateField(), required=False, default=list
    )
    due_date = serializers.DateField(required=False)

    tag_ids = serializers.ListField(
        child=serializers.UUIDField(), required=False, default=list
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    document_number = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=64
    )

    payment = AccountPaymentSerializer(required=False, allow_null=True)

    def validate(self, attrs):
        if not attrs.get("due_dates") and not attrs.get("due_date"):
            raise serializers.ValidationError(
                {"due_dates": "At least one due date is required."}
            )
        return attrs

    def to_command(self) -> CreateAccount:
        return CreateAccount.from_raw(self.validated_data)


class AccountUpdateSerializer(serializers.Serializer):
    counterparty_id = serializers.UUIDField(required=False)
    category_id = serializers.UUIDField(required=False, allow_null=True)
    document_number = serializers.CharField(
        required=False, allow_blank=True, max_length=64
    )
    notes = serializers.CharField(required=False, allow_blank=True)
    tag_ids = serializers.ListField(child=serializers.UUIDField(), required=False)
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01"), required=False
    )

    def to_command(self) -> UpdateAccount:
        return UpdateAccount.from_raw(self.validated_data)


class InstallmentUpdateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.01"), required=False
    )
    # Kept as text: blank means "unchanged", bad dates surface as
    # InvalidDueDateError from the service.
    due_date = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    tag_ids = serializers.ListField(child=serializers.UUIDField(), required=False)

    def validate(self, attrs):
        if "notes" in attrs and attrs["notes"] is None:
            attrs["notes"] = ""
        return attrs

    def to_command(self) -> InstallmentUpdate:
        return InstallmentUpdate.from_raw(self.validated_data)
