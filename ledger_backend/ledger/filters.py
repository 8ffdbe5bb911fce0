# ledger/filters.py

"""
INSTALLMENT FILTERS (django-filter)

`status` accepts the stored statuses plus the OVERDUE pseudo-status, which
is translated to: status in (PENDING, PARTIAL) AND due_date < today.
"""

import django_filters
from django.db.models import Q
from django.utils import timezone

from ledger.models import LedgerStatus, PayableInstallment, ReceivableInstallment

STATUS_FILTER_CHOICES = LedgerStatus.CHOICES + [(LedgerStatus.OVERDUE, "Overdue")]


class InstallmentFilter(django_filters.FilterSet):
    counterparty_field = None

    status = django_filters.MultipleChoiceFilter(
        choices=STATUS_FILTER_CHOICES, method="filter_status"
    )
    due_date_from = django_filters.DateFilter(field_name="due_date", lookup_expr="gte")
    due_date_to = django_filters.DateFilter(field_name="due_date", lookup_expr="lte")
    account = django_filters.UUIDFilter(field_name="account_id")
    category = django_filters.UUIDFilter(field_name="account__category_id")
    tag = django_filters.UUIDFilter(field_name="tags__id", distinct=True)
    counterparty = django_filters.UUIDFilter(method="filter_counterparty")

    def __init__(self, *args, today=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.today = today or timezone.localdate()

    def filter_status(self, queryset, name, value):
        if not value:
            return queryset

        stored = [v for v in value if v != LedgerStatus.OVERDUE]
        condition = Q(status__in=stored) if stored else Q(pk__in=[])
        if LedgerStatus.OVERDUE in value:
            condition |= Q(status__in=LedgerStatus.OPEN, due_date__lt=self.today)
        return queryset.filter(condition)

    def filter_counterparty(self, queryset, name, value):
        return queryset.filter(**{f"account__{self.counterparty_field}_id": value})


class PayableInstallmentFilter(InstallmentFilter):
    counterparty_field = "vendor"

    class Meta:
        model = PayableInstallment
        fields = []


class ReceivableInstallmentFilter(InstallmentFilter):
    counterparty_field = "customer"

    class Meta:
        model = ReceivableInstallment
        fields = []


FILTERSETS = {
    "payable": PayableInstallmentFilter,
    "receivable": ReceivableInstallmentFilter,
}
