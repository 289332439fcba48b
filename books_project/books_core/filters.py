# books_core/filters.py

import django_filters
from django.utils import timezone

from .models import Account, Bill, BillPayment, TaxCode, Vendor
from .models.account import AC_TYPES
from .models.bill import BILL_STATUS_CHOICES
from .models.payment import PAYMENT_METHODS


class BillFilterSet(django_filters.FilterSet):
    """
    Query-string filters for the bill list.
    The queryset handed in is already scoped to the request's company.
    """
    vendor = django_filters.NumberFilter(field_name="vendor_id")
    status = django_filters.MultipleChoiceFilter(choices=BILL_STATUS_CHOICES)
    date_from = django_filters.DateFilter(field_name="bill_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="bill_date", lookup_expr="lte")
    due_before = django_filters.DateFilter(field_name="due_date", lookup_expr="lte")
    bill_number = django_filters.CharFilter(field_name="bill_number", lookup_expr="icontains")
    overdue = django_filters.BooleanFilter(method="filter_overdue")

    class Meta:
        model = Bill
        fields = ["vendor", "status", "is_interstate"]

    def filter_overdue(self, queryset, name, value):
        overdue = dict(
            status__in=["posted", "partial"],
            balance_due__gt=0,
            due_date__lt=timezone.localdate(),
        )
        if value:
            return queryset.filter(**overdue)
        return queryset.exclude(**overdue)


class PaymentFilterSet(django_filters.FilterSet):
    bill = django_filters.NumberFilter(field_name="bill_id")
    vendor = django_filters.NumberFilter(field_name="bill__vendor_id")
    date_from = django_filters.DateFilter(field_name="payment_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="payment_date", lookup_expr="lte")
    payment_method = django_filters.ChoiceFilter(choices=PAYMENT_METHODS)

    class Meta:
        model = BillPayment
        fields = ["bill", "payment_method"]


class AccountFilterSet(django_filters.FilterSet):
    ac_type = django_filters.ChoiceFilter(choices=AC_TYPES)
    code = django_filters.CharFilter(field_name="code", lookup_expr="startswith")
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")

    class Meta:
        model = Account
        fields = ["ac_type", "is_active", "is_header"]


class VendorFilterSet(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Vendor
        fields = ["is_active"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(name__icontains=value) | queryset.filter(code__icontains=value)


class TaxCodeFilterSet(django_filters.FilterSet):
    class Meta:
        model = TaxCode
        fields = ["tax_type", "is_active"]
