from django.contrib import admin

from books_core.models import BankAccount, BillPayment

from .mixins import TenantAdminMixin
from .ReadOnly import ReadOnlyAdmin


@admin.register(BankAccount)
class BankAccountAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("name", "company", "account_number", "ifsc", "ledger_account", "is_active")
    list_filter = ("company", "is_active")


# Payments are recorded through the payment workflow only
@admin.register(BillPayment)
class BillPaymentAdmin(TenantAdminMixin, ReadOnlyAdmin):
    list_display = ("id", "company", "bill", "payment_date", "amount", "tds_amount", "payment_method", "journal_entry")
    list_filter = ("company", "payment_method", "payment_date")
    search_fields = ("bill__bill_number", "reference_number")
