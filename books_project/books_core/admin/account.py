from django.contrib import admin

from books_core.models import Account, TaxCode

from .actions import deactivate_accounts
from .mixins import TenantAdminMixin


@admin.register(Account)
class AccountAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("code", "name", "company", "ac_type", "normal_balance", "is_header", "is_active")
    list_filter = ("company", "ac_type", "is_active", "is_header")
    search_fields = ("code", "name")
    actions = [deactivate_accounts]

    # accounts are deactivated, never deleted
    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(TaxCode)
class TaxCodeAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("code", "name", "company", "tax_type", "rate", "cgst_rate", "sgst_rate", "igst_rate", "is_active")
    list_filter = ("company", "tax_type", "is_active")
    search_fields = ("code", "name")
