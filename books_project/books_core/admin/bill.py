from django.contrib import admin

from books_core.models import Bill, Vendor

from .actions import post_selected_bills
from .inlines import BillLineInline, BillPaymentInline
from .mixins import TenantAdminMixin


# Register `Bill` model
@admin.register(Bill)
class BillAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = (
        "id", "company", "bill_number", "vendor", "bill_date", "due_date",
        "status", "total_amount", "balance_due",
    )
    list_filter = ("company", "status", "bill_date")
    actions = [post_selected_bills]
    search_fields = ("bill_number", "vendor__name")
    inlines = [BillLineInline, BillPaymentInline]
    readonly_fields = (
        "status", "subtotal", "cgst_amount", "sgst_amount", "igst_amount",
        "cess_amount", "total_tax", "total_amount", "amount_paid",
        "balance_due", "journal_entry", "posted_at",
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("company", "vendor")

    """ Enforce immutability at admin level """

    def get_readonly_fields(self, request, obj=None):
        if obj and not obj.is_draft:
            return [f.name for f in self.model._meta.fields]
        return self.readonly_fields

    def has_delete_permission(self, request, obj=None):
        if obj and not obj.is_draft:
            return False
        return super().has_delete_permission(request, obj)

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        # header totals follow the lines
        bill = form.instance
        if bill.is_draft:
            bill.recalc_totals()
            bill.save()


# Register `Vendor` model
@admin.register(Vendor)
class VendorAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "code", "name", "gstin", "payment_terms_days", "is_active")
    search_fields = ("code", "name", "gstin")
    list_filter = ("company", "is_active")

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("company", "default_expense_account")
