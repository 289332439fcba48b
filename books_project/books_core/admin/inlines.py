from django import forms
from django.contrib import admin

from books_core.models import BillLine, BillPayment, JournalLine

from .mixins import TenantAdminMixin

# ---------- Helpful inline admin classes ----------


class BillLineInlineForm(forms.ModelForm):
    class Meta:
        model = BillLine
        exclude = ("company",)  # hide company from inline form

    def clean(self):
        # copy company from the parent bill before model validation runs
        if getattr(self.instance, "bill_id", None) and not self.instance.company_id:
            self.instance.company_id = self.instance.bill.company_id
        return super().clean()


class JournalLineInline(TenantAdminMixin, admin.TabularInline):
    """Show JournalLine rows on JournalEntry page (written by the poster only)"""

    model = JournalLine
    extra = 0
    fields = ("line_number", "account", "description", "debit_amount", "credit_amount")
    readonly_fields = fields
    ordering = ("line_number",)

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("account")

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class BillLineInline(TenantAdminMixin, admin.TabularInline):
    """Shows bill lines under a Bill page; editable while the bill is a draft"""

    model = BillLine
    form = BillLineInlineForm
    extra = 0
    fields = (
        "line_number", "description", "account", "quantity", "unit_price",
        "discount_percent", "tax_code", "net_amount", "total_amount",
    )
    # computed by the tax engine on save
    readonly_fields = ("net_amount", "total_amount")

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("account", "tax_code")

    def get_readonly_fields(self, request, obj=None):
        if obj and not obj.is_draft:
            return self.fields
        return self.readonly_fields

    def has_add_permission(self, request, obj=None):
        if obj and not obj.is_draft:
            return False
        return super().has_add_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj and not obj.is_draft:
            return False
        return super().has_delete_permission(request, obj)


class BillPaymentInline(TenantAdminMixin, admin.TabularInline):
    model = BillPayment
    extra = 0
    fields = ("payment_date", "amount", "tds_amount", "payment_method", "bank_account", "journal_entry")
    readonly_fields = fields
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False
