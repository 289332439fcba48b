from decimal import Decimal

from django.contrib import admin
from django.db.models import Prefetch
from django.utils.html import format_html

from books_core.models import JournalEntry, JournalLine

from .inlines import JournalLineInline
from .mixins import TenantAdminMixin
from .ReadOnly import ReadOnlyAdmin


# Register `JournalEntry` model
@admin.register(JournalEntry)
class JournalEntryAdmin(TenantAdminMixin, ReadOnlyAdmin):
    """Journal entries are written by the ledger poster; admin only shows them."""

    list_display = (
        "id", "company", "entry_number", "entry_type", "entry_date",
        "status", "posted_at", "balanced",
    )
    list_filter = ("company", "entry_type", "status", "entry_date")
    search_fields = ("entry_number", "description")
    inlines = [JournalLineInline]

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        journalline_qs = JournalLine.objects.select_related("account")
        return qs.select_related("company").prefetch_related(
            Prefetch("lines", queryset=journalline_qs)
        )

    """ Computed column for balance check """
    @admin.display(description="Debits / Credits")
    def balanced(self, obj):
        d, c = obj.compute_totals()
        return format_html(
            "<b>{}</b> / <small>{}</small>",
            d or Decimal("0.00"),
            c or Decimal("0.00"),
        )
