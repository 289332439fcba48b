from django.contrib import admin

from books_core.models import Company, Period

from .mixins import TenantAdminMixin


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "currency_code", "created_at")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Period)
class PeriodAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("name", "company", "start_date", "end_date", "is_closed")
    list_filter = ("company", "is_closed")
