from django.contrib import admin
from django.core.exceptions import PermissionDenied

LEDGER_FILTERS = ("status", "entry_type", "payment_method", "subject", "action", "object_type")


class ReadOnlyAdmin(admin.ModelAdmin):
    """Ledger, payment and outbox rows are written by the services only."""

    list_per_page = 50

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        raise PermissionDenied(f"{self.model._meta.verbose_name} is maintained by the books services.")

    # no bulk delete
    def get_actions(self, request):
        return {}

    def get_list_filter(self, request):
        names = {f.name for f in self.model._meta.fields}
        return tuple(name for name in LEDGER_FILTERS if name in names)
