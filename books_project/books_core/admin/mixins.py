class TenantAdminMixin:
    """
    Scope an admin to the company chosen by the X-Tenant-ID header.
    Superusers without a header see every company.
    """

    # related models whose dropdowns only offer usable rows
    active_only_fields = ("account", "ledger_account", "tax_code", "vendor", "bank_account")

    def request_company(self, request):
        return getattr(request, "company", None)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        company = self.request_company(request)
        if company is not None:
            return qs.filter(company=company)
        return qs if request.user.is_superuser else qs.none()

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        company = self.request_company(request)
        related = db_field.related_model

        if db_field.name == "company":
            if company is not None:
                kwargs["queryset"] = related.objects.filter(pk=company.pk)
            elif not request.user.is_superuser:
                kwargs["queryset"] = related.objects.none()
        elif company is not None and hasattr(related.objects, "for_company"):
            qs = related.objects.for_company(company)
            if db_field.name in self.active_only_fields:
                qs = qs.filter(is_active=True)
            kwargs["queryset"] = qs

        return super().formfield_for_foreignkey(db_field, request, **kwargs)

    def save_model(self, request, obj, form, change):
        company = self.request_company(request)
        if company is not None and not change:
            obj.company = company
        super().save_model(request, obj, form, change)
