from django.utils.deprecation import MiddlewareMixin

from .models import Company

TENANT_HEADER = "HTTP_X_TENANT_ID"


class CurrentCompanyMiddleware(MiddlewareMixin):
    # Run on every request and attach a .company attribute,
    # resolved from the X-Tenant-ID header (company slug or numeric id)
    def process_request(self, request):
        request.company = None
        tenant = (request.META.get(TENANT_HEADER) or "").strip()
        if not tenant:
            return

        companies = Company.objects.all()
        if tenant.isdigit():
            request.company = companies.filter(pk=int(tenant)).first()
        if request.company is None:
            request.company = companies.filter(slug=tenant).first()
