from django.db import models


# ---------- Tenant / Company ----------
class Company(models.Model):
    """Tenant / Organization. Every ledger row hangs off one company."""

    name = models.CharField(max_length=200)

    # URL-friendly identifier, also accepted in the X-Tenant-ID header
    slug = models.SlugField(max_length=80, unique=True)

    # Functional currency of the books
    currency_code = models.CharField(max_length=3, default="INR")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "companies"

    def __str__(self):
        return self.name
