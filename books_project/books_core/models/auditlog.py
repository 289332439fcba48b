from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Audit / Event log ----------
class AuditLog(models.Model):
    """Who did what to which record, with a JSON diff of what changed."""

    company = models.ForeignKey(
        Company,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    # Caller-supplied actor (X-User-ID header or service name)
    actor = models.CharField(max_length=100, blank=True, default="")
    action = models.CharField(max_length=50)  # create, update, post, pay
    object_type = models.CharField(max_length=100)  # "Bill", "BillPayment"
    object_id = models.CharField(max_length=100)
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "created_at"], name="audit_company_created_idx"),
            models.Index(fields=["object_type", "object_id"], name="audit_object_idx"),
        ]
        ordering = ("-created_at",)

    def __str__(self):
        return f"{self.actor or 'system'} {self.action} {self.object_type}({self.object_id})"
