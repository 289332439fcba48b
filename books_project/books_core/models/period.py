from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Period (accounting period) ----------
class Period(models.Model):
    """A date range whose books can be closed.

    Periods are optional: a posting whose date falls in no period is
    accepted, one that falls in a closed period is rejected.
    """

    company = models.ForeignKey(Company, on_delete=models.PROTECT)
    name = models.CharField(max_length=50)  # "FY2025-04"
    start_date = models.DateField()
    end_date = models.DateField()
    # No new postings once closed
    is_closed = models.BooleanField(default=False)

    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "start_date"], name="period_company_start_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_period_name"
            ),
        ]
        ordering = ("company", "start_date")

    def __str__(self):
        return f"{self.company.slug} {self.name}"

    def clean(self):
        if self.start_date >= self.end_date:
            raise ValidationError("start_date must be before end_date")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
