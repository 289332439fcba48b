from decimal import Decimal
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from ..managers import TenantManager
from .company import Company

TAX_TYPES = [
    ("gst", "GST"),
    ("tds", "TDS"),
    ("tcs", "TCS"),
    ("custom", "Custom"),
]

PERCENT = [MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))]


class TaxCode(models.Model):
    """
    Tax rate reference data.
    Component rates are nullable: a NULL component falls back to the
    headline rate when a line is priced (see books_core.tax).
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    code = models.CharField(max_length=20)  # "GST18"
    name = models.CharField(max_length=255)
    tax_type = models.CharField(max_length=10, choices=TAX_TYPES, default="gst")

    rate = models.DecimalField(max_digits=6, decimal_places=3, validators=PERCENT)
    cgst_rate = models.DecimalField(
        max_digits=6, decimal_places=3, null=True, blank=True, validators=PERCENT
    )
    sgst_rate = models.DecimalField(
        max_digits=6, decimal_places=3, null=True, blank=True, validators=PERCENT
    )
    igst_rate = models.DecimalField(
        max_digits=6, decimal_places=3, null=True, blank=True, validators=PERCENT
    )
    cess_rate = models.DecimalField(
        max_digits=6, decimal_places=3, null=True, blank=True, validators=PERCENT
    )
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_tax_code"
            )
        ]
        ordering = ("company", "tax_type", "rate", "code")

    def __str__(self):
        return f"{self.code} ({self.rate}%)"

    def clean(self):
        # split rates of an intrastate GST code cannot exceed the headline rate
        if self.tax_type == "gst" and self.cgst_rate is not None and self.sgst_rate is not None:
            if self.cgst_rate + self.sgst_rate > self.rate:
                raise ValidationError("CGST + SGST cannot exceed the GST rate.")

    def save(self, *args, **kwargs):
        # Auto-fill CGST/SGST/IGST for new GST codes
        if not self.pk and self.tax_type == "gst" and self.rate and self.rate > 0:
            half = self.rate / 2
            if self.cgst_rate is None:
                self.cgst_rate = half
            if self.sgst_rate is None:
                self.sgst_rate = half
            if self.igst_rate is None:
                self.igst_rate = self.rate
        self.full_clean()
        return super().save(*args, **kwargs)
