from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models
from ..managers import TenantManager
from .account import Account
from .company import Company

gstin_validator = RegexValidator(
    r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$",
    message="Invalid GSTIN format",
    code="INVALID_GSTIN",
)
pan_validator = RegexValidator(
    r"^[A-Z]{5}[0-9]{4}[A-Z]$",
    message="Invalid PAN format",
    code="INVALID_PAN",
)


class Vendor(models.Model):  # Supplier we owe money to (Accounts Payable)

    company = models.ForeignKey(Company, on_delete=models.CASCADE)

    code = models.CharField(max_length=30)
    name = models.CharField(max_length=200)
    gstin = models.CharField(
        max_length=15, blank=True, default="", validators=[gstin_validator]
    )
    pan = models.CharField(
        max_length=10, blank=True, default="", validators=[pan_validator]
    )
    email = models.EmailField(blank=True, default="")
    payment_terms_days = models.PositiveIntegerField(default=30)

    # Pre-selected expense account for lines on this vendor's bills
    default_expense_account = models.ForeignKey(
        Account,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="vendors_default_expense",
    )
    is_active = models.BooleanField(default=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "name"], name="vendor_company_name_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_vendor_code"
            ),
        ]
        ordering = ("company", "name")

    def __str__(self):
        return self.name

    def clean(self):
        acct = self.default_expense_account
        if acct and acct.company_id != self.company_id:
            raise ValidationError(
                "Default expense account and vendor must belong to same company"
            )
        if acct and acct.ac_type != "expense":
            raise ValidationError("Default expense account must be an expense account")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
