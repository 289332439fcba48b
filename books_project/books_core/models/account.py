from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .company import Company

# Choice Lists
AC_TYPES = [
    # Used in Account model to classify general ledger accounts
    ("asset", "Asset"),
    ("liability", "Liability"),
    ("equity", "Equity"),
    ("revenue", "Revenue"),
    ("expense", "Expense"),
]

# Define whether the account normally increases
# on the debit side or credit side
NORMAL_BALANCE = [
    ("debit", "Debit"),
    ("credit", "Credit"),
]

# Assets/Expenses → Debit, Liabilities/Equity/Revenue → Credit
DEFAULT_NORMAL_BALANCE = {
    "asset": "debit",
    "expense": "debit",
    "liability": "credit",
    "equity": "credit",
    "revenue": "credit",
}


class Account(models.Model):
    """
    Ledger account in the Chart of Accounts.
    - code is unique per company
    - ac_type: determines reporting - BS vs P&L
    - normal_balance: used to interpret sign when building reports
    Accounts are never deleted, only deactivated.
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # e.g. "3101" Trade Payables, "1501" Input CGST
    code = models.CharField(max_length=20)
    name = models.CharField(max_length=200)

    ac_type = models.CharField(max_length=10, choices=AC_TYPES)
    normal_balance = models.CharField(
        max_length=6, choices=NORMAL_BALANCE, blank=True
    )

    # Optional hierarchy (1500 Input GST → 1501 Input CGST)
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        # you can’t delete a parent if children exist
        on_delete=models.PROTECT,
        related_name="children",
    )

    # Header accounts group others and never take postings
    is_header = models.BooleanField(default=False)
    # “soft deactivate” accounts (stop new postings) without losing history
    is_active = models.BooleanField(default=True)
    # marker for accounts that must reconcile with subledgers (AP)
    is_control_account = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "ac_type"], name="acct_company_type_idx"),
            models.Index(fields=["company", "code"], name="acct_company_code_idx"),
        ]
        # Codes repeat across companies but must be unique within one
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_account_code"
            )
        ]
        ordering = ("company", "code")

    def __str__(self):
        return f"{self.code} – {self.name}"

    def clean(self):
        if self.parent and self.parent.company_id != self.company_id:
            raise ValidationError(
                "Parent & child accounts must belong to the same company"
            )

    def save(self, *args, **kwargs):
        if not self.normal_balance:
            self.normal_balance = DEFAULT_NORMAL_BALANCE.get(self.ac_type, "debit")
        self.full_clean()
        return super().save(*args, **kwargs)

    def deactivate(self):
        self.is_active = False
        self.save(update_fields=["is_active"])

    def accepts_postings(self):
        return self.is_active and not self.is_header
