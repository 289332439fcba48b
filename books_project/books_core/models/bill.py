from decimal import Decimal
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from ..managers import TenantManager
from ..tax import ZERO, price_line
from .account import Account
from .company import Company
from .tax import TaxCode
from .vendor import Vendor

BILL_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("posted", "Posted"),
    ("partial", "Partially paid"),
    ("paid", "Paid"),
]

# Current state vs. allowed next states
ALLOWED_TRANSITIONS = {
    "draft": ["posted"],
    "posted": ["partial", "paid"],
    "partial": ["partial", "paid"],
    "paid": [],
}

# Fields frozen once a bill leaves draft
IMMUTABLE_AFTER_POSTING = (
    "vendor_id",
    "bill_number",
    "bill_date",
    "is_interstate",
    "subtotal",
    "total_tax",
    "total_amount",
)


def money_field(**kwargs):
    kwargs.setdefault("default", Decimal("0.00"))
    return models.DecimalField(max_digits=18, decimal_places=2, **kwargs)


# ---------- Bills / BillLines ----------
class Bill(models.Model):
    """Vendor bill (Accounts Payable document).

    Lifecycle: draft → posted → {partial, paid}. Totals are derived from the
    lines and may only change while the bill is a draft; after posting only
    the payment-driven fields (amount_paid, balance_due, status) move.
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # prevent deleting a vendor who has bills
    vendor = models.ForeignKey(Vendor, on_delete=models.PROTECT, related_name="bills")

    # Vendor’s bill/invoice number (e.g. "INV-4567")
    bill_number = models.CharField(max_length=64)
    bill_date = models.DateField()
    # when payment is expected
    due_date = models.DateField(null=True, blank=True)
    reference_number = models.CharField(max_length=64, blank=True, default="")
    # Place of supply differs from ours → IGST instead of CGST+SGST
    is_interstate = models.BooleanField(default=False)
    notes = models.TextField(blank=True, default="")

    status = models.CharField(
        max_length=10, choices=BILL_STATUS_CHOICES, default="draft"
    )

    # Header totals, kept in sync with lines by recalc_totals()
    subtotal = money_field()
    cgst_amount = money_field()
    sgst_amount = money_field()
    igst_amount = money_field()
    cess_amount = money_field()
    total_tax = money_field()
    total_amount = money_field()
    amount_paid = money_field()
    balance_due = money_field()

    # Set by the ledger poster
    journal_entry = models.OneToOneField(
        "JournalEntry",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="bill",
    )
    posted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "vendor"], name="bill_company_vendor_idx"),
            models.Index(fields=["company", "status"], name="bill_company_status_idx"),
            models.Index(fields=["company", "bill_date"], name="bill_company_date_idx"),
        ]
        constraints = [
            # Within one company, each bill number must be unique
            models.UniqueConstraint(
                fields=["company", "bill_number"], name="uq_bill_company_number"
            ),
            models.CheckConstraint(
                condition=models.Q(balance_due__gte=0),
                name="bill_balance_due_non_negative",
            ),
        ]
        ordering = ("-bill_date", "-created_at")

    def __str__(self):
        return f"Bill: {self.bill_number or self.pk}"

    @property
    def is_draft(self):
        return self.status == "draft"

    def recalc_totals(self):
        """Recompute header totals from the stored line amounts."""
        lines = list(self.lines.all())
        self.subtotal = sum((ln.net_amount for ln in lines), ZERO)
        self.cgst_amount = sum((ln.cgst_amount for ln in lines), ZERO)
        self.sgst_amount = sum((ln.sgst_amount for ln in lines), ZERO)
        self.igst_amount = sum((ln.igst_amount for ln in lines), ZERO)
        self.cess_amount = sum((ln.cess_amount for ln in lines), ZERO)
        self.total_tax = (
            self.cgst_amount + self.sgst_amount + self.igst_amount + self.cess_amount
        )
        self.total_amount = self.subtotal + self.total_tax
        # amount_paid stays zero while drafting
        self.balance_due = self.total_amount - self.amount_paid

    def clean(self):
        if self.vendor_id and self.vendor.company_id != self.company_id:
            raise ValidationError("Vendor must belong to the same company.")
        if self.due_date and self.bill_date and self.due_date < self.bill_date:
            raise ValidationError("due_date cannot be before bill_date")
        if self.balance_due < 0:
            raise ValidationError("Balance due cannot be negative")

        # Posted bills are immutable except for payment-driven fields
        if self.pk:
            orig = Bill.objects.filter(pk=self.pk).first()
            if orig and orig.status != "draft":
                changed = [
                    f for f in IMMUTABLE_AFTER_POSTING
                    if getattr(orig, f) != getattr(self, f)
                ]
                if changed:
                    raise ValidationError(
                        f"Cannot modify {changed} on a {orig.status} bill."
                    )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.status != "draft":
            raise ValidationError("Only draft bills can be deleted.")
        return super().delete(*args, **kwargs)

    def transition_to(self, new_status):
        # Look up what states are allowed from current self.status
        if new_status not in ALLOWED_TRANSITIONS.get(self.status, []):
            raise ValidationError(
                f"Cannot go from {self.status} to {new_status}")
        self.status = new_status

    def apply_payment(self, amount):
        """Reduce balance_due by a payment and move to partial/paid.

        Caller holds the row lock and has already rejected overpayment.
        """
        self.amount_paid += amount
        self.balance_due = self.total_amount - self.amount_paid
        self.transition_to("paid" if self.balance_due == ZERO else "partial")


class BillLine(models.Model):
    """Priced detail line; owned by exactly one bill."""

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name="lines")
    line_number = models.PositiveIntegerField()
    description = models.CharField(max_length=400, blank=True, default="")

    # Expense (or asset/inventory) account debited when the bill posts
    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        help_text="Expense/purchase account for this line",
    )
    quantity = models.DecimalField(
        max_digits=14, decimal_places=4, default=Decimal("1"),
        validators=[MinValueValidator(Decimal("0.0001"))],
    )
    unit_price = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    discount_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    tax_code = models.ForeignKey(
        TaxCode, null=True, blank=True, on_delete=models.PROTECT
    )
    hsn_sac_code = models.CharField(max_length=8, blank=True, default="")

    # Derived by apply_pricing()
    discount_amount = money_field()
    net_amount = money_field()
    cgst_amount = money_field()
    sgst_amount = money_field()
    igst_amount = money_field()
    cess_amount = money_field()
    total_amount = money_field()

    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "bill"], name="bl_company_bill_idx"),
            models.Index(fields=["company", "account"], name="bl_company_account_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["bill", "line_number"], name="uq_bill_line_number"
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0) & models.Q(unit_price__gte=0),
                name="bl_non_negative_amounts",
            ),
        ]
        ordering = ("bill", "line_number")

    def __str__(self):
        return f"{self.bill_id}#{self.line_number} {self.description}"

    def apply_pricing(self):
        priced = price_line(
            self.quantity,
            self.unit_price,
            self.discount_percent,
            self.tax_code,
            self.bill.is_interstate,
        )
        self.discount_amount = priced.discount
        self.net_amount = priced.net
        self.cgst_amount = priced.tax.cgst
        self.sgst_amount = priced.tax.sgst
        self.igst_amount = priced.tax.igst
        self.cess_amount = priced.tax.cess
        self.total_amount = priced.total

    def clean(self):
        if self.bill_id and self.bill.company_id != self.company_id:
            raise ValidationError("BillLine.company must match Bill.company")
        if self.account_id:
            if self.account.company_id != self.company_id:
                raise ValidationError("BillLine.company must match Account.company")
            if not self.account.accepts_postings():
                raise ValidationError(
                    f"Account {self.account.code} is inactive or a header account."
                )
        if self.tax_code_id:
            if self.tax_code.company_id != self.company_id:
                raise ValidationError("BillLine.company must match TaxCode.company")
            if not self.tax_code.is_active:
                raise ValidationError(f"Tax code {self.tax_code.code} is inactive.")

    def save(self, *args, **kwargs):
        # copy company from the parent bill
        if not self.company_id and self.bill_id:
            self.company_id = self.bill.company_id
        if self.bill_id and not self.bill.is_draft:
            raise ValidationError("Cannot change lines of a posted bill.")
        # Force derived amounts to be recomputed before save, regardless of input
        self.apply_pricing()
        self.full_clean()
        return super().save(*args, **kwargs)
