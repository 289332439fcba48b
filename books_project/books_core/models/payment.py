from decimal import Decimal
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from ..managers import TenantManager
from .banking import BankAccount
from .bill import Bill
from .company import Company

PAYMENT_METHODS = [
    ("bank_transfer", "Bank transfer"),
    ("cheque", "Cheque"),
    ("cash", "Cash"),
    ("upi", "UPI"),
    ("card", "Card"),
]


class BillPayment(models.Model):
    """One payment against one posted bill.

    ``amount`` is the gross settlement of the payable; the bank is credited
    ``amount - tds_amount`` and the withheld TDS goes to TDS payable.
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    bill = models.ForeignKey(Bill, on_delete=models.PROTECT, related_name="payments")
    payment_date = models.DateField()
    amount = models.DecimalField(
        max_digits=18, decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    payment_method = models.CharField(
        max_length=20, choices=PAYMENT_METHODS, default="bank_transfer"
    )
    # Without a bank account no journal entry is written
    bank_account = models.ForeignKey(
        BankAccount, null=True, blank=True, on_delete=models.PROTECT,
        related_name="payments",
    )
    reference_number = models.CharField(max_length=64, blank=True, default="")
    cheque_number = models.CharField(max_length=20, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    tds_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    tds_section = models.CharField(max_length=10, blank=True, default="")

    journal_entry = models.OneToOneField(
        "JournalEntry",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="payment",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "bill"], name="bp_company_bill_idx"),
            models.Index(fields=["company", "payment_date"], name="bp_company_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0) & models.Q(tds_amount__gte=0),
                name="bp_positive_amounts",
            ),
        ]
        ordering = ("-payment_date", "-created_at")

    def __str__(self):
        return f"Payment {self.pk} → {self.bill} ({self.amount})"

    @property
    def net_amount(self):
        return self.amount - self.tds_amount

    def clean(self):
        if self.tds_amount > self.amount:
            raise ValidationError("TDS cannot exceed the payment amount.")
        if self.bill_id and self.bill.company_id != self.company_id:
            raise ValidationError("BillPayment.bill must belong to the same company.")
        ba = self.bank_account
        if ba and ba.company_id != self.company_id:
            raise ValidationError(
                "BillPayment.bank_account must belong to the same company."
            )
        if self.payment_method == "cheque" and not self.cheque_number:
            raise ValidationError("Cheque payments need a cheque number.")

    def save(self, *args, **kwargs):
        if not self.company_id and self.bill_id:
            self.company_id = self.bill.company_id
        self.full_clean()
        return super().save(*args, **kwargs)
