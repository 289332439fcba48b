from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.utils import timezone
from ..exceptions import UnbalancedJournalError
from ..managers import JournalLineManager, TenantManager
from .account import Account
from .company import Company
from .period import Period

JOURNAL_STATUS = [
    ("draft", "Draft"),  # lines still being written
    ("posted", "Posted"),  # finalized, immutable
]

ENTRY_TYPES = [
    ("AP", "Accounts payable"),  # bill posting
    ("PMT", "Payment"),  # bill payment
]

REFERENCE_TYPES = [
    ("bill", "Bill"),
    ("payment", "Payment"),
]


# ---------- Journal (Header) & JournalLine ----------
class JournalEntry(models.Model):  # One balanced accounting transaction
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # Optional link to an accounting period (for closing)
    period = models.ForeignKey(
        Period,
        null=True,
        blank=True,
        on_delete=models.PROTECT,  # Prevent breaking historical ledger
    )
    entry_number = models.CharField(max_length=72)  # "JE-BILL-" + bill number
    entry_type = models.CharField(max_length=5, choices=ENTRY_TYPES)
    entry_date = models.DateField()
    description = models.TextField(blank=True, default="")
    status = models.CharField(max_length=10, choices=JOURNAL_STATUS, default="draft")
    posted_at = models.DateTimeField(null=True, blank=True)

    # polymorphic source info: where the entry originated
    reference_type = models.CharField(max_length=20, choices=REFERENCE_TYPES)
    reference_id = models.BigIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        verbose_name_plural = "journal entries"
        indexes = [
            models.Index(fields=["company", "entry_date"], name="je_company_date_idx"),
            models.Index(fields=["company", "status"], name="je_company_status_idx"),
            models.Index(fields=["company", "reference_type", "reference_id"], name="je_company_ref_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "entry_number"], name="uq_je_company_number"
            )
        ]

    def __str__(self):
        return f"{self.entry_number} {self.entry_date} [{self.status}]"

    # Aggregate all debit and credit amounts across entry’s lines
    def compute_totals(self):
        """Return (debits, credits) summed from the stored lines."""
        aggs = self.lines.aggregate(
            total_debit=models.Sum("debit_amount"),
            total_credit=models.Sum("credit_amount"),
        )
        return (
            aggs["total_debit"] or Decimal("0.00"),
            aggs["total_credit"] or Decimal("0.00"),
        )

    # True if double-entry rule holds: total debits = total credits
    def is_balanced(self):
        debit, credit = self.compute_totals()
        return debit == credit

    @transaction.atomic
    def post(self):
        """Validate and finalize the entry.

        Raises UnbalancedJournalError when debits and credits differ, in
        which case the caller's transaction rolls back every line.
        """
        if self.status == "posted":
            raise ValidationError("Journal entry is already posted.")

        if not self.lines.exists():  # Prevent posting an empty entry
            raise ValidationError(
                "JournalEntry must have at least one JournalLine.")

        # Recompute totals fresh from DB & ignore any stale cached values
        td, tc = self.compute_totals()
        if td != tc:
            raise UnbalancedJournalError(
                f"Journal not balanced: debits={td}, credits={tc}"
            )

        if self.period and self.period.is_closed:
            raise ValidationError("Period is closed")

        self.status = "posted"
        self.posted_at = timezone.now()
        self.save(update_fields=["status", "posted_at"])
        return self

    def clean(self):
        # tenant safety: period must belong to the journal company
        if self.period and self.period.company_id != self.company_id:
            raise ValidationError(
                "Period must belong to the same company as journal"
            )

    def save(self, *args, **kwargs):
        if self.pk:  # Does this row already exist in DB?
            orig = JournalEntry.objects.filter(pk=self.pk).first()
            # posted entries never go back to draft
            if orig and orig.status == "posted" and self.status != "posted":
                raise ValidationError("Cannot unpost a posted journal")
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        if self.status == "posted":
            raise ValidationError("Cannot delete a posted journal entry.")
        return super().delete(*args, **kwargs)


class JournalLine(models.Model):  # Stores Lines ( credits / debits )
    """Each line belongs to a journal entry and to one GL account."""

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )
    line_number = models.PositiveIntegerField()

    # can’t delete account if lines exist → PROTECT
    account = models.ForeignKey(Account, on_delete=models.PROTECT, related_name="journal_lines")
    description = models.CharField(max_length=400, blank=True, default="")

    debit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    objects = JournalLineManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "account"], name="jl_company_account_idx"),
            models.Index(fields=["company", "journal_entry"], name="jl_company_entry_idx"),
        ]
        ordering = ("journal_entry", "line_number")

        # debits and credits are non-negative and exactly one side is set
        constraints = [
            models.UniqueConstraint(
                fields=["journal_entry", "line_number"], name="uq_jl_entry_line_number"
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(debit_amount__gte=0) &
                    models.Q(credit_amount__gte=0)
                ),
                name="jl_non_negative_amounts",
            ),
            models.CheckConstraint(
                condition=~(models.Q(debit_amount=0) &
                            models.Q(credit_amount=0)),
                name="jl_debit_or_credit_nonzero",
            ),
        ]

    def __str__(self):
        return (
            f"{self.journal_entry_id} | {self.account.code} {self.account.name} "
            f"| D:{self.debit_amount} C:{self.credit_amount}"
        )

    def clean(self):
        if self.debit_amount < 0 or self.credit_amount < 0:
            raise ValidationError("Debit and credit must be >= 0")
        if self.debit_amount > 0 and self.credit_amount > 0:
            raise ValidationError(
                "JournalLine should not have both debit and credit > 0"
            )
        if self.debit_amount == 0 and self.credit_amount == 0:
            raise ValidationError(
                "JournalLine requires a non-0 amount on either debit or credit"
            )

        # Every line must belong to same company as its parent journal
        if self.journal_entry_id and self.company_id != self.journal_entry.company_id:
            raise ValidationError(
                "JournalLine.company must equal JournalEntry.company"
            )
        if self.account_id:
            if self.account.company_id != self.company_id:
                raise ValidationError("JournalLine.account must belong to the same company.")
            if not self.account.accepts_postings():
                raise ValidationError(
                    f"Account {self.account.code} cannot receive postings."
                )

        # Lines of a posted journal are frozen
        if self.journal_entry_id and self.journal_entry.status == "posted":
            raise ValidationError("Cannot add or change lines of a posted journal.")

    def delete(self, *args, **kwargs):
        if self.journal_entry.status == "posted":
            raise ValidationError(
                "Cannot delete JournalLine: parent JournalEntry is posted."
            )
        return super().delete(*args, **kwargs)

    def save(self, *args, **kwargs):
        if not self.company_id and self.journal_entry_id:
            self.company_id = self.journal_entry.company_id
        self.full_clean()
        return super().save(*args, **kwargs)
