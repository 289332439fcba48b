from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .account import Account
from .company import Company


class BankAccount(models.Model):
    """A bank account payments are drawn from.

    ``ledger_account`` is the asset Account in the chart of accounts that
    the payment journal credits.
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    name = models.CharField(max_length=200)
    account_number = models.CharField(max_length=34, blank=True, default="")
    ifsc = models.CharField(max_length=11, blank=True, default="")
    ledger_account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="bank_accounts",
    )
    is_active = models.BooleanField(default=True)

    objects = TenantManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"], name="uq_company_bank_account_name"
            )
        ]

    def __str__(self):
        return self.name

    def clean(self):
        # tenant safety: ledger account must be ours
        if self.ledger_account_id and self.ledger_account.company_id != self.company_id:
            raise ValidationError(
                "BankAccount.ledger_account must belong to the same company."
            )
        if self.ledger_account_id and self.ledger_account.ac_type != "asset":
            raise ValidationError("Bank ledger account must be an asset account.")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
