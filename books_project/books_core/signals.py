from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import Account, Bill, JournalEntry, JournalLine, Period

"""Block bill deletion if any payments are recorded."""


@receiver(pre_delete, sender=Bill)
def prevent_delete_bill_with_payments(sender, instance, **kwargs):
    if instance.payments.exists():
        raise ValidationError("Cannot delete bill with recorded payments.")


"""Accounts are deactivated, never deleted once used."""


@receiver(pre_delete, sender=Account)
def prevent_delete_account_with_journal_lines(sender, instance, **kwargs):
    if JournalLine.objects.filter(account=instance).exists():
        raise ValidationError(
            "Cannot delete account used in journal lines; deactivate it instead.")


"""Block deletion if period has posted journals."""


@receiver(pre_delete, sender=Period)
def prevent_delete_period_with_posted_journals(sender, instance, **kwargs):
    if JournalEntry.objects.filter(period=instance, status="posted").exists():
        raise ValidationError(
            "Cannot delete a period with posted journal entries.")
