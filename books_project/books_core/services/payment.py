import logging

from django.db import transaction

# Import models
from ..exceptions import NotPosted, Overpayment, ValidationFailed
from ..models import BillPayment
from . import events
from .audit_helper import log_action
from .bills import get_bill
from .posting import post_payment_journal

logger = logging.getLogger(__name__)

PAYMENT_FIELDS = (
    "payment_date", "amount", "payment_method", "bank_account",
    "reference_number", "cheque_number", "notes", "tds_amount", "tds_section",
)


# ----------------------------
# Payment-related workflows
# ----------------------------
def record_payment(company, bill_id, data, actor="") -> BillPayment:
    """
    Apply a payment to a posted bill.
    Locks the bill row during the operation; writes the payment, its
    journal entry and the new bill balance, or nothing at all.
    """
    amount = data.get("amount")
    if amount is None or amount <= 0:
        raise ValidationFailed("Payment amount must be positive")

    with transaction.atomic():
        # Lock the bill row until the transaction finishes
        bill = get_bill(company, bill_id, for_update=True)

        if bill.is_draft:
            raise NotPosted(f"Bill {bill.bill_number} is still a draft")

        # Validation: prevent over-allocation
        if amount > bill.balance_due:
            raise Overpayment(
                f"Payment {amount} exceeds balance due {bill.balance_due}"
            )

        payment = BillPayment.objects.create(
            company=company,
            bill=bill,
            **{f: data[f] for f in PAYMENT_FIELDS if data.get(f) is not None},
        )

        je = post_payment_journal(payment)
        if je is not None:
            payment.journal_entry = je
            payment.save(update_fields=["journal_entry"])

        # Update bill balance and status
        bill.apply_payment(amount)
        bill.save(update_fields=["amount_paid", "balance_due", "status", "updated_at"])

        # AUDIT LOGS
        log_action(
            action="record_payment",
            instance=payment,
            actor=actor,
            changes={
                "bill_id": bill.pk,
                "amount": str(amount),
                "tds_amount": str(payment.tds_amount),
            },
        )
        log_action(
            action="update",
            instance=bill,
            actor=actor,
            changes={
                "balance_due": str(bill.balance_due),
                "status": bill.status,
            },
        )

        events.publish_envelope(events.PAYMENT_CREATED, company, {
            "payment_id": payment.pk,
            "bill_id": bill.pk,
            "bill_number": bill.bill_number,
            "amount": payment.amount,
            "tds_amount": payment.tds_amount,
            "bill_status": bill.status,
            "balance_due": bill.balance_due,
            "journal_entry_id": payment.journal_entry_id,
        })

    logger.info(
        "Recorded payment %s on bill %s; balance %s (%s)",
        payment.pk, bill.bill_number, bill.balance_due, bill.status,
    )
    return payment
