import datetime
import logging

from django.db import transaction
from django.utils import timezone

from ..exceptions import AlreadyPosted, NotDraft, NotFound, ValidationFailed
from ..models import Bill, BillLine
from . import events
from .audit_helper import log_action
from .posting import post_bill_journal

logger = logging.getLogger(__name__)

HEADER_FIELDS = (
    "vendor", "bill_number", "bill_date", "due_date",
    "reference_number", "is_interstate", "notes",
)
LINE_FIELDS = (
    "description", "account", "quantity", "unit_price",
    "discount_percent", "tax_code", "hsn_sac_code",
)


def get_bill(company, bill_id, for_update=False) -> Bill:
    qs = Bill.objects.for_company(company).select_related("vendor")
    if for_update:
        qs = qs.select_for_update()
    bill = qs.filter(pk=bill_id).first()
    if bill is None:
        raise NotFound("Bill not found")
    return bill


def _event_payload(bill):
    return {
        "bill_id": bill.pk,
        "bill_number": bill.bill_number,
        "vendor_id": bill.vendor_id,
        "status": bill.status,
        "total_amount": bill.total_amount,
        "balance_due": bill.balance_due,
        "journal_entry_id": bill.journal_entry_id,
    }


def _write_lines(bill, lines):
    """Replace the bill's lines and recompute its header totals."""
    bill.lines.all().delete()
    for number, data in enumerate(lines, start=1):
        BillLine.objects.create(
            bill=bill,
            company=bill.company,
            line_number=number,
            **{f: data[f] for f in LINE_FIELDS if f in data},
        )
    bill.recalc_totals()
    bill.save()


# ----------------------------
# Draft maintenance
# ----------------------------
def create_bill(company, data, lines, actor="") -> Bill:
    """
    Create a draft bill from cleaned header data and a list of line dicts.
    Lines are priced by the tax engine; header totals are their sums.
    """
    if not lines:
        raise ValidationFailed("A bill needs at least one line", code="NO_LINES")
    if Bill.objects.for_company(company).filter(bill_number=data["bill_number"]).exists():
        raise ValidationFailed(
            f"Bill number {data['bill_number']} already exists",
            code="DUPLICATE_BILL_NUMBER",
        )

    header = {f: data[f] for f in HEADER_FIELDS if f in data}
    vendor = header["vendor"]
    if not header.get("due_date"):
        header["due_date"] = header["bill_date"] + datetime.timedelta(
            days=vendor.payment_terms_days
        )

    with transaction.atomic():
        bill = Bill.objects.create(company=company, **header)
        _write_lines(bill, lines)
        log_action(action="create", instance=bill, actor=actor,
                   changes={"bill_number": bill.bill_number,
                            "total_amount": str(bill.total_amount)})
        events.publish_envelope(events.BILL_CREATED, company, _event_payload(bill))

    logger.info("Created bill %s for %s (%s)", bill.bill_number, company.slug, bill.total_amount)
    return bill


def update_bill(company, bill_id, data, lines=None, actor="") -> Bill:
    with transaction.atomic():
        bill = get_bill(company, bill_id, for_update=True)
        if not bill.is_draft:
            raise NotDraft(f"Bill {bill.bill_number} is {bill.status}")

        number = data.get("bill_number")
        if number and number != bill.bill_number:
            clash = Bill.objects.for_company(company).filter(bill_number=number)
            if clash.exclude(pk=bill.pk).exists():
                raise ValidationFailed(
                    f"Bill number {number} already exists",
                    code="DUPLICATE_BILL_NUMBER",
                )

        for field in HEADER_FIELDS:
            if field in data:
                setattr(bill, field, data[field])

        if lines is not None:
            if not lines:
                raise ValidationFailed("A bill needs at least one line", code="NO_LINES")
            _write_lines(bill, lines)
        else:
            # is_interstate may have changed the split
            for line in bill.lines.all():
                line.bill = bill
                line.save()
            bill.recalc_totals()
            bill.save()

        log_action(action="update", instance=bill, actor=actor,
                   changes={"total_amount": str(bill.total_amount)})
    return bill


def delete_bill(company, bill_id, actor=""):
    with transaction.atomic():
        bill = get_bill(company, bill_id, for_update=True)
        if not bill.is_draft:
            raise NotDraft(f"Bill {bill.bill_number} is {bill.status}")
        log_action(action="delete", instance=bill, actor=actor,
                   changes={"bill_number": bill.bill_number})
        bill.delete()


# ----------------------------
# Posting
# ----------------------------
def post_bill(company, bill_id, actor="") -> Bill:
    """
    draft → posted. Locks the bill row, writes the purchase journal and
    marks both the bill and the journal posted in one transaction.
    """
    with transaction.atomic():
        bill = get_bill(company, bill_id, for_update=True)
        if not bill.is_draft:
            raise AlreadyPosted(f"Bill {bill.bill_number} is already {bill.status}")
        if not bill.lines.exists():
            raise ValidationFailed("A bill needs at least one line", code="NO_LINES")
        if bill.total_amount <= 0:
            raise ValidationFailed("Bill total must be positive", code="ZERO_TOTAL")

        je = post_bill_journal(bill)

        bill.transition_to("posted")
        bill.journal_entry = je
        bill.posted_at = timezone.now()
        bill.save()

        log_action(action="post", instance=bill, actor=actor,
                   changes={"journal_entry": je.entry_number,
                            "total_amount": str(bill.total_amount)})
        events.publish_envelope(events.BILL_POSTED, company, _event_payload(bill))

    logger.info("Posted bill %s as %s", bill.bill_number, je.entry_number)
    return bill
