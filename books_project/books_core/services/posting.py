from decimal import Decimal

from django.db import transaction

# Import models
from ..models import Bill, BillPayment, JournalEntry, JournalLine
from ..tax import ZERO
from .chart import posting_account
from .periods import resolve_period

# (bill field, posting role, line label)
TAX_COMPONENTS = (
    ("cgst_amount", "input_cgst", "Input CGST"),
    ("sgst_amount", "input_sgst", "Input SGST"),
    ("igst_amount", "input_igst", "Input IGST"),
    ("cess_amount", "input_cess", "Input cess"),
)


def bill_entry_number(bill: Bill) -> str:
    return f"JE-BILL-{bill.bill_number}"


def payment_entry_number(payment: BillPayment) -> str:
    return f"JE-PMT-{payment.pk}"


# ----------------------------
# Bill posting
# ----------------------------
def post_bill_journal(bill: Bill) -> JournalEntry:
    """
    Create & post the purchase JE for a bill.
    Produces:
      Debit: line account = line net amount (one line per bill line)
      Debit: input CGST / SGST / IGST / cess = bill tax components
      Credit: Accounts Payable = bill total
    Every account is resolved before anything is written, so a missing
    account leaves no partial entry behind.
    """
    ap_account = posting_account(bill.company, "accounts_payable")
    tax_accounts = {
        role: posting_account(bill.company, role)
        for field, role, _ in TAX_COMPONENTS
        if getattr(bill, field) > ZERO
    }
    period = resolve_period(bill.company, bill.bill_date)

    with transaction.atomic():
        je = JournalEntry.objects.create(
            company=bill.company,
            period=period,
            entry_number=bill_entry_number(bill),
            entry_type="AP",
            entry_date=bill.bill_date,
            description=f"Purchase bill {bill.bill_number} from {bill.vendor.name}",
            reference_type="bill",
            reference_id=bill.pk,
        )
        # Debit expense per line
        for line in bill.lines.select_related("account"):
            if line.net_amount == ZERO:
                continue
            JournalLine.objects.create_for_entry(
                je,
                account=line.account,
                description=line.description or f"Bill {bill.bill_number} line {line.line_number}",
                debit_amount=line.net_amount,
            )
        # Debit input tax, one line per component
        for field, role, label in TAX_COMPONENTS:
            amount = getattr(bill, field)
            if amount > ZERO:
                JournalLine.objects.create_for_entry(
                    je,
                    account=tax_accounts[role],
                    description=f"{label} on bill {bill.bill_number}",
                    debit_amount=amount,
                )
        # Credit AP (single line)
        JournalLine.objects.create_for_entry(
            je,
            account=ap_account,
            description=f"Payable to {bill.vendor.name}",
            credit_amount=bill.total_amount,
        )
        # Post (this runs the balance check)
        je.post()
    return je


# ----------------------------
# Payment posting
# ----------------------------
def post_payment_journal(payment: BillPayment) -> JournalEntry:
    """
    Create & post the payment JE: debit AP, credit the bank for the net
    amount and TDS payable for the withheld tax.
    Returns None when the payment has no bank account to credit.
    """
    if payment.bank_account_id is None:
        return None

    company = payment.company
    ap_account = posting_account(company, "accounts_payable")
    tds_account = None
    if payment.tds_amount > ZERO:
        tds_account = posting_account(company, "tds_payable")
    bank_ledger = payment.bank_account.ledger_account
    period = resolve_period(company, payment.payment_date)
    bill = payment.bill

    with transaction.atomic():
        je = JournalEntry.objects.create(
            company=company,
            period=period,
            entry_number=payment_entry_number(payment),
            entry_type="PMT",
            entry_date=payment.payment_date,
            description=f"Payment for bill {bill.bill_number}",
            reference_type="payment",
            reference_id=payment.pk,
        )
        JournalLine.objects.create_for_entry(
            je,
            account=ap_account,
            description=f"Clear payable for bill {bill.bill_number}",
            debit_amount=payment.amount,
        )
        net = payment.amount - payment.tds_amount
        if net > Decimal("0.00"):
            JournalLine.objects.create_for_entry(
                je,
                account=bank_ledger,
                description=f"Paid from {payment.bank_account.name}",
                credit_amount=net,
            )
        if tds_account is not None:
            JournalLine.objects.create_for_entry(
                je,
                account=tds_account,
                description=f"TDS {payment.tds_section} withheld".replace("  ", " "),
                credit_amount=payment.tds_amount,
            )
        je.post()
    return je
