import datetime
from decimal import Decimal

from django.test import TestCase

from books_core.exceptions import (AlreadyPosted, NotDraft, NotFound, NotPosted,
                                   Overpayment, StateConflict, ValidationFailed)
from books_core.models import AuditLog, Bill, BillPayment, JournalEntry, Period
from books_core.services import (delete_bill, post_bill, record_payment,
                                 update_bill)

from .utils import BooksFixtureMixin


class BillDraftTests(BooksFixtureMixin, TestCase):

    def test_create_bill_prices_lines_and_totals(self):
        bill = self.make_bill()
        bill.refresh_from_db()

        self.assertEqual(bill.status, "draft")
        self.assertEqual(bill.subtotal, Decimal("1000.00"))
        self.assertEqual(bill.cgst_amount, Decimal("90.00"))
        self.assertEqual(bill.sgst_amount, Decimal("90.00"))
        self.assertEqual(bill.igst_amount, Decimal("0.00"))
        self.assertEqual(bill.total_amount, Decimal("1180.00"))
        self.assertEqual(bill.balance_due, Decimal("1180.00"))
        # vendor default terms are 30 days
        self.assertEqual(bill.due_date, self.bill_date + datetime.timedelta(days=30))

    def test_bill_needs_at_least_one_line(self):
        with self.assertRaises(ValidationFailed) as ctx:
            self.make_bill(lines=[])
        self.assertEqual(ctx.exception.code, "NO_LINES")
        self.assertFalse(Bill.objects.exists())

    def test_duplicate_bill_number_rejected(self):
        self.make_bill("INV-1")
        with self.assertRaises(ValidationFailed) as ctx:
            self.make_bill("INV-1")
        self.assertEqual(ctx.exception.code, "DUPLICATE_BILL_NUMBER")

    def test_interstate_bill_uses_igst(self):
        bill = self.make_bill(is_interstate=True)
        self.assertEqual(bill.igst_amount, Decimal("180.00"))
        self.assertEqual(bill.cgst_amount + bill.sgst_amount, Decimal("0.00"))

    def test_update_draft_replaces_lines(self):
        bill = self.make_bill()
        update_bill(
            self.company, bill.pk, {"notes": "revised"},
            lines=[self.line("200", tax_code=self.gst5), self.line("300", account=self.supplies)],
        )
        bill.refresh_from_db()
        self.assertEqual(bill.lines.count(), 2)
        self.assertEqual(bill.subtotal, Decimal("500.00"))
        self.assertEqual(bill.total_tax, Decimal("10.00"))
        self.assertEqual(bill.notes, "revised")

    def test_delete_draft(self):
        bill = self.make_bill()
        delete_bill(self.company, bill.pk)
        self.assertFalse(Bill.objects.filter(pk=bill.pk).exists())


class BillPostingTests(BooksFixtureMixin, TestCase):

    def test_posting_writes_balanced_journal(self):
        bill = post_bill(self.company, self.make_bill().pk)
        bill.refresh_from_db()

        self.assertEqual(bill.status, "posted")
        self.assertIsNotNone(bill.posted_at)
        je = bill.journal_entry
        self.assertEqual(je.entry_number, "JE-BILL-INV-1")
        self.assertEqual(je.status, "posted")

        lines = list(je.lines.values_list("account__code", "debit_amount", "credit_amount"))
        self.assertEqual(lines, [
            ("9200", Decimal("1000.00"), Decimal("0.00")),
            ("1501", Decimal("90.00"), Decimal("0.00")),
            ("1502", Decimal("90.00"), Decimal("0.00")),
            ("3101", Decimal("0.00"), Decimal("1180.00")),
        ])
        self.assertTrue(je.is_balanced())

    def test_posting_twice_is_rejected_without_second_entry(self):
        bill = self.make_bill()
        post_bill(self.company, bill.pk)

        with self.assertRaises(AlreadyPosted) as ctx:
            post_bill(self.company, bill.pk)
        self.assertEqual(ctx.exception.code, "ALREADY_POSTED")
        self.assertEqual(ctx.exception.status, 409)
        self.assertEqual(JournalEntry.objects.filter(reference_type="bill").count(), 1)

    def test_post_missing_bill(self):
        with self.assertRaises(NotFound):
            post_bill(self.company, 999999)

    def test_posted_bill_cannot_be_edited_or_deleted(self):
        bill = post_bill(self.company, self.make_bill().pk)
        with self.assertRaises(NotDraft):
            update_bill(self.company, bill.pk, {"notes": "late edit"})
        with self.assertRaises(NotDraft):
            delete_bill(self.company, bill.pk)

    def test_closed_period_blocks_posting(self):
        Period.objects.create(
            company=self.company, name="FY25-04",
            start_date=datetime.date(2025, 4, 1), end_date=datetime.date(2025, 4, 30),
            is_closed=True,
        )
        bill = self.make_bill()
        with self.assertRaises(StateConflict) as ctx:
            post_bill(self.company, bill.pk)
        self.assertEqual(ctx.exception.code, "PERIOD_CLOSED")

        bill.refresh_from_db()
        self.assertEqual(bill.status, "draft")
        self.assertFalse(JournalEntry.objects.exists())

    def test_longest_bill_number_can_be_posted(self):
        number = "X" * 64
        bill = post_bill(self.company, self.make_bill(number).pk)
        bill.refresh_from_db()
        self.assertEqual(bill.status, "posted")
        self.assertEqual(bill.journal_entry.entry_number, f"JE-BILL-{number}")

    def test_zero_value_bill_cannot_be_posted(self):
        bill = self.make_bill(lines=[self.line("0", tax_code=self.gst18)])
        with self.assertRaises(ValidationFailed) as ctx:
            post_bill(self.company, bill.pk)
        self.assertEqual(ctx.exception.code, "ZERO_TOTAL")

        bill.refresh_from_db()
        self.assertEqual(bill.status, "draft")
        self.assertFalse(JournalEntry.objects.exists())

    def test_open_period_is_attached_to_the_journal(self):
        period = Period.objects.create(
            company=self.company, name="FY25-04",
            start_date=datetime.date(2025, 4, 1), end_date=datetime.date(2025, 4, 30),
        )
        bill = post_bill(self.company, self.make_bill().pk)
        self.assertEqual(bill.journal_entry.period, period)

    def test_posting_is_audited(self):
        bill = post_bill(self.company, self.make_bill().pk, actor="asha")
        self.assertTrue(
            AuditLog.objects.filter(action="post", object_id=str(bill.pk), actor="asha").exists()
        )


class BillPaymentTests(BooksFixtureMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.bill = post_bill(self.company, self.make_bill().pk)

    def pay(self, amount, **extra):
        data = {
            "payment_date": datetime.date(2025, 5, 1),
            "amount": Decimal(amount),
            "bank_account": self.bank,
            **extra,
        }
        return record_payment(self.company, self.bill.pk, data)

    def test_partial_then_full_payment(self):
        self.pay("500")
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.status, "partial")
        self.assertEqual(self.bill.balance_due, Decimal("680.00"))

        self.pay("680")
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.status, "paid")
        self.assertEqual(self.bill.balance_due, Decimal("0.00"))
        self.assertEqual(self.bill.amount_paid, Decimal("1180.00"))

    def test_full_payment_scenario(self):
        payment = self.pay("1180")
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.status, "paid")

        je = payment.journal_entry
        self.assertEqual(je.entry_number, f"JE-PMT-{payment.pk}")
        lines = list(je.lines.values_list("account__code", "debit_amount", "credit_amount"))
        self.assertEqual(lines, [
            ("3101", Decimal("1180.00"), Decimal("0.00")),
            ("1111", Decimal("0.00"), Decimal("1180.00")),
        ])

    def test_overpayment_rejected_and_nothing_written(self):
        with self.assertRaises(Overpayment) as ctx:
            self.pay("1180.01")
        self.assertEqual(ctx.exception.code, "OVERPAYMENT")

        self.assertFalse(BillPayment.objects.exists())
        self.assertEqual(JournalEntry.objects.count(), 1)  # the bill's own entry
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.status, "posted")
        self.assertEqual(self.bill.balance_due, Decimal("1180.00"))

    def test_paying_a_paid_bill_is_an_overpayment(self):
        self.pay("1180")
        with self.assertRaises(Overpayment):
            self.pay("1")

    def test_payment_on_draft_bill_rejected(self):
        draft = self.make_bill("INV-2")
        with self.assertRaises(NotPosted) as ctx:
            record_payment(self.company, draft.pk, {
                "payment_date": datetime.date(2025, 5, 1), "amount": Decimal("10"),
            })
        self.assertEqual(ctx.exception.code, "NOT_POSTED")

    def test_tds_is_credited_to_tds_payable(self):
        payment = self.pay("1180", tds_amount=Decimal("100"), tds_section="194C")
        lines = list(payment.journal_entry.lines.values_list("account__code", "debit_amount", "credit_amount"))
        self.assertEqual(lines, [
            ("3101", Decimal("1180.00"), Decimal("0.00")),
            ("1111", Decimal("0.00"), Decimal("1080.00")),
            ("3300", Decimal("0.00"), Decimal("100.00")),
        ])
        self.assertEqual(payment.net_amount, Decimal("1080.00"))

    def test_payment_without_bank_account_has_no_journal(self):
        payment = record_payment(self.company, self.bill.pk, {
            "payment_date": datetime.date(2025, 5, 1),
            "amount": Decimal("100"),
            "payment_method": "cash",
        })
        self.assertIsNone(payment.journal_entry)
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.status, "partial")

    def test_every_posted_entry_balances(self):
        self.pay("300")
        self.pay("880", tds_amount=Decimal("20"))
        for je in JournalEntry.objects.filter(status="posted"):
            debit, credit = je.compute_totals()
            self.assertEqual(debit, credit, je.entry_number)
