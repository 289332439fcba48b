import datetime
from decimal import Decimal

from django.conf import settings
from django.test import TestCase, override_settings

from books_core.exceptions import ConfigurationError
from books_core.models import Account, Bill, JournalEntry, TaxCode
from books_core.services import post_bill, posting_account, record_payment

from .utils import BooksFixtureMixin


def accounts_with(**overrides):
    return {**settings.BOOKS_POSTING_ACCOUNTS, **overrides}


class PostingAccountTests(BooksFixtureMixin, TestCase):

    def test_resolves_configured_codes(self):
        self.assertEqual(posting_account(self.company, "accounts_payable"), self.ap)
        self.assertEqual(posting_account(self.company, "input_cgst").code, "1501")

    def test_missing_ap_account_blocks_posting(self):
        bill = self.make_bill()
        with override_settings(BOOKS_POSTING_ACCOUNTS=accounts_with(accounts_payable="2999")):
            with self.assertRaises(ConfigurationError) as ctx:
                post_bill(self.company, bill.pk)

        self.assertEqual(ctx.exception.code, "NO_AP_ACCOUNT")
        self.assertEqual(ctx.exception.status, 400)
        bill.refresh_from_db()
        self.assertEqual(bill.status, "draft")
        self.assertFalse(JournalEntry.objects.exists())

    def test_missing_tax_account_is_an_error_not_a_dropped_line(self):
        bill = self.make_bill()
        with override_settings(BOOKS_POSTING_ACCOUNTS=accounts_with(input_sgst="1599")):
            with self.assertRaises(ConfigurationError) as ctx:
                post_bill(self.company, bill.pk)
        self.assertEqual(ctx.exception.code, "NO_TAX_ACCOUNT")
        self.assertFalse(JournalEntry.objects.exists())

    def test_untaxed_bill_does_not_need_tax_accounts(self):
        bill = self.make_bill(lines=[self.line("250")])
        with override_settings(BOOKS_POSTING_ACCOUNTS=accounts_with(input_cgst=None, input_sgst=None)):
            post_bill(self.company, bill.pk)
        bill.refresh_from_db()
        self.assertEqual(bill.journal_entry.lines.count(), 2)

    def test_inactive_ap_account(self):
        self.ap.deactivate()
        bill = self.make_bill()
        with self.assertRaises(ConfigurationError) as ctx:
            post_bill(self.company, bill.pk)
        self.assertEqual(ctx.exception.code, "INACTIVE_ACCOUNT")

    def test_missing_tds_account(self):
        bill = post_bill(self.company, self.make_bill().pk)
        Account.objects.filter(company=self.company, code="3300").update(is_active=False)
        with self.assertRaises(ConfigurationError):
            record_payment(self.company, bill.pk, {
                "payment_date": datetime.date(2025, 5, 1),
                "amount": Decimal("1180"),
                "bank_account": self.bank,
                "tds_amount": Decimal("50"),
            })
        bill.refresh_from_db()
        self.assertEqual(bill.balance_due, Decimal("1180.00"))
        self.assertEqual(bill.payments.count(), 0)


class PostingLayoutTests(BooksFixtureMixin, TestCase):

    def test_tax_lines_are_aggregated_per_component(self):
        bill = self.make_bill(lines=[
            self.line("1000", tax_code=self.gst18),
            self.line("200", tax_code=self.gst5, account=self.supplies),
        ])
        bill = post_bill(self.company, bill.pk)
        lines = list(bill.journal_entry.lines.values_list("account__code", "debit_amount", "credit_amount"))
        self.assertEqual(lines, [
            ("9200", Decimal("1000.00"), Decimal("0.00")),
            ("9500", Decimal("200.00"), Decimal("0.00")),
            ("1501", Decimal("95.00"), Decimal("0.00")),
            ("1502", Decimal("95.00"), Decimal("0.00")),
            ("3101", Decimal("0.00"), Decimal("1390.00")),
        ])

    def test_cess_posts_to_input_cess(self):
        cess_code = TaxCode.objects.create(
            company=self.company, code="GST28C", name="GST 28% + cess 12%",
            rate=Decimal("28"), cess_rate=Decimal("12"),
        )
        bill = post_bill(self.company, self.make_bill(lines=[self.line("1000", tax_code=cess_code)]).pk)
        je = bill.journal_entry
        self.assertTrue(je.lines.filter(account__code="1504", debit_amount=Decimal("120.00")).exists())
        self.assertTrue(je.is_balanced())
        self.assertEqual(Bill.objects.get(pk=bill.pk).total_amount, Decimal("1400.00"))
