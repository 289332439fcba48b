from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from books_core.models import Account, BankAccount, Company, TaxCode, Vendor
from books_core.services.chart import DEFAULT_CHART


class SeedBooksCommandTests(TestCase):

    def run_command(self, *args):
        out = StringIO()
        call_command("seed_books", *args, stdout=out)
        return out.getvalue()

    def test_creates_company_with_chart(self):
        output = self.run_command("--company-name", "Acme Traders")
        company = Company.objects.get(slug="acme-traders")

        self.assertEqual(Account.objects.for_company(company).count(), len(DEFAULT_CHART))
        self.assertEqual(
            sorted(TaxCode.objects.for_company(company).values_list("code", flat=True)),
            ["GST0", "GST12", "GST18", "GST28", "GST5"],
        )
        self.assertIn("Seeded acme-traders", output)

    def test_seeded_tax_codes_split_evenly(self):
        self.run_command("--company-name", "Acme Traders")
        gst18 = TaxCode.objects.get(company__slug="acme-traders", code="GST18")
        self.assertEqual((gst18.cgst_rate, gst18.sgst_rate, gst18.igst_rate), (9, 9, 18))

    def test_payables_control_account(self):
        self.run_command("--company-name", "Acme Traders")
        ap = Account.objects.get(company__slug="acme-traders", code="3101")
        self.assertTrue(ap.is_control_account)
        self.assertEqual(ap.parent.code, "3100")
        self.assertTrue(ap.parent.is_header)

    def test_reseeding_is_idempotent(self):
        self.run_command("--company-name", "Acme Traders")
        output = self.run_command("--company", "acme-traders", "--with-demo")
        self.assertIn("0 new rows", output)
        self.assertEqual(Account.objects.filter(company__slug="acme-traders").count(), len(DEFAULT_CHART))
        self.assertTrue(Vendor.objects.filter(company__slug="acme-traders", code="V001").exists())
        self.assertTrue(BankAccount.objects.filter(company__slug="acme-traders").exists())

    def test_second_company_gets_unique_slug(self):
        self.run_command("--company-name", "Acme Traders")
        self.run_command("--company-name", "Acme Traders")
        self.assertTrue(Company.objects.filter(slug="acme-traders-1").exists())

    def test_unknown_company(self):
        with self.assertRaises(CommandError):
            self.run_command("--company", "nope")
