import datetime
from decimal import Decimal

from django.utils.text import slugify

from books_core.models import Account, BankAccount, Company, TaxCode, Vendor
from books_core.services import create_bill, seed_chart_of_accounts


class BooksFixtureMixin:
    """Seeded company with a vendor, a bank account and the GST codes."""

    bill_date = datetime.date(2025, 4, 10)

    def create_books(self, name="Test Co"):
        company = Company.objects.create(name=name, slug=slugify(name))
        seed_chart_of_accounts(company)
        return company

    def setUp(self):
        super().setUp()
        self.company = self.create_books()
        self.rent = Account.objects.get(company=self.company, code="9200")
        self.supplies = Account.objects.get(company=self.company, code="9500")
        self.ap = Account.objects.get(company=self.company, code="3101")
        self.bank_ledger = Account.objects.get(company=self.company, code="1111")
        self.gst18 = TaxCode.objects.get(company=self.company, code="GST18")
        self.gst5 = TaxCode.objects.get(company=self.company, code="GST5")
        self.vendor = Vendor.objects.create(
            company=self.company, code="V001", name="Acme Supplies"
        )
        self.bank = BankAccount.objects.create(
            company=self.company, name="HDFC Current", ledger_account=self.bank_ledger
        )

    def line(self, unit_price="1000", quantity="1", tax_code=None, account=None, **extra):
        return {
            "account": account or self.rent,
            "quantity": Decimal(quantity),
            "unit_price": Decimal(unit_price),
            "tax_code": tax_code,
            **extra,
        }

    def make_bill(self, number="INV-1", lines=None, **header):
        header.setdefault("vendor", self.vendor)
        header.setdefault("bill_date", self.bill_date)
        header["bill_number"] = number
        if lines is None:
            lines = [self.line(tax_code=self.gst18)]
        return create_bill(self.company, header, lines)
