import json

import pytest
from django.core.exceptions import ValidationError
from django.test import TestCase

from books_core.exceptions import NotFound
from books_core.models import Account, Bill, Company
from books_core.services import get_bill, seed_chart_of_accounts

from .utils import BooksFixtureMixin


class TenantIsolationManagerTests(BooksFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.other = self.create_books("Other Co")
        self.bill_a = self.make_bill("A-1")

    def test_for_company_returns_only_that_company_objects(self):
        """Both companies were seeded with the same chart"""
        codes_a = set(Account.objects.for_company(self.company).values_list("pk", flat=True))
        codes_b = set(Account.objects.for_company(self.other).values_list("pk", flat=True))
        self.assertTrue(codes_a)
        self.assertFalse(codes_a & codes_b)

        self.assertListEqual(
            list(Bill.objects.for_company(self.company).values_list("pk", flat=True)),
            [self.bill_a.pk],
        )
        self.assertFalse(Bill.objects.for_company(self.other).exists())

    def test_get_other_company_object_raises_not_found(self):
        # `for_company` shouldn't return the other company's record
        with self.assertRaises(Bill.DoesNotExist):
            Bill.objects.for_company(self.other).get(pk=self.bill_a.pk)
        with self.assertRaises(NotFound):
            get_bill(self.other, self.bill_a.pk)

    def test_bill_line_cannot_use_other_company_account(self):
        foreign_rent = Account.objects.get(company=self.other, code="9200")
        with self.assertRaises(ValidationError):
            self.make_bill("A-2", lines=[self.line(account=foreign_rent)])
        self.assertFalse(Bill.objects.filter(bill_number="A-2").exists())


@pytest.mark.django_db
def test_bill_list_returns_only_tenant_data(client):
    c1 = Company.objects.create(name="Company A", slug="com-a")
    c2 = Company.objects.create(name="Company B", slug="com-b")
    seed_chart_of_accounts(c1)
    seed_chart_of_accounts(c2)

    helper = BooksFixtureMixin()
    for company, number in ((c1, "C1-BILL"), (c2, "C2-BILL")):
        helper.company = company
        helper.rent = Account.objects.get(company=company, code="9200")
        helper.vendor = company.vendor_set.create(code="V1", name=f"{company.name} vendor")
        helper.make_bill(number, lines=[helper.line("100")])

    # the tenant comes from the X-Tenant-ID header
    response = client.get("/api/bills", HTTP_X_TENANT_ID="com-a")
    data = json.loads(response.content)

    assert data["success"] is True
    numbers = [b["bill_number"] for b in data["data"]]
    assert "C1-BILL" in numbers  # available in c1 request
    assert "C2-BILL" not in numbers  # not available in c2 request


@pytest.mark.django_db
def test_api_rejects_other_tenant_references(client):
    c1 = Company.objects.create(name="Company A", slug="com-a")
    c2 = Company.objects.create(name="Company B", slug="com-b")
    seed_chart_of_accounts(c1)
    seed_chart_of_accounts(c2)
    vendor = c1.vendor_set.create(code="V1", name="Vendor")
    foreign_account = Account.objects.get(company=c2, code="9200")

    response = client.post(
        "/api/bills",
        data=json.dumps({
            "vendor": vendor.pk,
            "bill_number": "X-1",
            "bill_date": "2025-04-10",
            "lines": [{"account": foreign_account.pk, "quantity": "1", "unit_price": "10"}],
        }),
        content_type="application/json",
        HTTP_X_TENANT_ID=str(c1.pk),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert not Bill.objects.exists()
