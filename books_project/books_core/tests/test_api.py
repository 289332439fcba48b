import json
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse

from books_core.models import Bill, JournalEntry

from .utils import BooksFixtureMixin


class ApiTestCase(BooksFixtureMixin, TestCase):

    def setUp(self):
        super().setUp()
        cache.clear()

    def call(self, method, name, body=None, tenant=True, **kwargs):
        url = reverse(f"books_core:{name}", kwargs=kwargs.pop("url_kwargs", None))
        headers = {"HTTP_X_TENANT_ID": self.company.slug} if tenant else {}
        headers.update(kwargs)
        if body is not None:
            return getattr(self.client, method)(
                url, data=json.dumps(body), content_type="application/json", **headers
            )
        return getattr(self.client, method)(url, **headers)

    def bill_payload(self, number="INV-100", **extra):
        return {
            "vendor": self.vendor.pk,
            "bill_number": number,
            "bill_date": "2025-04-10",
            "lines": [{
                "description": "April rent",
                "account": self.rent.pk,
                "quantity": "1",
                "unit_price": "1000",
                "tax_code": self.gst18.pk,
            }],
            **extra,
        }


class BillApiTests(ApiTestCase):

    def test_tenant_header_is_required(self):
        response = self.call("get", "bills", tenant=False)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {
            "success": False,
            "error": {"code": "TENANT_REQUIRED",
                      "message": "Send a known company in the X-Tenant-ID header"},
        })

    def test_create_bill(self):
        response = self.call("post", "bills", self.bill_payload(), HTTP_X_USER_NAME="asha")
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body["success"])
        data = body["data"]
        self.assertEqual(data["status"], "draft")
        self.assertEqual(data["total_amount"], "1180.00")
        self.assertEqual(data["due_date"], "2025-05-10")
        self.assertEqual(len(data["lines"]), 1)
        self.assertEqual(data["lines"][0]["cgst_amount"], "90.00")

    def test_create_bill_without_lines(self):
        response = self.call("post", "bills", self.bill_payload(lines=[]))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "NO_LINES")

    def test_invalid_line_names_the_field(self):
        payload = self.bill_payload()
        payload["lines"][0]["quantity"] = "0"
        response = self.call("post", "bills", payload)
        error = response.json()["error"]
        self.assertEqual(error["code"], "VALIDATION_ERROR")
        self.assertIn("lines.1.quantity", error["message"])

    def test_malformed_json(self):
        response = self.client.post(
            reverse("books_core:bills"), data="{not json", content_type="application/json",
            HTTP_X_TENANT_ID=self.company.slug,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")

    def test_list_filters_by_status(self):
        posted = self.make_bill("INV-1")
        self.make_bill("INV-2")
        self.call("post", "bill-post", url_kwargs={"bill_id": posted.pk})

        response = self.call("get", "bills", None)
        self.assertEqual(len(response.json()["data"]), 2)

        response = self.client.get(
            reverse("books_core:bills"), {"status": "posted"}, HTTP_X_TENANT_ID=self.company.slug
        )
        self.assertEqual([b["bill_number"] for b in response.json()["data"]], ["INV-1"])

    def test_post_bill_twice(self):
        bill = self.make_bill()
        first = self.call("post", "bill-post", url_kwargs={"bill_id": bill.pk})
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()["data"]["status"], "posted")

        second = self.call("post", "bill-post", url_kwargs={"bill_id": bill.pk})
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.json()["error"]["code"], "ALREADY_POSTED")
        self.assertEqual(JournalEntry.objects.count(), 1)

    def test_missing_bill(self):
        response = self.call("post", "bill-post", url_kwargs={"bill_id": 424242})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["code"], "NOT_FOUND")

    def test_patch_draft_keeps_unsent_fields(self):
        bill = self.make_bill()
        response = self.call("patch", "bill-detail", {"notes": "checked"},
                             url_kwargs={"bill_id": bill.pk})
        self.assertEqual(response.status_code, 200)
        bill.refresh_from_db()
        self.assertEqual(bill.notes, "checked")
        self.assertEqual(bill.total_amount, Decimal("1180.00"))

    def test_delete_posted_bill_is_refused(self):
        bill = self.make_bill()
        self.call("post", "bill-post", url_kwargs={"bill_id": bill.pk})
        response = self.call("delete", "bill-detail", url_kwargs={"bill_id": bill.pk})
        self.assertEqual(response.json()["error"]["code"], "NOT_DRAFT")
        self.assertTrue(Bill.objects.filter(pk=bill.pk).exists())

    def test_wrong_method(self):
        response = self.call("put", "bills", {})
        self.assertEqual(response.status_code, 405)


class PaymentApiTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.bill = self.make_bill()
        self.call("post", "bill-post", url_kwargs={"bill_id": self.bill.pk})

    def pay(self, amount, **extra):
        return self.call("post", "bill-payments", {
            "bill_id": self.bill.pk,
            "payment_date": "2025-05-01",
            "amount": amount,
            "bank_account": self.bank.pk,
            **extra,
        })

    def test_partial_payment(self):
        response = self.pay("500.00")
        self.assertEqual(response.status_code, 201)
        data = response.json()["data"]
        self.assertEqual(data["bill_status"], "partial")
        self.assertEqual(data["balance_due"], "680.00")
        self.assertIsNotNone(data["journal_entry_id"])

        entry = self.call("get", "journal-entry", url_kwargs={"entry_id": data["journal_entry_id"]})
        lines = entry.json()["data"]["lines"]
        self.assertEqual([(l["account_code"], l["debit_amount"], l["credit_amount"]) for l in lines], [
            ("3101", "500.00", "0.00"),
            ("1111", "0.00", "500.00"),
        ])

    def test_overpayment(self):
        response = self.pay("2000.00")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "OVERPAYMENT")

    def test_zero_amount_is_invalid(self):
        response = self.pay("0")
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")

    def test_payment_on_draft_bill(self):
        draft = self.make_bill("INV-2")
        response = self.call("post", "bill-payments", {
            "bill_id": draft.pk, "payment_date": "2025-05-01", "amount": "10",
        })
        self.assertEqual(response.json()["error"]["code"], "NOT_POSTED")

    def test_list_payments_for_bill(self):
        self.pay("100")
        response = self.client.get(
            reverse("books_core:bill-payments"), {"bill": self.bill.pk},
            HTTP_X_TENANT_ID=self.company.slug,
        )
        self.assertEqual(len(response.json()["data"]), 1)


class ReferenceDataApiTests(ApiTestCase):

    def test_create_account_defaults_normal_balance(self):
        response = self.call("post", "accounts", {"code": "9600", "name": "Travel", "ac_type": "expense"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["normal_balance"], "debit")

    def test_duplicate_account_code(self):
        response = self.call("post", "accounts", {"code": "9200", "name": "Rent again", "ac_type": "expense"})
        self.assertEqual(response.status_code, 400)
        self.assertIn(response.json()["error"]["code"], ("DUPLICATE_CODE", "VALIDATION_ERROR"))

    def test_deactivate_account_hides_it_from_new_bills(self):
        response = self.call("post", "account-deactivate", url_kwargs={"account_id": self.rent.pk})
        self.assertFalse(response.json()["data"]["is_active"])

        response = self.call("post", "bills", self.bill_payload())
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")

    def test_filter_accounts_by_type(self):
        response = self.client.get(
            reverse("books_core:accounts"), {"ac_type": "liability"},
            HTTP_X_TENANT_ID=self.company.slug,
        )
        types = {a["ac_type"] for a in response.json()["data"]}
        self.assertEqual(types, {"liability"})

    def test_gst_calculation(self):
        response = self.call("post", "tax-calculate", {"amount": "1000", "rate": "18"})
        data = response.json()["data"]
        self.assertEqual(data["cgst_amount"], "90.00")
        self.assertEqual(data["total_amount"], "1180.00")

    def test_gst_calculation_needs_rate_or_code(self):
        response = self.call("post", "tax-calculate", {"amount": "1000"})
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")

    def test_create_vendor(self):
        response = self.call("post", "vendors", {"code": "V002", "name": "Beta Traders"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["payment_terms_days"], 30)


class ReportApiTests(ApiTestCase):

    def test_trial_balance_balances(self):
        bill = self.make_bill()
        self.call("post", "bill-post", url_kwargs={"bill_id": bill.pk})
        data = self.call("get", "trial-balance").json()["data"]
        self.assertTrue(data["is_balanced"])
        self.assertEqual(data["total_debit"], "1180.00")

    def test_aging_rejects_bad_date(self):
        response = self.client.get(
            reverse("books_core:bill-aging"), {"as_of_date": "soon"},
            HTTP_X_TENANT_ID=self.company.slug,
        )
        self.assertEqual(response.json()["error"]["code"], "VALIDATION_ERROR")


class RecordLockApiTests(ApiTestCase):

    def test_lock_conflict_and_release(self):
        body = {"entity_type": "bill", "entity_id": "12", "user_id": "u1", "user_name": "Asha"}
        self.assertEqual(self.call("post", "record-locks", body).status_code, 200)

        response = self.call("post", "record-locks", {**body, "user_id": "u2", "user_name": "Ravi"})
        self.assertEqual(response.status_code, 409)
        error = response.json()["error"]
        self.assertEqual(error["code"], "RECORD_LOCKED")
        self.assertEqual(error["locked_by"]["user_name"], "Asha")

        self.call("delete", "record-lock-release",
                  url_kwargs={"entity_type": "bill", "entity_id": "12"})
        self.assertEqual(self.call("get", "record-locks").json()["data"], [])
