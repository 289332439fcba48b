import datetime
from decimal import Decimal
from unittest import mock

from django.test import TestCase

from books_core.exceptions import AlreadyPosted
from books_core.models import Bill, PublishedEvent
from books_core.services import post_bill, publish_envelope, record_payment
from books_core.services.events import BILL_CREATED, BILL_POSTED, PAYMENT_CREATED

from .utils import BooksFixtureMixin


class EventPublishingTests(BooksFixtureMixin, TestCase):

    def test_envelopes_are_published_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            bill = self.make_bill()
            post_bill(self.company, bill.pk)
            record_payment(self.company, bill.pk, {
                "payment_date": datetime.date(2025, 5, 1),
                "amount": Decimal("1180"),
                "bank_account": self.bank,
            })
        self.assertEqual(len(callbacks), 3)

        subjects = set(PublishedEvent.objects.values_list("subject", flat=True))
        self.assertEqual(subjects, {BILL_CREATED, BILL_POSTED, PAYMENT_CREATED})

        posted = PublishedEvent.objects.get(subject=BILL_POSTED)
        self.assertEqual(posted.company, self.company)
        self.assertEqual(posted.payload["bill_number"], "INV-1")
        self.assertEqual(posted.payload["total_amount"], "1180.00")

    def test_nothing_is_published_when_posting_fails(self):
        bill = self.make_bill()
        post_bill(self.company, bill.pk)
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(AlreadyPosted):
                post_bill(self.company, bill.pk)
        self.assertEqual(callbacks, [])

    def test_broker_failure_is_logged_not_raised(self):
        bill = self.make_bill()
        with mock.patch("books_core.tasks.deliver_envelope.delay",
                        side_effect=ConnectionError("broker down")):
            with self.assertLogs("books_core.services.events", level="WARNING") as logs:
                with self.captureOnCommitCallbacks(execute=True):
                    post_bill(self.company, bill.pk)

        self.assertIn(BILL_POSTED, logs.output[0])
        self.assertEqual(Bill.objects.get(pk=bill.pk).status, "posted")
        self.assertFalse(PublishedEvent.objects.exists())

    def test_redelivery_is_idempotent(self):
        from books_core.tasks import deliver_envelope

        with self.captureOnCommitCallbacks(execute=False):
            envelope = publish_envelope("accounting.test", self.company, {"n": Decimal("1.50")})
        self.assertEqual(envelope["data"], {"n": "1.50"})

        deliver_envelope(envelope)
        deliver_envelope(envelope)
        self.assertEqual(PublishedEvent.objects.filter(event_id=envelope["id"]).count(), 1)
