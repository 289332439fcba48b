import datetime
from unittest import mock

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone

from books_core.exceptions import RecordLocked, ValidationFailed
from books_core.models import Company
from books_core.services import RecordLockStore

NOW = timezone.make_aware(datetime.datetime(2025, 4, 10, 9, 0))


class RecordLockStoreTests(TestCase):

    def setUp(self):
        cache.clear()
        self.company = Company.objects.create(name="Lock Co", slug="lock-co")
        self.store = RecordLockStore(ttl=300)

    def at(self, moment):
        return mock.patch("books_core.services.locks.timezone.now", return_value=moment)

    def test_acquire_returns_lock_with_expiry(self):
        with self.at(NOW):
            lock = self.store.acquire(self.company, "bill", 7, user_id="u1", user_name="Asha")
        self.assertEqual(lock["entity_id"], "7")
        self.assertEqual(lock["user_name"], "Asha")
        self.assertEqual(lock["expires_at"], (NOW + datetime.timedelta(seconds=300)).isoformat())

    def test_second_user_is_refused(self):
        with self.at(NOW):
            self.store.acquire(self.company, "bill", 7, user_id="u1", user_name="Asha")
            with self.assertRaises(RecordLocked) as ctx:
                self.store.acquire(self.company, "bill", 7, user_id="u2")
        self.assertEqual(ctx.exception.status, 409)
        self.assertEqual(ctx.exception.as_dict()["locked_by"]["user_id"], "u1")
        self.assertIn("Asha", ctx.exception.message)

    def test_same_user_refreshes_lock(self):
        with self.at(NOW):
            self.store.acquire(self.company, "bill", 7, user_id="u1")
        later = NOW + datetime.timedelta(seconds=120)
        with self.at(later):
            lock = self.store.acquire(self.company, "bill", 7, user_id="u1")
        self.assertEqual(lock["locked_at"], later.isoformat())

    def test_expired_lock_can_be_taken_over(self):
        with self.at(NOW):
            self.store.acquire(self.company, "bill", 7, user_id="u1")
        with self.at(NOW + datetime.timedelta(seconds=301)):
            lock = self.store.acquire(self.company, "bill", 7, user_id="u2")
            self.assertEqual([l["user_id"] for l in self.store.active_locks(self.company)], ["u2"])
        self.assertEqual(lock["user_id"], "u2")

    def test_release_frees_the_record(self):
        with self.at(NOW):
            self.store.acquire(self.company, "bill", 7, user_id="u1")
            self.store.release(self.company, "bill", 7)
            self.assertEqual(self.store.active_locks(self.company), [])
            self.store.acquire(self.company, "bill", 7, user_id="u2")

    def test_active_locks_prunes_expired(self):
        with self.at(NOW):
            self.store.acquire(self.company, "bill", 1, user_id="u1")
        with self.at(NOW + datetime.timedelta(seconds=200)):
            self.store.acquire(self.company, "payment", 2, user_id="u1")
        with self.at(NOW + datetime.timedelta(seconds=400)):
            live = self.store.active_locks(self.company)
        self.assertEqual([(l["entity_type"], l["entity_id"]) for l in live], [("payment", "2")])

    def test_locks_are_per_company(self):
        other = Company.objects.create(name="Other", slug="other")
        with self.at(NOW):
            self.store.acquire(self.company, "bill", 7, user_id="u1")
            self.store.acquire(other, "bill", 7, user_id="u2")
            self.assertEqual(len(self.store.active_locks(other)), 1)

    def test_entity_is_required(self):
        with self.assertRaises(ValidationFailed):
            self.store.acquire(self.company, "", 7)
