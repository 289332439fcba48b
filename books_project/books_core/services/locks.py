"""Advisory "someone is editing this" locks.

Locks live in the Django cache with a TTL, so an abandoned lock expires on
its own and every worker process sees the same set. The stored
``expires_at`` is checked as well as the cache timeout; backends without
expiry (or a clock patched in tests) still treat stale locks as free.
"""
import datetime
import logging

from django.conf import settings
from django.core.cache import caches
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from ..exceptions import RecordLocked, ValidationFailed

logger = logging.getLogger(__name__)


class RecordLockStore:
    key_prefix = "books:lock"

    def __init__(self, cache_alias="default", ttl=None):
        self.cache = caches[cache_alias]
        self.ttl = int(ttl if ttl is not None else settings.BOOKS_RECORD_LOCK_TTL)

    def _key(self, company, entity_type, entity_id):
        return f"{self.key_prefix}:{company.pk}:{entity_type}:{entity_id}"

    def _index_key(self, company):
        return f"{self.key_prefix}:{company.pk}:index"

    def _is_live(self, lock, now):
        if not lock:
            return False
        return parse_datetime(lock["expires_at"]) > now

    def _remember(self, company, key):
        index = set(self.cache.get(self._index_key(company)) or ())
        index.add(key)
        self.cache.set(self._index_key(company), sorted(index), timeout=None)

    def acquire(self, company, entity_type, entity_id, user_id=None, user_name=None):
        """Take or refresh a lock; RecordLocked if another user holds it."""
        if not entity_type or entity_id in (None, ""):
            raise ValidationFailed("entity_type and entity_id are required")

        now = timezone.now()
        key = self._key(company, entity_type, entity_id)
        lock = {
            "entity_type": entity_type,
            "entity_id": str(entity_id),
            "user_id": str(user_id or "anonymous"),
            "user_name": user_name,
            "locked_at": now.isoformat(),
            "expires_at": (now + datetime.timedelta(seconds=self.ttl)).isoformat(),
        }

        if not self.cache.add(key, lock, timeout=self.ttl):
            existing = self.cache.get(key)
            if self._is_live(existing, now) and existing["user_id"] != lock["user_id"]:
                logger.info(
                    "%s %s is locked by %s", entity_type, entity_id, existing["user_id"]
                )
                raise RecordLocked(existing)
            self.cache.set(key, lock, timeout=self.ttl)

        self._remember(company, key)
        return lock

    def release(self, company, entity_type, entity_id):
        key = self._key(company, entity_type, entity_id)
        self.cache.delete(key)
        index = set(self.cache.get(self._index_key(company)) or ())
        if key in index:
            index.discard(key)
            self.cache.set(self._index_key(company), sorted(index), timeout=None)

    def active_locks(self, company):
        """Unexpired locks for the company; expired keys are pruned."""
        now = timezone.now()
        index = self.cache.get(self._index_key(company)) or []
        found = self.cache.get_many(index)
        live = {k: v for k, v in found.items() if self._is_live(v, now)}

        stale = [k for k in index if k not in live]
        if stale:
            self.cache.delete_many(stale)
            self.cache.set(self._index_key(company), sorted(live), timeout=None)
        return sorted(live.values(), key=lambda lock: lock["locked_at"])


def get_lock_store():
    return RecordLockStore()
