"""Fire-and-forget notifications about postings.

Envelopes are handed to Celery only after the surrounding transaction
commits, and a broker failure is logged rather than raised: the posting
that produced the event has already succeeded.
"""
import json
import logging
import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)

BILL_CREATED = "accounting.bill.created"
BILL_POSTED = "accounting.bill.posted"
PAYMENT_CREATED = "accounting.payment.created"


def build_envelope(subject, company, payload):
    return {
        "id": str(uuid.uuid4()),
        "subject": subject,
        "tenant": company.slug if company else None,
        "occurred_at": timezone.now().isoformat(),
        # Decimals and dates become strings so the envelope is plain JSON
        "data": json.loads(json.dumps(payload, cls=DjangoJSONEncoder)),
    }


def _dispatch(envelope):
    from ..tasks import deliver_envelope

    try:
        deliver_envelope.delay(envelope)
    except Exception:
        logger.warning(
            "Could not publish %s (%s)", envelope["subject"], envelope["id"],
            exc_info=True,
        )


def publish_envelope(subject, company, payload):
    envelope = build_envelope(subject, company, payload)
    transaction.on_commit(lambda: _dispatch(envelope))
    return envelope
