import logging

from celery import shared_task
from django.utils.dateparse import parse_datetime

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def deliver_envelope(envelope):
    """Persist a published envelope to the outbox table."""
    # import models lazily to avoid circular imports at module import time
    from .models import Company, PublishedEvent

    company = None
    if envelope.get("tenant"):
        company = Company.objects.filter(slug=envelope["tenant"]).first()

    event, created = PublishedEvent.objects.get_or_create(
        event_id=envelope["id"],
        defaults={
            "company": company,
            "subject": envelope["subject"],
            "payload": envelope["data"],
            "occurred_at": parse_datetime(envelope["occurred_at"]),
        },
    )
    if created:
        logger.info("Published %s %s", event.subject, event.event_id)
    return str(event.event_id)
