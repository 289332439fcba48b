from django.db import models
from .company import Company


class PublishedEvent(models.Model):
    """Outbox row for an envelope delivered by the publish task.

    Other services read these instead of sharing our tables.
    """

    company = models.ForeignKey(
        Company, null=True, blank=True, on_delete=models.SET_NULL
    )
    event_id = models.UUIDField(unique=True)
    subject = models.CharField(max_length=100)  # "accounting.bill.posted"
    payload = models.JSONField()
    occurred_at = models.DateTimeField()
    delivered_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["subject", "occurred_at"], name="event_subject_idx"),
        ]
        ordering = ("-occurred_at",)

    def __str__(self):
        return f"{self.subject} {self.event_id}"
