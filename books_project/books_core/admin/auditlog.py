from django.contrib import admin

from books_core.models import AuditLog, PublishedEvent

from .ReadOnly import ReadOnlyAdmin


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = ("created_at", "company", "actor", "action", "object_type", "object_id")
    search_fields = ("object_type", "object_id", "actor")


@admin.register(PublishedEvent)
class PublishedEventAdmin(ReadOnlyAdmin):
    list_display = ("occurred_at", "company", "subject", "event_id", "delivered_at")
    search_fields = ("event_id",)
