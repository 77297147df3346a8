"""
Django admin configuration for audit models.

AuditEvent is append-only: the admin is read-only.
"""

from __future__ import annotations

from django.contrib import admin

from apps.audit.models import AuditEvent


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ["action", "object_type", "object_id", "actor", "created_at"]
    list_filter = ["action", "object_type", "created_at"]
    search_fields = ["action", "object_type", "object_repr"]
    readonly_fields = [
        "actor",
        "action",
        "object_type",
        "object_id",
        "object_repr",
        "metadata",
        "created_at",
    ]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        """Audit events are append-only."""
        return False
