"""
Audit log for destructive and bulk operations on positions.

Key components:
- AuditEvent: Append-only entry recording who ran an import or a clear-all,
  when, and with which counters
"""

from __future__ import annotations

from typing import Any

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from libs.choices import AuditAction


class AuditEvent(models.Model):
    """
    Append-only audit entry.

    Attributes:
        actor (User, optional): User who performed the action (None for
            commands, tasks and the unauthenticated API).
        action (str): One of ``AuditAction``.
        object_type (str): Type of object affected (e.g. 'PositionImport', 'Position').
        object_id (int, optional): ID of the affected object.
        object_repr (str, optional): String representation of the affected object.
        metadata (dict): Counters and flags of the operation.
        created_at (datetime): When the event occurred.

    Example:
        >>> AuditEvent.record(
        ...     AuditAction.POSITIONS_CLEARED,
        ...     object_type="Position",
        ...     metadata={"deleted": 1250, "source": "api"},
        ... )

    Note:
        Never update or delete audit events.
    """

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="audit_events",
        verbose_name=_("Actor"),
        help_text="User who performed this action (None for system/automated actions).",
    )
    action = models.CharField(
        _("Action"),
        max_length=100,
        choices=AuditAction.choices,
        db_index=True,
    )
    object_type = models.CharField(_("Object Type"), max_length=100, db_index=True)
    object_id = models.IntegerField(_("Object ID"), blank=True, null=True)
    object_repr = models.CharField(
        _("Object Representation"), max_length=255, blank=True, null=True
    )
    metadata = models.JSONField(_("Metadata"), default=dict, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("Audit Event")
        verbose_name_plural = _("Audit Events")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["action", "object_type"], name="idx_audit_action_type"),
            models.Index(fields=["object_type", "object_id"], name="idx_audit_object"),
        ]

    def __str__(self) -> str:
        actor_str = self.actor.get_username() if self.actor else "SYSTEM"
        obj_str = (
            f"{self.object_type}#{self.object_id}"
            if self.object_id
            else self.object_type
        )
        return f"{actor_str} {self.action} {obj_str} at {self.created_at}"

    @classmethod
    def record(
        cls,
        action: str,
        object_type: str,
        object_id: int | None = None,
        object_repr: str | None = None,
        metadata: dict[str, Any] | None = None,
        actor=None,
    ) -> "AuditEvent":
        """Create an audit event."""
        return cls.objects.create(
            actor=actor,
            action=action,
            object_type=object_type,
            object_id=object_id,
            object_repr=(object_repr or "")[:255] or None,
            metadata=metadata or {},
        )
