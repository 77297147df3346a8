"""
Audit trail for position imports and clears.
"""

from __future__ import annotations

from apps.audit.models import AuditEvent
from libs.choices import AuditAction


def record_import_event(result, source: str, file_name: str | None = None, actor=None) -> AuditEvent:
    """
    Record a finished import run.

    Args:
        result: ImportResult of the run.
        source: What triggered the run ('api', 'command' or 'task').
        file_name: Source file name.
        actor: User who triggered the run, if known.
    """
    return AuditEvent.record(
        AuditAction.POSITIONS_IMPORTED,
        object_type="PositionImport",
        object_id=result.import_id,
        object_repr=file_name,
        metadata={"source": source, **result.to_dict()},
        actor=actor,
    )


def record_clear_event(deleted: int, source: str, actor=None) -> AuditEvent:
    return AuditEvent.record(
        AuditAction.POSITIONS_CLEARED,
        object_type="Position",
        metadata={"source": source, "deleted": deleted},
        actor=actor,
    )
