"""
Shared choices/constants used across multiple Django apps.

This module provides common TextChoices and constants that are used
by multiple apps to ensure consistency and avoid duplication.

Key principles:
- Only include choices that are used by 2+ apps
- Keep choices generic enough to be reusable
- Document when choices are app-specific vs shared
"""

from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class ImportStatus(models.TextChoices):
    """
    Import status choices for file imports.

    Used by:
    - PositionImport (positions app)
    - AuditEvent metadata for import runs (audit app)

    Status flow:
    PENDING → PROCESSING → SUCCESS/FAILED/PARTIAL
    """

    PENDING = "pending", _("Pending")
    PROCESSING = "processing", _("Processing")
    SUCCESS = "success", _("Success")
    FAILED = "failed", _("Failed")
    PARTIAL = "partial", _("Partial")  # Some rows imported, some rejected


class AuditAction(models.TextChoices):
    """
    Audited operations.

    Used by:
    - AuditEvent (audit app)
    - Position import and clear operations (positions app)
    """

    POSITIONS_IMPORTED = "POSITIONS_IMPORTED", _("Positions imported")
    POSITIONS_CLEARED = "POSITIONS_CLEARED", _("Positions cleared")
