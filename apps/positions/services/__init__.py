"""
Position services package.

Store queries used by the importer, views and analytics, and the
field-level patch applied by the API.
"""

from apps.positions.services.patch import PATCHABLE_FIELDS, PatchValidationError, apply_patch
from apps.positions.services.positions import (
    bulk_insert_positions,
    clear_all_positions,
    existing_position_count,
)

__all__ = [
    "PATCHABLE_FIELDS",
    "PatchValidationError",
    "apply_patch",
    "bulk_insert_positions",
    "clear_all_positions",
    "existing_position_count",
]
