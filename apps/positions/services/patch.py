"""
Field-level patch for positions.

``PATCHABLE_FIELDS`` names every field a PATCH may set together with the kind
of value it takes. A patch is checked against the table before anything is
touched: unknown names and values of the wrong JSON type are rejected as a
whole, then the merged record is validated with ``PositionForm`` and saved.
"""

from __future__ import annotations

from typing import Any

from django.forms.models import model_to_dict

from apps.positions.forms import PositionForm, form_errors
from apps.positions.ingestion.mapping import COLUMN_MAPPING, CellKind
from apps.positions.models import Position

PATCHABLE_FIELDS: dict[str, CellKind] = {
    spec.field_name: spec.kind for spec in COLUMN_MAPPING
}


class PatchValidationError(ValueError):
    """Raised when a patch names unknown fields or carries invalid values."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []


def _accepts(kind: CellKind, value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if kind == CellKind.STRING:
        return isinstance(value, (str, int))
    if kind == CellKind.DECIMAL:
        return isinstance(value, (str, int, float))
    if kind == CellKind.INTEGER:
        return isinstance(value, (str, int))
    if kind == CellKind.DATETIME:
        return isinstance(value, str)
    return False


def validate_patch(changes: dict[str, Any]) -> None:
    """
    Check a patch against ``PATCHABLE_FIELDS``.

    Raises:
        PatchValidationError: Listing unknown fields, or fields whose value
            has the wrong JSON type.
    """
    if not isinstance(changes, dict):
        raise PatchValidationError("Patch body must be a JSON object")

    unknown = sorted(name for name in changes if name not in PATCHABLE_FIELDS)
    if unknown:
        raise PatchValidationError(
            f"Unknown fields: {', '.join(unknown)}", fields=unknown
        )

    mistyped = sorted(
        name
        for name, value in changes.items()
        if not _accepts(PATCHABLE_FIELDS[name], value)
    )
    if mistyped:
        raise PatchValidationError(
            f"Invalid value type for: {', '.join(mistyped)}", fields=mistyped
        )


def apply_patch(position: Position, changes: dict[str, Any]) -> Position:
    """
    Apply ``changes`` to ``position`` and save it.

    Only the named fields change; every other field keeps its stored value.
    Nothing is modified if any field fails validation.

    Raises:
        PatchValidationError: If the patch is rejected.
    """
    validate_patch(changes)

    data = model_to_dict(position, exclude=["position_import"])
    data.update(changes)
    form = PositionForm(data, instance=position)
    if not form.is_valid():
        raise PatchValidationError(form_errors(form), fields=sorted(form.errors))
    return form.save()
