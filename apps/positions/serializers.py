"""
JSON representations of positions and import runs.

Values are left as Python objects; ``JsonResponse`` encodes Decimal as a
string and datetimes as ISO-8601.
"""

from __future__ import annotations

from typing import Any, Iterable

from apps.positions.models import Position, PositionImport

POSITION_FIELDS = tuple(field.attname for field in Position._meta.concrete_fields)


def serialize_position(position: Position) -> dict[str, Any]:
    return {name: getattr(position, name) for name in POSITION_FIELDS}


def serialize_positions(positions: Iterable[Position]) -> list[dict[str, Any]]:
    return [serialize_position(position) for position in positions]


def serialize_import(position_import: PositionImport) -> dict[str, Any]:
    return {
        "id": position_import.id,
        "file_name": position_import.file_name,
        "status": position_import.status,
        "clear_existing": position_import.clear_existing,
        "rows_total": position_import.rows_total,
        "rows_imported": position_import.rows_imported,
        "rows_skipped": position_import.rows_skipped,
        "count_before": position_import.count_before,
        "count_after": position_import.count_after,
        "error_message": position_import.error_message,
        "created_at": position_import.created_at,
        "completed_at": position_import.completed_at,
    }
