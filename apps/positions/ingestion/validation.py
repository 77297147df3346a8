"""
Row validation for position ingestion.

Runs after cell extraction. A row that breaks one of these rules is rejected
as a whole (counted as failed and recorded as a PositionImportError); the
import continues with the next row.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.db import models

from apps.positions.ingestion.mapping import REQUIRED_FIELDS
from apps.positions.models import Position

# IntegerField columns are 32-bit on every supported backend
INTEGER_MIN = -(2**31)
INTEGER_MAX = 2**31 - 1


class RowValidationError(ValueError):
    """Raised when an extracted row cannot become a Position."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


def _check_range(field: models.Field, value: Any) -> None:
    if isinstance(field, models.IntegerField) and isinstance(value, int):
        if not INTEGER_MIN <= value <= INTEGER_MAX:
            raise RowValidationError(
                f"{field.name} is out of range ({value})", code="VALUE_OUT_OF_RANGE"
            )
    elif isinstance(field, models.DecimalField) and isinstance(value, Decimal):
        integer_digits = field.max_digits - field.decimal_places
        if value and value.adjusted() + 1 > integer_digits:
            raise RowValidationError(
                f"{field.name} exceeds {integer_digits} integer digits ({value})",
                code="VALUE_OUT_OF_RANGE",
            )


def validate_row(row_data: dict[str, Any]) -> dict[str, Any]:
    """
    Validate extracted row data.

    Rules:
    - partner_id and account_id are present
    - text values fit their column's max_length
    - numbers fit their column (32-bit integers, decimal integer digits)

    Args:
        row_data: Output of ``extract_row_data``.

    Returns:
        dict: The same data, unchanged.

    Raises:
        RowValidationError: On the first rule violation.
    """
    for field_name in REQUIRED_FIELDS:
        if not row_data.get(field_name):
            raise RowValidationError(f"{field_name} is required", code="REQUIRED_FIELD")

    for field_name, value in row_data.items():
        if value is None:
            continue
        field = Position._meta.get_field(field_name)
        if isinstance(value, str):
            if field.max_length is not None and len(value) > field.max_length:
                raise RowValidationError(
                    f"{field_name} exceeds {field.max_length} characters ({len(value)})",
                    code="VALUE_TOO_LONG",
                )
            continue
        _check_range(field, value)

    return row_data
