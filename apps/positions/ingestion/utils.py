"""
Helper utilities for position ingestion.

Provides cell-level converters and row extraction. Converters never raise:
a cell whose type or format does not fit the target field yields ``None``
and the mismatch is logged at DEBUG level.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Sequence

from openpyxl.utils.datetime import to_excel

from apps.positions.ingestion.mapping import COLUMN_MAPPING, CellKind, ColumnSpec
from apps.positions.models import Position

logger = logging.getLogger(__name__)

# Date-time text must carry at least "yyyy-mm-ddThh:mm"
ISO_LOCAL_DATE_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")


def _is_number(value: Any) -> bool:
    # bool is an int subclass but a boolean cell is never numeric
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_blank(value: Any) -> bool:
    """True for missing cells and cells holding only whitespace."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_empty_row(row: Sequence[Any]) -> bool:
    """True if every cell of the row is blank."""
    return all(is_blank(value) for value in row)


def cell_as_string(value: Any) -> str | None:
    """
    Convert a cell to trimmed text.

    Numeric cells become their integer text (IDs are stored as numbers in the
    source), booleans become ``"true"``/``"false"``. Date-formatted cells become
    the integer text of their Excel serial number, e.g. 2024-01-01 is ``"45292"``.
    Anything else yields None.
    """
    if value is None:
        return None
    if isinstance(value, (datetime, date, time, timedelta)):
        return str(int(to_excel(value)))
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return str(int(value))
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return None


def cell_as_decimal(
    value: Any, decimal_places: int | None = None, column: int | None = None
) -> Decimal | None:
    """
    Convert a numeric cell to Decimal, quantized half-up to ``decimal_places``.

    Only numeric cells are accepted.
    """
    if value is None:
        return None
    if not _is_number(value):
        logger.debug(
            "Column %s: expected a numeric cell, got %s", column, type(value).__name__
        )
        return None
    try:
        amount = Decimal(str(value))
        if not amount.is_finite():
            raise InvalidOperation(f"non-finite value {value!r}")
        if decimal_places is not None:
            amount = amount.quantize(Decimal(1).scaleb(-decimal_places), ROUND_HALF_UP)
        return amount
    except (InvalidOperation, ValueError) as e:
        logger.debug("Column %s: could not convert %r to Decimal: %s", column, value, e)
        return None


def cell_as_integer(value: Any, column: int | None = None) -> int | None:
    """Truncate numeric cells, parse non-empty text cells, otherwise None."""
    if value is None:
        return None
    try:
        if _is_number(value):
            return int(value)
        if isinstance(value, str):
            text = value.strip()
            return int(text) if text else None
    except (ValueError, OverflowError) as e:
        logger.debug("Column %s: could not convert %r to int: %s", column, value, e)
        return None
    return None


def cell_as_datetime(value: Any, column: int | None = None) -> datetime | None:
    """
    Convert a cell to a zone-less datetime.

    Date-formatted cells arrive from openpyxl as ``datetime``/``date`` values.
    Text cells are parsed as ISO-8601 local date-times after a trailing ``Z``
    (UTC marker) is stripped, e.g. ``2022-08-29T22:00:00.000Z``. Date-only text,
    the basic format and a space separator are rejected.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1]
    if not ISO_LOCAL_DATE_TIME.match(text):
        logger.debug("Column %s: not an ISO local date-time %r", column, text)
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        logger.debug("Column %s: could not parse date string %r: %s", column, text, e)
        return None
    if parsed.tzinfo is not None:
        logger.debug("Column %s: ignoring offset date-time %r", column, text)
        return None
    return parsed


def _decimal_places(field_name: str) -> int:
    return Position._meta.get_field(field_name).decimal_places


def extract_cell(row: Sequence[Any], spec: ColumnSpec) -> Any:
    """Convert the cell described by ``spec``; short rows read as blank."""
    value = row[spec.index] if spec.index < len(row) else None

    if spec.kind == CellKind.STRING:
        return cell_as_string(value)
    if spec.kind == CellKind.DECIMAL:
        return cell_as_decimal(value, _decimal_places(spec.field_name), spec.index)
    if spec.kind == CellKind.INTEGER:
        return cell_as_integer(value, spec.index)
    if spec.kind == CellKind.DATETIME:
        return cell_as_datetime(value, spec.index)
    raise ValueError(f"Unknown cell kind: {spec.kind}")


def extract_row_data(
    row: Sequence[Any], columns: Sequence[ColumnSpec] = COLUMN_MAPPING
) -> dict[str, Any]:
    """
    Extract Position field values from one spreadsheet row.

    Args:
        row: Cell values of one row, in column order.
        columns: Column table to apply (defaults to the full layout).

    Returns:
        dict: {field_name: converted value} for every mapped column.
    """
    return {spec.field_name: extract_cell(row, spec) for spec in columns}


def raw_row_values(row: Sequence[Any]) -> list[Any]:
    """JSON-safe copy of a row for error records."""
    values: list[Any] = []
    for value in row:
        if value is None or isinstance(value, (str, int, bool)):
            values.append(value)
        elif isinstance(value, float):
            values.append(value if math.isfinite(value) else str(value))
        elif isinstance(value, (datetime, date)):
            values.append(value.isoformat())
        else:
            values.append(str(value))
    return values
