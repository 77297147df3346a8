"""
Excel import service for portfolio positions.

Reads the custodian position spreadsheet (first sheet, fixed 57-column layout)
and persists one Position per data row.

Expected file format:
    Header row, then one position per row in the column order described by
    ``apps.positions.ingestion.mapping.COLUMN_MAPPING``.

Key features:
- Fatal precondition: a missing or unreadable file aborts before any row is
  processed and before existing data is touched
- Row-level tolerance: empty rows are skipped, rows that fail extraction or
  validation are skipped, logged and stored as PositionImportError
- Field-level tolerance: a badly typed cell becomes null, the row survives
- Bounded memory: positions are flushed to the store in batches
- Provenance: every run is tracked by a PositionImport record
"""

from __future__ import annotations

import logging
import zipfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Sequence

from django.conf import settings
from django.utils import timezone
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from apps.positions.ingestion.utils import extract_row_data, is_empty_row, raw_row_values
from apps.positions.ingestion.validation import RowValidationError, validate_row
from apps.positions.models import Position, PositionImport, PositionImportError
from apps.positions.services.positions import (
    bulk_insert_positions,
    clear_all_positions,
    existing_position_count,
)
from libs.choices import ImportStatus

logger = logging.getLogger(__name__)

BATCH_SIZE = 1000


class ImportSourceError(OSError):
    """The source file is missing or cannot be read as a workbook."""


@dataclass
class ImportResult:
    """Counters of one import run."""

    imported: int = 0
    empty_rows: int = 0
    failed_rows: int = 0
    total_rows: int = 0
    count_before: int = 0
    count_after: int = 0
    cleared_existing: bool = False
    import_id: int | None = None
    status: str = ImportStatus.PENDING

    @property
    def skipped(self) -> int:
        return self.empty_rows + self.failed_rows

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["skipped"] = self.skipped
        data["status"] = str(self.status)
        return data


def _open_rows(path: Path) -> tuple[Any, Iterator[tuple[Any, ...]]]:
    """Open the first sheet and return (workbook, row iterator)."""
    if not path.is_file():
        raise ImportSourceError(f"Excel file not found: {path}")
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise ImportSourceError(f"Failed to read Excel file {path}: {e}") from e

    if not workbook.worksheets:
        workbook.close()
        raise ImportSourceError(f"No sheets found in Excel file: {path}")
    sheet = workbook.worksheets[0]
    logger.info("Reading sheet '%s' from %s", sheet.title, path)
    return workbook, sheet.iter_rows(values_only=True)


def _row_error(
    position_import: PositionImport,
    row_number: int,
    row: Sequence[Any],
    error: Exception,
) -> PositionImportError:
    if isinstance(error, RowValidationError):
        error_type, error_code, message = "validation", error.code, str(error)
    else:
        error_type, error_code = "system", "SYSTEM_ERROR"
        message = f"System error: {error}"
    return PositionImportError(
        position_import=position_import,
        row_number=row_number,
        raw_row_data=raw_row_values(row),
        error_type=error_type,
        error_message=message,
        error_code=error_code,
    )


def import_positions_from_file(
    file_path: str | Path | None = None,
    clear_existing: bool = False,
    batch_size: int | None = None,
    sink: Callable[[list[Position]], Any] = bulk_insert_positions,
) -> ImportResult:
    """
    Import positions from the position spreadsheet.

    This is the main entry point for position ingestion. It:
    1. Opens the workbook (fatal if missing/unreadable)
    2. Optionally clears all existing positions
    3. Skips the header row and processes data rows in file order
    4. Flushes buffered positions to ``sink`` every ``batch_size`` rows
    5. Records row errors and final counters on a PositionImport

    Args:
        file_path: Path to the .xlsx file (defaults to settings.POSITIONS_IMPORT_FILE).
        clear_existing: Delete every existing position before importing.
        batch_size: Rows per flush (defaults to settings.POSITIONS_IMPORT_BATCH_SIZE).
        sink: Callable persisting one batch of unsaved positions.

    Returns:
        ImportResult: Imported/skipped counters and before/after totals.

    Raises:
        ImportSourceError: If the file is missing or cannot be read.
        ValueError: If ``batch_size`` is below 1.
        Exception: Whatever ``sink`` or the store raises mid-run; the run is
            recorded as FAILED with its counters first.
    """
    path = Path(file_path or settings.POSITIONS_IMPORT_FILE)
    if batch_size is None:
        batch_size = getattr(settings, "POSITIONS_IMPORT_BATCH_SIZE", BATCH_SIZE)
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    logger.info(
        "Starting import of portfolio positions from %s (clear existing: %s)",
        path,
        clear_existing,
    )

    result = ImportResult(
        count_before=existing_position_count(), cleared_existing=clear_existing
    )
    position_import = PositionImport.objects.create(
        file_name=path.name,
        clear_existing=clear_existing,
        status=ImportStatus.PROCESSING,
        count_before=result.count_before,
    )
    result.import_id = position_import.id

    try:
        workbook, rows = _open_rows(path)
    except ImportSourceError as e:
        logger.error("Import aborted: %s", e)
        position_import.status = ImportStatus.FAILED
        position_import.error_message = str(e)
        position_import.completed_at = timezone.now()
        position_import.save(update_fields=["status", "error_message", "completed_at"])
        raise

    errors: list[PositionImportError] = []
    buffer: list[Position] = []

    try:
        if clear_existing:
            clear_all_positions()

        next(rows, None)  # header
        for row_number, row in enumerate(rows, start=2):
            result.total_rows += 1

            if not row or is_empty_row(row):
                result.empty_rows += 1
                continue

            try:
                row_data = validate_row(extract_row_data(row))
            except Exception as e:
                logger.error("Error processing row %d: %s", row_number, e)
                result.failed_rows += 1
                errors.append(_row_error(position_import, row_number, row, e))
                continue

            buffer.append(Position(position_import=position_import, **row_data))
            if len(buffer) >= batch_size:
                sink(buffer)
                result.imported += len(buffer)
                logger.debug(
                    "Batch inserted %d positions. Total imported so far: %d",
                    len(buffer),
                    result.imported,
                )
                buffer = []

        if buffer:
            sink(buffer)
            result.imported += len(buffer)
    except Exception as e:
        # Batches already flushed stay in the store; the run records how far it got.
        logger.error("Import failed after %d rows: %s", result.total_rows, e)
        result.status = ImportStatus.FAILED
        _finish_import(position_import, result, errors, error_message=str(e))
        raise
    finally:
        workbook.close()

    if result.failed_rows == 0:
        result.status = ImportStatus.SUCCESS
    elif result.imported > 0:
        result.status = ImportStatus.PARTIAL
    else:
        result.status = ImportStatus.FAILED
    _finish_import(position_import, result, errors)

    logger.info(
        "Import completed. Imported: %d, Skipped: %d, Total rows processed: %d",
        result.imported,
        result.skipped,
        result.total_rows,
    )
    return result


def _finish_import(
    position_import: PositionImport,
    result: ImportResult,
    errors: list[PositionImportError],
    error_message: str | None = None,
) -> None:
    """Store row errors and the final counters of a run."""
    if errors:
        PositionImportError.objects.bulk_create(errors, batch_size=500)

    result.count_after = existing_position_count()
    position_import.status = result.status
    position_import.rows_total = result.total_rows
    position_import.rows_imported = result.imported
    position_import.rows_skipped = result.skipped
    position_import.rows_empty = result.empty_rows
    position_import.rows_failed = result.failed_rows
    position_import.count_after = result.count_after
    if error_message is not None:
        position_import.error_message = error_message
    elif errors:
        first_error = errors[0]
        position_import.error_message = (
            f"{len(errors)} errors. First error (row {first_error.row_number}): "
            f"{first_error.error_message}"
        )
    position_import.completed_at = timezone.now()
    position_import.save()
