"""
Celery tasks for position operations.

Key tasks:
    - import_positions_task: Import the position spreadsheet (async)
"""

from __future__ import annotations

import logging

from celery import shared_task

from apps.positions.ingestion import import_positions_from_file
from apps.positions.services.audit import record_import_event

logger = logging.getLogger(__name__)


@shared_task(bind=True)
def import_positions_task(
    self, file_path: str | None = None, clear_existing: bool = False
) -> dict:
    """
    Async task to import positions from the spreadsheet.

    Wraps the synchronous import_positions_from_file() so a long import can run
    in a Celery worker.

    Args:
        self: Celery task instance (from bind=True).
        file_path: Source file (defaults to settings.POSITIONS_IMPORT_FILE).
        clear_existing: Delete every position before importing.

    Returns:
        dict: ImportResult.to_dict() of the run.

    Raises:
        ImportSourceError: If the source cannot be opened. The PositionImport
            record of the run is already marked failed.
    """
    logger.info("Task %s: importing positions (clear existing: %s)", self.request.id, clear_existing)
    result = import_positions_from_file(file_path=file_path, clear_existing=clear_existing)
    record_import_event(result, source="task", file_name=file_path)
    return result.to_dict()
