"""
Position ingestion package.

Imports custodian position spreadsheets into Position records with
row-level error tolerance and batched persistence.
"""

from apps.positions.ingestion.import_excel import (
    ImportResult,
    ImportSourceError,
    import_positions_from_file,
)

__all__ = ["ImportResult", "ImportSourceError", "import_positions_from_file"]
