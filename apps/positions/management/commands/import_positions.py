"""
Management command to import portfolio positions from the spreadsheet.

Usage:
    # Import the configured file, keeping existing positions
    python manage.py import_positions

    # Replace everything with the content of another file
    python manage.py import_positions --file=/data/positions.xlsx --clear-existing

    # Queue the import on a Celery worker
    python manage.py import_positions --async
"""

from __future__ import annotations

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from apps.positions.ingestion import ImportSourceError, import_positions_from_file
from apps.positions.models import PositionImport
from apps.positions.services.audit import record_import_event
from apps.positions.tasks import import_positions_task
from libs.choices import ImportStatus


class Command(BaseCommand):
    """
    Import positions from the fixed-layout spreadsheet.

    Prints imported/skipped counters and the first row errors, and records an
    AuditEvent for the run. A missing or unreadable file fails the command
    without touching existing positions.
    """

    help = "Import portfolio positions from the position spreadsheet"

    def add_arguments(self, parser):
        parser.add_argument(
            "--file",
            type=str,
            help="Path to the .xlsx file (defaults to settings.POSITIONS_IMPORT_FILE)",
        )
        parser.add_argument(
            "--clear-existing",
            action="store_true",
            help="Delete every existing position before importing (irreversible)",
        )
        parser.add_argument(
            "--batch-size",
            type=int,
            default=settings.POSITIONS_IMPORT_BATCH_SIZE,
            help="Rows per database flush (default: %(default)s)",
        )
        parser.add_argument(
            "--async",
            action="store_true",
            dest="run_async",
            help="Queue the import as a Celery task instead of running it here",
        )
        parser.add_argument(
            "--actor-id",
            type=int,
            help="User ID of the actor performing this action (for audit log)",
        )

    def handle(self, *args, **options):
        file_path = options.get("file") or str(settings.POSITIONS_IMPORT_FILE)
        clear_existing = options["clear_existing"]
        batch_size = options["batch_size"]
        if batch_size < 1:
            raise CommandError("--batch-size must be at least 1")

        if options["run_async"]:
            async_result = import_positions_task.delay(
                file_path=file_path, clear_existing=clear_existing
            )
            self.stdout.write(self.style.SUCCESS(f"Queued import task {async_result.id}"))
            return

        actor = self._get_actor(options.get("actor_id"))

        self.stdout.write(f"Importing portfolio positions from {file_path}")
        if clear_existing:
            self.stdout.write(self.style.WARNING("Existing positions will be deleted first"))
        self.stdout.write("")

        try:
            result = import_positions_from_file(
                file_path=file_path,
                clear_existing=clear_existing,
                batch_size=batch_size,
            )
        except ImportSourceError as e:
            raise CommandError(f"Position import failed: {e}") from e

        if result.status == ImportStatus.SUCCESS:
            self.stdout.write(
                self.style.SUCCESS(
                    f"✓ Import completed successfully: {result.imported} positions imported"
                )
            )
        elif result.status == ImportStatus.PARTIAL:
            self.stdout.write(
                self.style.WARNING(
                    f"⚠ Import completed with errors: {result.imported} positions imported, "
                    f"{result.failed_rows} rows rejected"
                )
            )
        else:
            self.stdout.write(
                self.style.ERROR(f"✗ Import failed: {result.failed_rows} rows rejected")
            )

        self.stdout.write(f"  Total rows: {result.total_rows}")
        self.stdout.write(f"  Imported: {result.imported}")
        self.stdout.write(
            f"  Skipped: {result.skipped} ({result.empty_rows} empty, {result.failed_rows} rejected)"
        )
        self.stdout.write(f"  Positions before: {result.count_before}")
        self.stdout.write(f"  Positions after: {result.count_after}")

        if result.failed_rows:
            self._write_errors(result.import_id)

        record_import_event(result, source="command", file_name=file_path, actor=actor)

    def _get_actor(self, actor_id):
        if not actor_id:
            return None
        User = get_user_model()
        try:
            return User.objects.get(pk=actor_id)
        except User.DoesNotExist:
            self.stdout.write(
                self.style.WARNING(
                    f"User with ID {actor_id} does not exist, proceeding without actor"
                )
            )
            return None

    def _write_errors(self, import_id: int):
        position_import = PositionImport.objects.get(pk=import_id)
        errors = position_import.errors.all()[:20]
        self.stdout.write("")
        self.stdout.write(self.style.ERROR("First errors:"))
        for error in errors:
            self.stdout.write(
                f"  Row {error.row_number}: [{error.error_type}] {error.error_message}"
            )
        total_errors = position_import.errors.count()
        if total_errors > 20:
            self.stdout.write(f"  ... and {total_errors - 20} more errors")
