"""
Management command to delete every portfolio position.

Usage:
    python manage.py clear_positions --yes
"""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from apps.positions.services.audit import record_clear_event
from apps.positions.services.positions import clear_all_positions, existing_position_count


class Command(BaseCommand):
    help = "Delete every portfolio position (irreversible)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--yes",
            action="store_true",
            help="Confirm the deletion",
        )

    def handle(self, *args, **options):
        if not options["yes"]:
            raise CommandError("Refusing to delete positions without --yes")

        deleted = clear_all_positions()
        record_clear_event(deleted, source="command")
        self.stdout.write(
            self.style.SUCCESS(
                f"Deleted {deleted} positions ({existing_position_count()} remaining)"
            )
        )
