"""
Tests for position Celery tasks.
"""

import pytest

from apps.audit.models import AuditEvent
from apps.positions.ingestion import ImportSourceError
from apps.positions.models import Position, PositionImport
from apps.positions.tasks import import_positions_task
from libs.choices import ImportStatus
from tests.factories import PositionFactory


class TestImportPositionsTask:
    def test_imports_default_file(self, import_file):
        result = import_positions_task.run()

        assert result["imported"] == 3
        assert result["skipped"] == 0
        assert result["status"] == ImportStatus.SUCCESS
        assert Position.objects.count() == 3

    def test_clear_existing(self, import_file):
        PositionFactory.create_batch(2)

        result = import_positions_task.run(file_path=str(import_file), clear_existing=True)

        assert result["count_before"] == 2
        assert result["count_after"] == 3
        assert result["cleared_existing"] is True

    def test_records_audit_event(self, import_file):
        result = import_positions_task.run(file_path=str(import_file))

        event = AuditEvent.objects.get()
        assert event.object_id == result["import_id"]
        assert event.metadata["source"] == "task"

    def test_missing_file_propagates(self, tmp_path):
        with pytest.raises(ImportSourceError):
            import_positions_task.run(file_path=str(tmp_path / "missing.xlsx"))

        assert PositionImport.objects.get().status == ImportStatus.FAILED
        assert not AuditEvent.objects.exists()
