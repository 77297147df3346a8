"""
Shared pytest fixtures for all tests.
"""

# Ensure Django is configured before importing anything that uses Django settings
pytest_plugins = ["pytest_django"]

import pytest  # noqa: E402
from openpyxl import Workbook  # noqa: E402

from apps.positions.ingestion.mapping import COLUMN_COUNT  # noqa: E402
from tests.factories import UserFactory  # noqa: E402
from tests.workbooks import position_row, to_cells  # noqa: E402


@pytest.fixture
def write_workbook(tmp_path):
    """
    Build a position workbook in a temporary directory.

    Rows may be field dicts (placed via the column table) or raw cell lists.
    """

    def _write(rows, name="positions.xlsx"):
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Positions"
        sheet.append([f"COLUMN_{i}" for i in range(COLUMN_COUNT)])
        for row in rows:
            sheet.append(to_cells(row) if isinstance(row, dict) else list(row))
        path = tmp_path / name
        workbook.save(path)
        return path

    return _write


@pytest.fixture
def import_file(settings, write_workbook):
    """Workbook with three valid rows configured as the default import file."""
    path = write_workbook(
        [
            position_row(),
            position_row(account_id="A-2002", value_amount=250),
            position_row(partner_id="P-1002", account_id="A-3001", value_currency="EUR"),
        ]
    )
    settings.POSITIONS_IMPORT_FILE = str(path)
    return path


@pytest.fixture
def user():
    """Fixture to create a User instance."""
    return UserFactory()


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """
    Give all tests access to the database.
    This is equivalent to @pytest.mark.django_db on every test.
    """
    pass
