"""
Helpers for building position spreadsheets in tests.
"""

from datetime import datetime

from apps.positions.ingestion.mapping import COLUMN_COUNT, COLUMN_MAPPING

FIELD_INDEX = {spec.field_name: spec.index for spec in COLUMN_MAPPING}


def position_row(**fields):
    """
    Field values of one valid spreadsheet row.

    Keyword arguments override the defaults; pass ``None`` to leave a cell blank.
    """
    values = {
        "partner_id": "P-1001",
        "account_id": "A-2001",
        "position_created_date": datetime(2024, 1, 15, 9, 30),
        "balance_amount": 1000,
        "value_amount": 1000.5,
        "valuation_date": datetime(2024, 6, 28),
        "as_of_date": "2024-06-28T22:00:00.000Z",
        "value_currency": "CHF",
        "source_currency": "USD",
        "fx_rate": 0.8975,
        "isin": "US0378331005",
        "instrument_name_short": "Apple Inc",
        "asset_class_description_short": "Equities",
        "mandate_type": "Advisory",
        "client_advisor_id": 4711,
    }
    values.update(fields)
    return values


def to_cells(fields):
    """Place field values at their column index in a 57-cell row."""
    row = [None] * COLUMN_COUNT
    for field_name, value in fields.items():
        row[FIELD_INDEX[field_name]] = value
    return row
