"""
Column layout of the custodian position spreadsheet.

The source file has a fixed 57-column layout. Each mapped column is described
by a ``ColumnSpec`` (zero-based column index, target Position field, cell kind)
and the importer walks ``COLUMN_MAPPING`` in a single loop, so adding or
removing a column is a change to this table only.

Two columns of the source format repeat earlier ones and are not mapped:
column 38 (a second product id) and column 41 (a second mandate pricing id).
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class CellKind(str, Enum):
    """How a cell value is converted into a field value."""

    STRING = "string"
    DECIMAL = "decimal"
    INTEGER = "integer"
    DATETIME = "datetime"


class ColumnSpec(NamedTuple):
    index: int
    field_name: str
    kind: CellKind


S = CellKind.STRING
D = CellKind.DECIMAL
I = CellKind.INTEGER  # noqa: E741
T = CellKind.DATETIME

COLUMN_COUNT = 57

COLUMN_MAPPING: tuple[ColumnSpec, ...] = (
    ColumnSpec(0, "partner_id", S),
    ColumnSpec(1, "account_id", S),
    ColumnSpec(2, "position_created_date", T),
    ColumnSpec(3, "fi_unit_type_code", S),
    ColumnSpec(4, "balance_amount", D),
    ColumnSpec(5, "value_amount", D),
    ColumnSpec(6, "trade_amount", D),
    ColumnSpec(7, "valuation_date", T),
    ColumnSpec(8, "as_of_date", T),
    ColumnSpec(9, "value_currency", S),
    ColumnSpec(10, "source_currency", S),
    ColumnSpec(11, "original_quantity", D),
    ColumnSpec(12, "market_value_amount", D),
    ColumnSpec(13, "fx_rate", D),
    ColumnSpec(14, "valor", S),
    ColumnSpec(15, "isin", S),
    ColumnSpec(16, "instrument_name_short", S),
    ColumnSpec(17, "symbol_id", S),
    ColumnSpec(18, "title_group_id", S),
    ColumnSpec(19, "title_id", S),
    ColumnSpec(20, "title_id_description", S),
    ColumnSpec(21, "symbol_id_gpc", S),
    ColumnSpec(22, "product_description", S),
    ColumnSpec(23, "product_id", S),
    ColumnSpec(24, "product_id_description", S),
    ColumnSpec(25, "product_class_id", S),
    ColumnSpec(26, "product_class_description", S),
    ColumnSpec(27, "product_family_id", S),
    ColumnSpec(28, "product_family_description", S),
    ColumnSpec(29, "asset_class", S),
    ColumnSpec(30, "asset_class_subtype", S),
    ColumnSpec(31, "asset_class_description_short", S),
    ColumnSpec(32, "asset_class_description_long", S),
    ColumnSpec(33, "uac_instr_cat_type", S),
    ColumnSpec(34, "instrument_id", S),
    ColumnSpec(35, "portfolio_currency", S),
    ColumnSpec(36, "portfolio_short_name", S),
    ColumnSpec(37, "currency_id", S),
    ColumnSpec(39, "mandate_pricing_id", S),
    ColumnSpec(40, "mandate_program", S),
    ColumnSpec(42, "mandate_pricing_name_short", S),
    ColumnSpec(43, "mandate_pricing_name_long", S),
    ColumnSpec(44, "mandate_pricing_type", S),
    ColumnSpec(45, "mandate_program_secondary", S),
    ColumnSpec(46, "investment_strategy", S),
    ColumnSpec(47, "investment_strategy_name", S),
    ColumnSpec(48, "solution_subtype_id", S),
    ColumnSpec(49, "solution_subtype_name_short", S),
    ColumnSpec(50, "solution_name_short", S),
    ColumnSpec(51, "solution_name_long", S),
    ColumnSpec(52, "mandate_type", S),
    ColumnSpec(53, "mandate_subtype", S),
    ColumnSpec(54, "mandate_group", S),
    ColumnSpec(55, "domicile", S),
    ColumnSpec(56, "client_advisor_id", I),
)

# Duplicate columns present in the source format, intentionally not mapped.
SKIPPED_COLUMNS: dict[int, str] = {
    38: "product_id",
    41: "mandate_pricing_id",
}

REQUIRED_FIELDS = ("partner_id", "account_id")


def mapped_field_names() -> list[str]:
    """Return Position field names in column order."""
    return [spec.field_name for spec in COLUMN_MAPPING]
