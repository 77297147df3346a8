"""
Django admin configuration for position models.

This module provides admin interfaces for positions, position imports and
their row errors.
"""

from __future__ import annotations

from django.contrib import admin

from apps.positions.models import Position, PositionImport, PositionImportError


class PositionImportErrorInline(admin.TabularInline):
    """Read-only inline for row errors of an import run."""

    model = PositionImportError
    extra = 0
    can_delete = False
    readonly_fields = [
        "row_number",
        "error_type",
        "error_message",
        "error_code",
        "raw_row_data",
        "created_at",
    ]
    fields = ["row_number", "error_type", "error_message", "error_code"]
    show_change_link = False


@admin.register(PositionImport)
class PositionImportAdmin(admin.ModelAdmin):
    list_display = [
        "file_name",
        "status",
        "clear_existing",
        "rows_imported",
        "rows_skipped",
        "rows_total",
        "count_after",
        "created_at",
    ]
    list_filter = ["status", "clear_existing", "created_at"]
    search_fields = ["file_name"]
    readonly_fields = [
        "file_name",
        "clear_existing",
        "status",
        "rows_total",
        "rows_imported",
        "rows_skipped",
        "rows_empty",
        "rows_failed",
        "count_before",
        "count_after",
        "error_message",
        "created_at",
        "completed_at",
    ]
    inlines = [PositionImportErrorInline]


@admin.register(Position)
class PositionAdmin(admin.ModelAdmin):
    """
    Admin interface for Position model.

    Positions are editable here like through the API; provenance and
    bookkeeping fields are read-only.
    """

    list_display = [
        "id",
        "partner_id",
        "account_id",
        "instrument_name_short",
        "isin",
        "asset_class_description_short",
        "value_amount",
        "value_currency",
        "valuation_date",
    ]
    list_filter = ["value_currency", "asset_class_description_short", "mandate_type"]
    search_fields = ["partner_id", "account_id", "instrument_name_short", "isin"]
    readonly_fields = ["position_import", "created_at", "updated_at"]
    ordering = ["account_id", "id"]
    list_per_page = 50
