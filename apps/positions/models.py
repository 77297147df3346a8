"""
Position management models.

This module provides the Position record imported from the custodian
spreadsheet (or created through the API) together with the provenance
records written by every import run.

Key components:
- PositionQuerySet: Filtering helpers used by views and analytics
- Position: One financial holding belonging to a partner's account
- PositionImport: Tracks one import run and its row counters
- PositionImportError: Row-level rejection recorded during an import run
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from libs.choices import ImportStatus


class PositionImport(models.Model):
    """
    PositionImport model tracking a single spreadsheet import run.

    Attributes:
        file_name (str): Name of the source file that was read.
        clear_existing (bool): Whether all positions were deleted before importing.
        status (str): Current import status.
        rows_total (int): Data rows scanned (header excluded).
        rows_imported (int): Rows persisted as positions.
        rows_skipped (int): Rows not persisted (empty + failed).
        rows_empty (int): Rows skipped because every cell was blank.
        rows_failed (int): Rows rejected because of an extraction/validation error.
        count_before (int): Position count before the run started.
        count_after (int): Position count after the run finished.
        error_message (str, optional): Fatal error or summary of row errors.
        created_at (datetime): When the run started.
        completed_at (datetime, optional): When the run finished.
    """

    file_name = models.CharField(_("File Name"), max_length=255)
    clear_existing = models.BooleanField(
        _("Clear Existing"),
        default=False,
        help_text="Whether all positions were deleted before importing.",
    )
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=ImportStatus.choices,
        default=ImportStatus.PENDING,
        help_text="Current import status.",
    )
    rows_total = models.IntegerField(_("Rows Total"), default=0)
    rows_imported = models.IntegerField(_("Rows Imported"), default=0)
    rows_skipped = models.IntegerField(_("Rows Skipped"), default=0)
    rows_empty = models.IntegerField(_("Empty Rows"), default=0)
    rows_failed = models.IntegerField(_("Failed Rows"), default=0)
    count_before = models.IntegerField(_("Count Before"), default=0)
    count_after = models.IntegerField(_("Count After"), default=0)
    error_message = models.TextField(
        _("Error Message"),
        blank=True,
        null=True,
        help_text="Fatal error, or a summary of row errors.",
    )
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    completed_at = models.DateTimeField(
        _("Completed At"), blank=True, null=True, help_text="When the import completed."
    )

    class Meta:
        verbose_name = _("Position Import")
        verbose_name_plural = _("Position Imports")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="idx_import_status"),
            models.Index(fields=["created_at"], name="idx_import_created_at"),
        ]

    def __str__(self) -> str:
        return f"{self.file_name} - {self.get_status_display()} ({self.created_at:%Y-%m-%d %H:%M})"


class PositionImportError(models.Model):
    """
    Row-level error recorded while importing positions.

    Attributes:
        position_import (PositionImport): The run the error belongs to.
        row_number (int): 1-based spreadsheet row number (header is row 1).
        error_type (str): ``validation`` for rule violations, ``system`` otherwise.
        error_message (str): Human readable message.
        error_code (str, optional): Machine readable code.
        raw_row_data (list): Cell values of the rejected row.
    """

    position_import = models.ForeignKey(
        PositionImport,
        on_delete=models.CASCADE,
        related_name="errors",
    )
    row_number = models.IntegerField(_("Row Number"))
    error_type = models.CharField(_("Error Type"), max_length=20)
    error_message = models.TextField(_("Error Message"))
    error_code = models.CharField(
        _("Error Code"), max_length=50, blank=True, null=True
    )
    raw_row_data = models.JSONField(_("Raw Row Data"), default=list, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Position Import Error")
        verbose_name_plural = _("Position Import Errors")
        ordering = ["position_import", "row_number"]

    def __str__(self) -> str:
        return f"Row {self.row_number}: {self.error_message}"


class PositionQuerySet(models.QuerySet):
    """QuerySet with the lookups exposed by the position API."""

    def for_partner(self, partner_id: str):
        return self.filter(partner_id=partner_id)

    def for_account(self, account_id: str):
        return self.filter(account_id=account_id)

    def for_asset_class(self, asset_class: str):
        return self.filter(asset_class_description_short=asset_class)

    def for_currency(self, currency: str):
        return self.filter(value_currency=currency)

    def for_isin(self, isin: str):
        return self.filter(isin=isin)

    def instrument_name_contains(self, term: str):
        return self.filter(instrument_name_short__icontains=term)

    def with_value_above(self, amount: Decimal):
        return self.filter(value_amount__gt=amount)

    def search(self, term: str):
        """Case-insensitive match on instrument name, ISIN or account/partner id."""
        return self.filter(
            Q(instrument_name_short__icontains=term)
            | Q(isin__icontains=term)
            | Q(account_id__icontains=term)
            | Q(partner_id__icontains=term)
        )

    def top_by_value(self, limit: int):
        return self.filter(value_amount__isnull=False).order_by("-value_amount", "id")[
            :limit
        ]


class Position(models.Model):
    """
    Position model representing one financial holding.

    A position belongs to an account (``account_id``) owned by a partner
    (``partner_id``). Positions are created by the spreadsheet importer or
    through the API, mutated in place by update/patch and removed by explicit
    deletes or a bulk clear.

    Monetary amounts are stored with currency-scale precision. A position with
    a non-null ``value_amount`` is active for aggregation; positions without a
    value amount are still counted as rows but contribute nothing to sums.

    All descriptive and classification attributes are opaque pass-through
    strings taken from the source file.

    Example:
        >>> position = Position.objects.create(
        ...     partner_id="P-1001",
        ...     account_id="A-2001",
        ...     value_amount=Decimal("125000.00"),
        ...     value_currency="CHF",
        ...     asset_class_description_short="Equities",
        ... )
    """

    position_import = models.ForeignKey(
        PositionImport,
        on_delete=models.SET_NULL,
        related_name="positions",
        null=True,
        blank=True,
        help_text="Import run that created this position.",
    )

    # Ownership
    partner_id = models.CharField(
        _("Partner ID"), max_length=50, help_text="Owning partner identifier."
    )
    account_id = models.CharField(
        _("Account ID"), max_length=50, help_text="Owning account identifier."
    )

    # Dates
    position_created_date = models.DateTimeField(
        _("Position Created Date"), blank=True, null=True
    )
    valuation_date = models.DateTimeField(_("Valuation Date"), blank=True, null=True)
    as_of_date = models.DateTimeField(_("As Of Date"), blank=True, null=True)

    # Amounts
    fi_unit_type_code = models.CharField(
        _("FI Unit Type Code"), max_length=10, blank=True, null=True
    )
    balance_amount = models.DecimalField(
        _("Balance Amount"), max_digits=19, decimal_places=2, blank=True, null=True
    )
    value_amount = models.DecimalField(
        _("Value Amount"),
        max_digits=19,
        decimal_places=2,
        blank=True,
        null=True,
        help_text="Position value in the value currency.",
    )
    trade_amount = models.DecimalField(
        _("Trade Amount"), max_digits=19, decimal_places=2, blank=True, null=True
    )
    value_currency = models.CharField(
        _("Value Currency"), max_length=3, blank=True, null=True
    )
    source_currency = models.CharField(
        _("Source Currency"), max_length=3, blank=True, null=True
    )
    original_quantity = models.DecimalField(
        _("Original Quantity"), max_digits=19, decimal_places=6, blank=True, null=True
    )
    market_value_amount = models.DecimalField(
        _("Market Value Amount"),
        max_digits=19,
        decimal_places=6,
        blank=True,
        null=True,
    )
    fx_rate = models.DecimalField(
        _("FX Rate"),
        max_digits=19,
        decimal_places=12,
        blank=True,
        null=True,
        help_text="Rate converting the value amount into the reference currency.",
    )

    # Instrument
    valor = models.CharField(_("Valor"), max_length=50, blank=True, null=True)
    isin = models.CharField(_("ISIN"), max_length=12, blank=True, null=True)
    instrument_name_short = models.CharField(
        _("Instrument Name"), max_length=100, blank=True, null=True
    )
    symbol_id = models.CharField(_("Symbol ID"), max_length=50, blank=True, null=True)
    title_group_id = models.CharField(
        _("Title Group ID"), max_length=10, blank=True, null=True
    )
    title_id = models.CharField(_("Title ID"), max_length=10, blank=True, null=True)
    title_id_description = models.CharField(
        _("Title ID Description"), max_length=100, blank=True, null=True
    )
    symbol_id_gpc = models.CharField(
        _("Symbol ID (GPC)"), max_length=50, blank=True, null=True
    )

    # Product
    product_description = models.CharField(
        _("Product Description"), max_length=100, blank=True, null=True
    )
    product_id = models.CharField(_("Product ID"), max_length=50, blank=True, null=True)
    product_id_description = models.CharField(
        _("Product ID Description"), max_length=100, blank=True, null=True
    )
    product_class_id = models.CharField(
        _("Product Class ID"), max_length=50, blank=True, null=True
    )
    product_class_description = models.CharField(
        _("Product Class Description"), max_length=100, blank=True, null=True
    )
    product_family_id = models.CharField(
        _("Product Family ID"), max_length=50, blank=True, null=True
    )
    product_family_description = models.CharField(
        _("Product Family Description"), max_length=100, blank=True, null=True
    )

    # Asset class
    asset_class = models.CharField(_("Asset Class"), max_length=50, blank=True, null=True)
    asset_class_subtype = models.CharField(
        _("Asset Class Subtype"), max_length=50, blank=True, null=True
    )
    asset_class_description_short = models.CharField(
        _("Asset Class Description"),
        max_length=100,
        blank=True,
        null=True,
        help_text="Asset class label used for breakdowns.",
    )
    asset_class_description_long = models.CharField(
        _("Asset Class Description (Long)"), max_length=100, blank=True, null=True
    )
    uac_instr_cat_type = models.CharField(
        _("Instrument Category Type"), max_length=50, blank=True, null=True
    )
    instrument_id = models.CharField(
        _("Instrument ID"), max_length=100, blank=True, null=True
    )

    # Portfolio
    portfolio_currency = models.CharField(
        _("Portfolio Currency"), max_length=3, blank=True, null=True
    )
    portfolio_short_name = models.CharField(
        _("Portfolio Short Name"), max_length=50, blank=True, null=True
    )
    currency_id = models.CharField(_("Currency ID"), max_length=3, blank=True, null=True)

    # Mandate
    mandate_pricing_id = models.CharField(
        _("Mandate Pricing ID"), max_length=50, blank=True, null=True
    )
    mandate_program = models.CharField(
        _("Mandate Program"), max_length=50, blank=True, null=True
    )
    mandate_pricing_name_short = models.CharField(
        _("Mandate Pricing Name"), max_length=100, blank=True, null=True
    )
    mandate_pricing_name_long = models.CharField(
        _("Mandate Pricing Name (Long)"), max_length=200, blank=True, null=True
    )
    mandate_pricing_type = models.CharField(
        _("Mandate Pricing Type"), max_length=50, blank=True, null=True
    )
    mandate_program_secondary = models.CharField(
        _("Mandate Program (Secondary)"), max_length=100, blank=True, null=True
    )
    investment_strategy = models.CharField(
        _("Investment Strategy"), max_length=10, blank=True, null=True
    )
    investment_strategy_name = models.CharField(
        _("Investment Strategy Name"), max_length=100, blank=True, null=True
    )

    # Solution
    solution_subtype_id = models.CharField(
        _("Solution Subtype ID"), max_length=50, blank=True, null=True
    )
    solution_subtype_name_short = models.CharField(
        _("Solution Subtype Name"), max_length=100, blank=True, null=True
    )
    solution_name_short = models.CharField(
        _("Solution Name"), max_length=100, blank=True, null=True
    )
    solution_name_long = models.CharField(
        _("Solution Name (Long)"), max_length=200, blank=True, null=True
    )
    mandate_type = models.CharField(_("Mandate Type"), max_length=50, blank=True, null=True)
    mandate_subtype = models.CharField(
        _("Mandate Subtype"), max_length=100, blank=True, null=True
    )
    mandate_group = models.CharField(
        _("Mandate Group"), max_length=100, blank=True, null=True
    )
    domicile = models.CharField(_("Domicile"), max_length=5, blank=True, null=True)
    client_advisor_id = models.IntegerField(_("Client Advisor ID"), blank=True, null=True)

    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    objects = PositionQuerySet.as_manager()

    class Meta:
        verbose_name = _("Position")
        verbose_name_plural = _("Positions")
        ordering = ["id"]
        indexes = [
            models.Index(fields=["partner_id"], name="idx_partner_id"),
            models.Index(fields=["account_id"], name="idx_account_id"),
            models.Index(
                fields=["asset_class_description_short"], name="idx_asset_class"
            ),
            models.Index(fields=["value_currency"], name="idx_value_currency"),
            models.Index(fields=["isin"], name="idx_isin"),
            models.Index(fields=["valuation_date"], name="idx_valuation_date"),
            models.Index(fields=["value_amount"], name="idx_value_amount"),
            models.Index(
                fields=["partner_id", "asset_class_description_short"],
                name="idx_partner_asset_class",
            ),
            models.Index(
                fields=["account_id", "value_currency"], name="idx_account_currency"
            ),
        ]

    def __str__(self) -> str:
        name = self.instrument_name_short or self.isin or "position"
        return f"{self.account_id} - {name} ({self.value_amount} {self.value_currency})"

    @property
    def is_active(self) -> bool:
        """Whether this position contributes to value sums."""
        return self.value_amount is not None

    @property
    def has_fx_exposure(self) -> bool:
        """Whether value and source currency are both known and differ."""
        return (
            self.value_currency is not None
            and self.source_currency is not None
            and self.value_currency != self.source_currency
        )
