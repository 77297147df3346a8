from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PositionImport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("file_name", models.CharField(max_length=255, verbose_name="File Name")),
                ("clear_existing", models.BooleanField(default=False, help_text="Whether all positions were deleted before importing.", verbose_name="Clear Existing")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("processing", "Processing"),
                            ("success", "Success"),
                            ("failed", "Failed"),
                            ("partial", "Partial"),
                        ],
                        default="pending",
                        help_text="Current import status.",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("rows_total", models.IntegerField(default=0, verbose_name="Rows Total")),
                ("rows_imported", models.IntegerField(default=0, verbose_name="Rows Imported")),
                ("rows_skipped", models.IntegerField(default=0, verbose_name="Rows Skipped")),
                ("rows_empty", models.IntegerField(default=0, verbose_name="Empty Rows")),
                ("rows_failed", models.IntegerField(default=0, verbose_name="Failed Rows")),
                ("count_before", models.IntegerField(default=0, verbose_name="Count Before")),
                ("count_after", models.IntegerField(default=0, verbose_name="Count After")),
                ("error_message", models.TextField(blank=True, help_text="Fatal error, or a summary of row errors.", null=True, verbose_name="Error Message")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("completed_at", models.DateTimeField(blank=True, help_text="When the import completed.", null=True, verbose_name="Completed At")),
            ],
            options={
                "verbose_name": "Position Import",
                "verbose_name_plural": "Position Imports",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="idx_import_status"),
                    models.Index(fields=["created_at"], name="idx_import_created_at"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PositionImportError",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("row_number", models.IntegerField(verbose_name="Row Number")),
                ("error_type", models.CharField(max_length=20, verbose_name="Error Type")),
                ("error_message", models.TextField(verbose_name="Error Message")),
                ("error_code", models.CharField(blank=True, max_length=50, null=True, verbose_name="Error Code")),
                ("raw_row_data", models.JSONField(blank=True, default=list, verbose_name="Raw Row Data")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                (
                    "position_import",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="errors",
                        to="positions.positionimport",
                    ),
                ),
            ],
            options={
                "verbose_name": "Position Import Error",
                "verbose_name_plural": "Position Import Errors",
                "ordering": ["position_import", "row_number"],
            },
        ),
        migrations.CreateModel(
            name="Position",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("partner_id", models.CharField(help_text="Owning partner identifier.", max_length=50, verbose_name="Partner ID")),
                ("account_id", models.CharField(help_text="Owning account identifier.", max_length=50, verbose_name="Account ID")),
                ("position_created_date", models.DateTimeField(blank=True, null=True, verbose_name="Position Created Date")),
                ("valuation_date", models.DateTimeField(blank=True, null=True, verbose_name="Valuation Date")),
                ("as_of_date", models.DateTimeField(blank=True, null=True, verbose_name="As Of Date")),
                ("fi_unit_type_code", models.CharField(blank=True, max_length=10, null=True, verbose_name="FI Unit Type Code")),
                ("balance_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=19, null=True, verbose_name="Balance Amount")),
                ("value_amount", models.DecimalField(blank=True, decimal_places=2, help_text="Position value in the value currency.", max_digits=19, null=True, verbose_name="Value Amount")),
                ("trade_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=19, null=True, verbose_name="Trade Amount")),
                ("value_currency", models.CharField(blank=True, max_length=3, null=True, verbose_name="Value Currency")),
                ("source_currency", models.CharField(blank=True, max_length=3, null=True, verbose_name="Source Currency")),
                ("original_quantity", models.DecimalField(blank=True, decimal_places=6, max_digits=19, null=True, verbose_name="Original Quantity")),
                ("market_value_amount", models.DecimalField(blank=True, decimal_places=6, max_digits=19, null=True, verbose_name="Market Value Amount")),
                ("fx_rate", models.DecimalField(blank=True, decimal_places=12, help_text="Rate converting the value amount into the reference currency.", max_digits=19, null=True, verbose_name="FX Rate")),
                ("valor", models.CharField(blank=True, max_length=50, null=True, verbose_name="Valor")),
                ("isin", models.CharField(blank=True, max_length=12, null=True, verbose_name="ISIN")),
                ("instrument_name_short", models.CharField(blank=True, max_length=100, null=True, verbose_name="Instrument Name")),
                ("symbol_id", models.CharField(blank=True, max_length=50, null=True, verbose_name="Symbol ID")),
                ("title_group_id", models.CharField(blank=True, max_length=10, null=True, verbose_name="Title Group ID")),
                ("title_id", models.CharField(blank=True, max_length=10, null=True, verbose_name="Title ID")),
                ("title_id_description", models.CharField(blank=True, max_length=100, null=True, verbose_name="Title ID Description")),
                ("symbol_id_gpc", models.CharField(blank=True, max_length=50, null=True, verbose_name="Symbol ID (GPC)")),
                ("product_description", models.CharField(blank=True, max_length=100, null=True, verbose_name="Product Description")),
                ("product_id", models.CharField(blank=True, max_length=50, null=True, verbose_name="Product ID")),
                ("product_id_description", models.CharField(blank=True, max_length=100, null=True, verbose_name="Product ID Description")),
                ("product_class_id", models.CharField(blank=True, max_length=50, null=True, verbose_name="Product Class ID")),
                ("product_class_description", models.CharField(blank=True, max_length=100, null=True, verbose_name="Product Class Description")),
                ("product_family_id", models.CharField(blank=True, max_length=50, null=True, verbose_name="Product Family ID")),
                ("product_family_description", models.CharField(blank=True, max_length=100, null=True, verbose_name="Product Family Description")),
                ("asset_class", models.CharField(blank=True, max_length=50, null=True, verbose_name="Asset Class")),
                ("asset_class_subtype", models.CharField(blank=True, max_length=50, null=True, verbose_name="Asset Class Subtype")),
                ("asset_class_description_short", models.CharField(blank=True, help_text="Asset class label used for breakdowns.", max_length=100, null=True, verbose_name="Asset Class Description")),
                ("asset_class_description_long", models.CharField(blank=True, max_length=100, null=True, verbose_name="Asset Class Description (Long)")),
                ("uac_instr_cat_type", models.CharField(blank=True, max_length=50, null=True, verbose_name="Instrument Category Type")),
                ("instrument_id", models.CharField(blank=True, max_length=100, null=True, verbose_name="Instrument ID")),
                ("portfolio_currency", models.CharField(blank=True, max_length=3, null=True, verbose_name="Portfolio Currency")),
                ("portfolio_short_name", models.CharField(blank=True, max_length=50, null=True, verbose_name="Portfolio Short Name")),
                ("currency_id", models.CharField(blank=True, max_length=3, null=True, verbose_name="Currency ID")),
                ("mandate_pricing_id", models.CharField(blank=True, max_length=50, null=True, verbose_name="Mandate Pricing ID")),
                ("mandate_program", models.CharField(blank=True, max_length=50, null=True, verbose_name="Mandate Program")),
                ("mandate_pricing_name_short", models.CharField(blank=True, max_length=100, null=True, verbose_name="Mandate Pricing Name")),
                ("mandate_pricing_name_long", models.CharField(blank=True, max_length=200, null=True, verbose_name="Mandate Pricing Name (Long)")),
                ("mandate_pricing_type", models.CharField(blank=True, max_length=50, null=True, verbose_name="Mandate Pricing Type")),
                ("mandate_program_secondary", models.CharField(blank=True, max_length=100, null=True, verbose_name="Mandate Program (Secondary)")),
                ("investment_strategy", models.CharField(blank=True, max_length=10, null=True, verbose_name="Investment Strategy")),
                ("investment_strategy_name", models.CharField(blank=True, max_length=100, null=True, verbose_name="Investment Strategy Name")),
                ("solution_subtype_id", models.CharField(blank=True, max_length=50, null=True, verbose_name="Solution Subtype ID")),
                ("solution_subtype_name_short", models.CharField(blank=True, max_length=100, null=True, verbose_name="Solution Subtype Name")),
                ("solution_name_short", models.CharField(blank=True, max_length=100, null=True, verbose_name="Solution Name")),
                ("solution_name_long", models.CharField(blank=True, max_length=200, null=True, verbose_name="Solution Name (Long)")),
                ("mandate_type", models.CharField(blank=True, max_length=50, null=True, verbose_name="Mandate Type")),
                ("mandate_subtype", models.CharField(blank=True, max_length=100, null=True, verbose_name="Mandate Subtype")),
                ("mandate_group", models.CharField(blank=True, max_length=100, null=True, verbose_name="Mandate Group")),
                ("domicile", models.CharField(blank=True, max_length=5, null=True, verbose_name="Domicile")),
                ("client_advisor_id", models.IntegerField(blank=True, null=True, verbose_name="Client Advisor ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                (
                    "position_import",
                    models.ForeignKey(
                        blank=True,
                        help_text="Import run that created this position.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="positions",
                        to="positions.positionimport",
                    ),
                ),
            ],
            options={
                "verbose_name": "Position",
                "verbose_name_plural": "Positions",
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["partner_id"], name="idx_partner_id"),
                    models.Index(fields=["account_id"], name="idx_account_id"),
                    models.Index(fields=["asset_class_description_short"], name="idx_asset_class"),
                    models.Index(fields=["value_currency"], name="idx_value_currency"),
                    models.Index(fields=["isin"], name="idx_isin"),
                    models.Index(fields=["valuation_date"], name="idx_valuation_date"),
                    models.Index(fields=["value_amount"], name="idx_value_amount"),
                    models.Index(fields=["partner_id", "asset_class_description_short"], name="idx_partner_asset_class"),
                    models.Index(fields=["account_id", "value_currency"], name="idx_account_currency"),
                ],
            },
        ),
    ]
