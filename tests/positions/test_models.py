"""
Tests for position models and the position store.
"""

from decimal import Decimal

import pytest

from apps.positions.models import Position, PositionImport
from apps.positions.services.positions import (
    bulk_insert_positions,
    clear_all_positions,
    delete_position,
    delete_positions,
    distinct_account_ids,
    existing_position_count,
    filter_positions,
    ordered_positions,
    top_positions,
    value_by_asset_class,
    value_by_currency,
)
from libs.choices import ImportStatus
from tests.factories import PositionFactory, PositionImportFactory


class TestPositionModel:
    def test_str(self):
        position = PositionFactory(
            account_id="A-1",
            instrument_name_short="Nestle SA",
            value_amount=Decimal("10.00"),
            value_currency="CHF",
        )
        assert str(position) == "A-1 - Nestle SA (10.00 CHF)"

    def test_is_active(self):
        assert PositionFactory().is_active
        assert not PositionFactory(value_amount=None).is_active

    @pytest.mark.parametrize(
        "value_currency,source_currency,expected",
        [
            ("CHF", "USD", True),
            ("CHF", "CHF", False),
            ("CHF", None, False),
            (None, "USD", False),
        ],
    )
    def test_has_fx_exposure(self, value_currency, source_currency, expected):
        position = PositionFactory.build(
            value_currency=value_currency, source_currency=source_currency
        )
        assert position.has_fx_exposure is expected


class TestPositionImportModel:
    def test_defaults(self):
        position_import = PositionImportFactory()

        assert position_import.status == ImportStatus.PENDING
        assert position_import.rows_total == 0
        assert position_import.completed_at is None

    def test_positions_keep_existing_after_import_deleted(self):
        position_import = PositionImportFactory()
        position = PositionFactory(position_import=position_import)

        position_import.delete()

        position.refresh_from_db()
        assert position.position_import is None


class TestPositionQuerySet:
    def test_lookups(self):
        match = PositionFactory(
            partner_id="P-1",
            account_id="A-1",
            asset_class_description_short="Bonds",
            value_currency="EUR",
            isin="XS0000000001",
        )
        PositionFactory()

        assert list(Position.objects.for_partner("P-1")) == [match]
        assert list(Position.objects.for_account("A-1")) == [match]
        assert list(Position.objects.for_asset_class("Bonds")) == [match]
        assert list(Position.objects.for_currency("EUR")) == [match]
        assert list(Position.objects.for_isin("XS0000000001")) == [match]

    def test_lookups_are_exact(self):
        PositionFactory(partner_id="P-10")

        assert not Position.objects.for_partner("P-1").exists()

    def test_instrument_name_contains_ignores_case(self):
        match = PositionFactory(instrument_name_short="Roche Holding")
        PositionFactory(instrument_name_short="Novartis")

        assert list(Position.objects.instrument_name_contains("ROCHE")) == [match]

    def test_with_value_above_is_strict(self):
        above = PositionFactory(value_amount=Decimal("100.01"))
        PositionFactory(value_amount=Decimal("100.00"))
        PositionFactory(value_amount=None)

        assert list(Position.objects.with_value_above(Decimal("100"))) == [above]

    def test_search_matches_any_identifier(self):
        by_name = PositionFactory(instrument_name_short="UBS Group")
        by_account = PositionFactory(account_id="UBS-ACCOUNT")
        PositionFactory(instrument_name_short="Swiss Re", account_id="A-9")

        assert set(Position.objects.search("ubs")) == {by_name, by_account}


class TestPositionStore:
    def test_bulk_insert(self):
        positions = [PositionFactory.build() for _ in range(3)]

        assert bulk_insert_positions(positions) == 3
        assert existing_position_count() == 3

    def test_clear_all_positions(self):
        PositionFactory.create_batch(3)

        assert clear_all_positions() == 3
        assert existing_position_count() == 0

    def test_clear_all_positions_keeps_import_runs(self):
        PositionFactory(position_import=PositionImportFactory())

        clear_all_positions()

        assert PositionImport.objects.count() == 1

    def test_delete_position(self):
        position = PositionFactory()

        assert delete_position(position.id) is True
        assert delete_position(position.id) is False

    def test_delete_positions_ignores_unknown_ids(self):
        first, second, keep = PositionFactory.create_batch(3)

        assert delete_positions([first.id, second.id, 999999]) == 2
        assert list(Position.objects.all()) == [keep]

    def test_filter_positions_combines_criteria(self):
        match = PositionFactory(
            partner_id="P-1", value_currency="USD", value_amount=Decimal("500")
        )
        PositionFactory(partner_id="P-1", value_currency="USD", value_amount=Decimal("5"))
        PositionFactory(partner_id="P-1", value_currency="CHF", value_amount=Decimal("500"))
        PositionFactory(partner_id="P-2", value_currency="USD", value_amount=Decimal("500"))

        result = filter_positions(partner_id="P-1", currency="USD", min_value=Decimal("100"))

        assert list(result) == [match]

    def test_filter_positions_without_criteria_returns_all(self):
        PositionFactory.create_batch(2)

        assert filter_positions().count() == 2

    def test_ordered_positions(self):
        low = PositionFactory(value_amount=Decimal("1"))
        high = PositionFactory(value_amount=Decimal("3"))
        mid = PositionFactory(value_amount=Decimal("2"))

        assert list(ordered_positions("value_amount,desc")) == [high, mid, low]
        assert list(ordered_positions("value_amount")) == [low, mid, high]
        assert list(ordered_positions(None)) == [low, high, mid]

    @pytest.mark.parametrize("sort", ["password,asc", "value_amount,sideways"])
    def test_ordered_positions_rejects_bad_sort(self, sort):
        with pytest.raises(ValueError):
            ordered_positions(sort)

    def test_top_positions_skips_null_values(self):
        PositionFactory(value_amount=None)
        small = PositionFactory(value_amount=Decimal("10"))
        big = PositionFactory(value_amount=Decimal("1000"))

        assert top_positions(5) == [big, small]
        assert top_positions(1) == [big]

    def test_distinct_account_ids(self):
        PositionFactory(account_id="B")
        PositionFactory(account_id="A")
        PositionFactory(account_id="B")

        assert distinct_account_ids() == ["A", "B"]

    def test_value_by_asset_class(self):
        PositionFactory(asset_class_description_short="Bonds", value_amount=Decimal("10"))
        PositionFactory(asset_class_description_short="Equities", value_amount=Decimal("30"))
        PositionFactory(asset_class_description_short="Bonds", value_amount=Decimal("5"))

        rows = value_by_asset_class()

        assert rows == [
            {"asset_class": "Equities", "position_count": 1, "total_value": Decimal("30")},
            {"asset_class": "Bonds", "position_count": 2, "total_value": Decimal("15")},
        ]

    def test_value_by_currency(self):
        PositionFactory(value_currency="USD", value_amount=Decimal("10"))
        PositionFactory(value_currency="CHF", value_amount=Decimal("20"))

        rows = value_by_currency()

        assert [row["currency"] for row in rows] == ["CHF", "USD"]
        assert rows[0]["total_value"] == Decimal("20")
