"""
Tests for the analytics engine.

Most tests run on unsaved positions built in memory; the ``get_*`` functions
are checked against the database.
"""

from decimal import Decimal

import pytest

from apps.analytics.engine import (
    RiskLevel,
    build_account_details,
    classify_risk_level,
    compute_risk_metrics,
    get_account_details,
    get_account_summaries,
    get_database_stats,
    get_portfolio_summary,
    summarize_accounts,
    summarize_partner,
)
from apps.analytics.engine.details import (
    asset_class_breakdown,
    primary_currency,
    reference_currency_total,
    totals_by_currency,
)
from apps.analytics.engine.risk import compute_concentration_risk
from apps.positions.models import Position
from tests.factories import PositionFactory


def build(value, currency="CHF", **kwargs):
    amount = Decimal(value) if value is not None else None
    kwargs.setdefault("account_id", "A-1")
    kwargs.setdefault("partner_id", "P-1")
    return PositionFactory.build(value_amount=amount, value_currency=currency, **kwargs)


class TestClassifyRiskLevel:
    @pytest.mark.parametrize(
        "concentration,currencies,expected",
        [
            ("50.0001", 1, RiskLevel.HIGH),
            ("50", 1, RiskLevel.MEDIUM),
            ("25.01", 1, RiskLevel.MEDIUM),
            ("25", 1, RiskLevel.LOW),
            ("0", 6, RiskLevel.HIGH),
            ("0", 5, RiskLevel.MEDIUM),
            ("0", 4, RiskLevel.MEDIUM),
            ("0", 3, RiskLevel.LOW),
            ("90", 6, RiskLevel.HIGH),
        ],
    )
    def test_tiers(self, concentration, currencies, expected):
        assert classify_risk_level(Decimal(concentration), currencies) == expected


class TestConcentrationRisk:
    def test_largest_share_in_percent(self):
        positions = [build("900"), build("100")]

        assert compute_concentration_risk(positions, Decimal("1000")) == Decimal("90.0000")

    def test_ratio_rounded_half_up_before_scaling(self):
        positions = [build("1"), build("2")]

        # 2 / 3 = 0.66666... -> 0.6667
        assert compute_concentration_risk(positions, Decimal("3")) == Decimal("66.67")

    @pytest.mark.parametrize("total", ["0", "-10"])
    def test_non_positive_total_is_zero(self, total):
        assert compute_concentration_risk([build("5")], Decimal(total)) == 0

    def test_null_values_ignored(self):
        positions = [build(None), build("10")]

        assert compute_concentration_risk(positions, Decimal("10")) == Decimal("100")


class TestRiskMetrics:
    def test_concentrated_account_is_high(self):
        positions = [build("900"), build("100")]

        metrics = compute_risk_metrics(positions, totals_by_currency(positions))

        assert metrics.concentration_risk == Decimal("90")
        assert metrics.currency_count == 1
        assert metrics.risk_level == RiskLevel.HIGH

    def test_four_currencies_is_medium(self):
        positions = [build("100", c) for c in ("CHF", "EUR", "USD", "GBP")]

        metrics = compute_risk_metrics(positions, totals_by_currency(positions))

        assert metrics.concentration_risk == Decimal("25")
        assert metrics.currency_count == 4
        assert metrics.risk_level == RiskLevel.MEDIUM

    def test_six_currencies_is_high(self):
        currencies = ("CHF", "EUR", "USD", "GBP", "JPY", "SEK")
        positions = [build("100", c) for c in currencies]

        metrics = compute_risk_metrics(positions, totals_by_currency(positions))

        assert metrics.currency_count == 6
        assert metrics.risk_level == RiskLevel.HIGH

    def test_spread_account_is_low(self):
        positions = [build("100", "CHF") for _ in range(5)]

        metrics = compute_risk_metrics(positions, totals_by_currency(positions))

        assert metrics.concentration_risk == Decimal("20")
        assert metrics.risk_level == RiskLevel.LOW

    def test_fx_exposure(self):
        hedged = [build("100", "CHF", source_currency="CHF")]
        exposed = hedged + [build("100", "CHF", source_currency="USD")]

        assert not compute_risk_metrics(hedged, totals_by_currency(hedged)).has_fx_exposure
        assert compute_risk_metrics(exposed, totals_by_currency(exposed)).has_fx_exposure

    def test_asset_class_count_ignores_null(self):
        positions = [
            build("1", asset_class_description_short="Equities"),
            build("1", asset_class_description_short="Bonds"),
            build("1", asset_class_description_short=None),
        ]

        metrics = compute_risk_metrics(positions, totals_by_currency(positions))

        assert metrics.asset_class_count == 2

    def test_to_dict(self):
        positions = [build("100")]

        data = compute_risk_metrics(positions, totals_by_currency(positions)).to_dict()

        assert data["risk_level"] == "HIGH"
        assert data["concentration_risk"] == Decimal("100")


class TestAccountDetailParts:
    def test_totals_by_currency_keeps_first_appearance_order(self):
        positions = [build("5", "USD"), build("10", "CHF"), build(None, "USD"), build("1", None)]

        totals = totals_by_currency(positions)

        assert list(totals) == ["USD", "CHF", None]
        assert totals["USD"] == Decimal("5")
        assert totals[None] == Decimal("1")

    def test_asset_class_breakdown_sorted_by_label(self):
        positions = [
            build("1", asset_class_description_short="Equities"),
            build("1", asset_class_description_short="Bonds"),
            build("1", asset_class_description_short="Equities"),
            build("1", asset_class_description_short=None),
        ]

        assert asset_class_breakdown(positions) == {"Bonds": 1, "Equities": 2}
        assert list(asset_class_breakdown(positions)) == ["Bonds", "Equities"]

    def test_reference_currency_total(self):
        positions = [
            build("100", fx_rate=Decimal("0.9")),
            build("50", fx_rate=None),
            build("10", fx_rate=Decimal("2")),
        ]

        assert reference_currency_total(positions) == Decimal("110")

    def test_reference_currency_total_absent_unless_positive(self):
        assert reference_currency_total([build("0", fx_rate=Decimal("1"))]) is None
        assert reference_currency_total([build("-5", fx_rate=Decimal("1"))]) is None
        assert reference_currency_total([build(None)]) is None

    @pytest.mark.parametrize(
        "totals,expected",
        [
            ({"USD": Decimal("5"), "CHF": Decimal("10")}, "CHF"),
            ({"USD": Decimal("10"), "CHF": Decimal("10")}, "CHF"),
            ({None: Decimal("10"), "USD": Decimal("10")}, "USD"),
            ({None: Decimal("10")}, None),
            ({}, None),
        ],
    )
    def test_primary_currency_tie_breaks(self, totals, expected):
        assert primary_currency(totals) == expected


class TestBuildAccountDetails:
    def test_full_details(self):
        positions = [
            build("100", "CHF", fx_rate=Decimal("1"), asset_class_description_short="Equities"),
            build("50", "EUR", fx_rate=Decimal("1"), asset_class_description_short="Bonds"),
            build("0", "CHF", fx_rate=Decimal("1"), asset_class_description_short="Equities"),
        ]

        details = build_account_details("A-1", positions)

        assert details.partner_id == "P-1"
        assert details.position_count == 3
        assert details.totals_by_currency == {"CHF": Decimal("100"), "EUR": Decimal("50")}
        assert details.primary_currency == "CHF"
        assert details.total_value == Decimal("150")
        assert details.average_position_value == Decimal("50.00")
        assert details.total_value_reference_currency == Decimal("150")
        assert details.dominant_asset_class == "Equities"
        assert details.is_diversified is False
        assert len(details.positions) == 3

    def test_average_is_rounded_half_up(self):
        positions = [build("100"), build("0"), build("0")]

        details = build_account_details("A-1", positions)

        assert details.average_position_value == Decimal("33.33")

    def test_dominant_asset_class_tie_breaks_on_label(self):
        positions = [
            build("1", asset_class_description_short="Equities"),
            build("1", asset_class_description_short="Bonds"),
            build("1", asset_class_description_short="Cash"),
        ]

        details = build_account_details("A-1", positions)

        assert details.dominant_asset_class == "Bonds"
        assert details.is_diversified is True

    def test_without_positions_list(self):
        details = build_account_details("A-1", [build("1")], include_positions=False)

        assert details.positions is None
        assert details.to_dict()["positions"] is None

    def test_empty_account(self):
        details = build_account_details("A-404", [])

        assert details.position_count == 0
        assert details.totals_by_currency == {}
        assert details.average_position_value == Decimal("0")
        assert details.primary_currency is None
        assert details.risk_metrics is None
        assert details.dominant_asset_class is None

    def test_to_dict(self):
        data = build_account_details("A-1", [build("10")]).to_dict()

        assert data["account_id"] == "A-1"
        assert data["risk_metrics"]["risk_level"] == "HIGH"
        assert data["positions"][0]["value_amount"] == Decimal("10")


class TestSummarizeAccounts:
    def test_groups_by_account_partner_and_currency(self):
        positions = [
            build("100", "CHF", account_id="A-2"),
            build("50", "USD", account_id="A-1"),
            build("25", "CHF", account_id="A-1"),
            build("25", "CHF", account_id="A-1"),
        ]

        summaries = summarize_accounts(positions)

        assert [(s.account_id, s.currency) for s in summaries] == [
            ("A-1", "CHF"),
            ("A-1", "USD"),
            ("A-2", "CHF"),
        ]
        assert summaries[0].position_count == 2
        assert summaries[0].total_value == Decimal("50")
        assert summaries[0].average_position_value == Decimal("25.00")

    def test_average_rounded_half_up(self):
        summaries = summarize_accounts([build("100"), build("0"), build("0")])

        assert summaries[0].average_position_value == Decimal("33.33")

    def test_group_without_values_has_null_total(self):
        summary = summarize_accounts([build(None), build(None)])[0]

        assert summary.position_count == 2
        assert summary.total_value is None
        assert summary.average_position_value is None

    def test_null_currency_sorts_last(self):
        summaries = summarize_accounts([build("1", None), build("1", "USD")])

        assert [s.currency for s in summaries] == ["USD", None]


class TestDatabaseQueries:
    def test_account_summaries_match_in_memory_grouping(self):
        PositionFactory(account_id="A-1", partner_id="P-1", value_amount=Decimal("10"))
        PositionFactory(account_id="A-1", partner_id="P-1", value_amount=Decimal("20"))
        PositionFactory(
            account_id="A-1", partner_id="P-1", value_currency=None, value_amount=None
        )
        PositionFactory(account_id="A-2", partner_id="P-1", value_currency="EUR")

        summaries = get_account_summaries()

        assert [s.to_dict() for s in summaries] == [
            s.to_dict() for s in summarize_accounts(Position.objects.all())
        ]
        assert summaries[0].total_value == Decimal("30")
        assert summaries[1].currency is None
        assert summaries[1].total_value is None

    def test_get_account_details(self):
        PositionFactory(account_id="A-1", value_amount=Decimal("900"))
        PositionFactory(account_id="A-1", value_amount=Decimal("100"))
        PositionFactory(account_id="A-2")

        details = get_account_details("A-1")

        assert details.position_count == 2
        assert details.risk_metrics.concentration_risk == Decimal("90")
        assert details.risk_metrics.risk_level == RiskLevel.HIGH

    def test_get_account_details_unknown_account(self):
        assert get_account_details("nope").position_count == 0

    def test_summarize_partner(self):
        PositionFactory(
            partner_id="P-1",
            asset_class_description_short="Bonds",
            value_amount=Decimal("100"),
            fx_rate=Decimal("2"),
        )
        PositionFactory(
            partner_id="P-1",
            asset_class_description_short="Equities",
            value_amount=Decimal("300"),
            fx_rate=Decimal("0.5"),
        )
        PositionFactory(partner_id="P-1", value_amount=None)
        PositionFactory(partner_id="P-2")

        summary = summarize_partner("P-1")

        assert summary["position_count"] == 3
        assert [row["asset_class"] for row in summary["asset_class_breakdown"]] == [
            "Equities",
            "Bonds",
        ]
        assert [row["reference_value"] for row in summary["reference_value_positions"]] == [
            Decimal("200"),
            Decimal("150"),
        ]

    def test_portfolio_summary(self):
        PositionFactory(value_currency="CHF", mandate_type="Discretionary")
        PositionFactory(value_currency="EUR", asset_class_description_short="Bonds")

        summary = get_portfolio_summary()

        assert summary["total_positions"] == 2
        assert summary["asset_classes"] == ["Bonds", "Equities"]
        assert summary["currencies"] == ["CHF", "EUR"]
        assert summary["mandate_types"] == ["Advisory", "Discretionary"]

    def test_database_stats_empty(self):
        assert get_database_stats() == {"total_records": 0, "database_status": "empty"}

    def test_database_stats_populated(self):
        PositionFactory(account_id="A-1", partner_id="P-1")
        PositionFactory(account_id="A-1", partner_id="P-1", value_currency="USD")
        PositionFactory(account_id="A-2", partner_id="P-1")

        stats = get_database_stats()

        assert stats["total_records"] == 3
        assert stats["database_status"] == "populated"
        assert stats["unique_accounts"] == 2
        assert stats["unique_partners"] == 1
        assert stats["unique_currencies"] == 2
        assert stats["unique_asset_classes"] == 1
