"""
Tests for the analytics API views.
"""

from decimal import Decimal

from django.urls import reverse

from tests.factories import PositionFactory


class TestAccountViews:
    def test_account_summaries(self, client):
        PositionFactory(account_id="A-1", partner_id="P-1", value_amount=Decimal("100"))
        PositionFactory(account_id="A-1", partner_id="P-1", value_amount=Decimal("0"))
        PositionFactory(account_id="A-1", partner_id="P-1", value_amount=Decimal("0"))

        body = client.get(reverse("analytics:account_summaries")).json()

        assert body == [
            {
                "account_id": "A-1",
                "partner_id": "P-1",
                "position_count": 3,
                "total_value": "100.00",
                "currency": "CHF",
                "average_position_value": "33.33",
            }
        ]

    def test_account_ids(self, client):
        PositionFactory(account_id="B")
        PositionFactory(account_id="A")

        assert client.get(reverse("analytics:account_ids")).json() == ["A", "B"]

    def test_account_details(self, client):
        PositionFactory(account_id="A-1", value_amount=Decimal("900"))
        PositionFactory(account_id="A-1", value_amount=Decimal("100"), source_currency="USD")

        response = client.get(reverse("analytics:account_details", args=["A-1"]))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["position_count"] == 2
        assert body["primary_currency"] == "CHF"
        assert body["totals_by_currency"] == {"CHF": "1000.00"}
        assert body["risk_metrics"]["risk_level"] == "HIGH"
        assert body["risk_metrics"]["has_fx_exposure"] is True
        assert Decimal(body["risk_metrics"]["concentration_risk"]) == Decimal("90")
        assert len(body["positions"]) == 2

    def test_account_details_without_positions(self, client):
        PositionFactory(account_id="A-1")

        body = client.get(
            reverse("analytics:account_details", args=["A-1"]),
            {"includePositions": "false"},
        ).json()

        assert body["positions"] is None
        assert body["position_count"] == 1

    def test_account_details_unknown_account(self, client):
        response = client.get(reverse("analytics:account_details", args=["A-404"]))

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Not found: Account A-404 has no positions",
        }


class TestSummaryViews:
    def test_portfolio_summary(self, client):
        PositionFactory(value_currency="EUR")

        body = client.get(reverse("analytics:portfolio_summary")).json()

        assert body["success"] is True
        assert body["total_positions"] == 1
        assert body["currencies"] == ["EUR"]

    def test_partner_summary(self, client):
        PositionFactory(partner_id="P-1", value_amount=Decimal("10"), fx_rate=Decimal("2"))

        body = client.get(reverse("analytics:partner_summary", args=["P-1"])).json()

        assert body["partner_id"] == "P-1"
        assert body["position_count"] == 1
        assert Decimal(body["reference_value_positions"][0]["reference_value"]) == 20

    def test_database_stats(self, client):
        assert client.get(reverse("analytics:database_stats")).json() == {
            "success": True,
            "total_records": 0,
            "database_status": "empty",
        }

    def test_post_not_allowed(self, client):
        assert client.post(reverse("analytics:database_stats")).status_code == 405
