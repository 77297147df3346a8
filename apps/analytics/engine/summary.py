"""
Store-wide and per-partner summaries.

Key functions:
- summarize_partner: Asset-class breakdown and reference-currency values of one partner
- get_portfolio_summary: Totals by asset class and currency, distinct listings
- get_database_stats: Record count and distinct account/partner counts
"""

from __future__ import annotations

from typing import Any

from django.db.models import Count, F, Sum

from apps.analytics.engine.details import PositionSummary
from apps.positions.models import Position
from apps.positions.services.positions import (
    distinct_values,
    existing_position_count,
    value_by_asset_class,
    value_by_currency,
)


def summarize_partner(partner_id: str) -> dict[str, Any]:
    """
    Summary of one partner's positions.

    Returns:
        dict: {
            'partner_id': str,
            'position_count': int,
            'asset_class_breakdown': [{'asset_class', 'position_count', 'total_value'}, ...],
            'reference_value_positions': [{'position': {...}, 'reference_value': Decimal}, ...],
        }
        The breakdown is ordered by total value, the positions by reference
        value (value amount times fx rate), both largest first. Positions
        without a value amount or fx rate have no reference value and are left out.
    """
    positions = Position.objects.for_partner(partner_id)

    breakdown = [
        {
            "asset_class": row["asset_class_description_short"],
            "position_count": row["position_count"],
            "total_value": row["total_value"],
        }
        for row in positions.values("asset_class_description_short")
        .annotate(position_count=Count("id"), total_value=Sum("value_amount"))
        .order_by(F("total_value").desc(nulls_last=True), "asset_class_description_short")
    ]

    valued = [
        (position, position.value_amount * position.fx_rate)
        for position in positions.filter(
            value_amount__isnull=False, fx_rate__isnull=False
        ).order_by("id")
    ]
    valued.sort(key=lambda item: item[1], reverse=True)

    return {
        "partner_id": partner_id,
        "position_count": positions.count(),
        "asset_class_breakdown": breakdown,
        "reference_value_positions": [
            {
                "position": PositionSummary.from_position(position).to_dict(),
                "reference_value": reference_value,
            }
            for position, reference_value in valued
        ],
    }


def get_portfolio_summary() -> dict[str, Any]:
    return {
        "total_positions": existing_position_count(),
        "value_by_asset_class": value_by_asset_class(),
        "value_by_currency": value_by_currency(),
        "asset_classes": distinct_values("asset_class_description_short"),
        "currencies": distinct_values("value_currency"),
        "mandate_types": distinct_values("mandate_type"),
    }


def get_database_stats() -> dict[str, Any]:
    """Record count, and distinct counts once the store is populated."""
    total = existing_position_count()
    stats: dict[str, Any] = {
        "total_records": total,
        "database_status": "populated" if total > 0 else "empty",
    }
    if total > 0:
        stats.update(
            {
                "unique_asset_classes": len(distinct_values("asset_class_description_short")),
                "unique_currencies": len(distinct_values("value_currency")),
                "unique_accounts": Position.objects.order_by().values("account_id").distinct().count(),
                "unique_partners": Position.objects.order_by().values("partner_id").distinct().count(),
            }
        )
    return stats

