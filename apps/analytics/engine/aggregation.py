"""
Account summary aggregation.

Groups positions by (account id, partner id, value currency) and computes the
position count, summed value amount and average position value of each group.

Key functions:
- summarize_accounts: Pure aggregation over a sequence of positions
- get_account_summaries: Same result, grouped in the database
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from django.db.models import Count, Sum

from apps.positions.models import Position

AMOUNT_PRECISION = Decimal("0.01")


def average_value(total: Decimal | None, count: int) -> Decimal | None:
    """``total / count`` rounded half-up to 2 places; None if undefined."""
    if total is None or count <= 0:
        return None
    return (total / count).quantize(AMOUNT_PRECISION, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AccountSummary:
    account_id: str
    partner_id: str | None
    position_count: int
    total_value: Decimal | None
    currency: str | None

    @property
    def average_position_value(self) -> Decimal | None:
        return average_value(self.total_value, self.position_count)

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "partner_id": self.partner_id,
            "position_count": self.position_count,
            "total_value": self.total_value,
            "currency": self.currency,
            "average_position_value": self.average_position_value,
        }


def _sort_key(summary: AccountSummary):
    # null currency sorts after every code
    return (
        summary.account_id,
        summary.currency is None,
        summary.currency or "",
        summary.partner_id or "",
    )


def summarize_accounts(positions: Iterable[Position]) -> list[AccountSummary]:
    """
    Group positions into account summaries.

    A group whose positions all lack a value amount has a null total and a
    null average.

    Args:
        positions: Any iterable of positions.

    Returns:
        list[AccountSummary]: Ordered by account id, then currency.
    """
    counts: dict[tuple, int] = defaultdict(int)
    totals: dict[tuple, Decimal | None] = {}

    for position in positions:
        key = (position.account_id, position.partner_id, position.value_currency)
        counts[key] += 1
        total = totals.get(key)
        if position.value_amount is not None:
            total = (total or Decimal("0")) + position.value_amount
        totals[key] = total

    summaries = [
        AccountSummary(
            account_id=account_id,
            partner_id=partner_id,
            position_count=count,
            total_value=totals[(account_id, partner_id, currency)],
            currency=currency,
        )
        for (account_id, partner_id, currency), count in counts.items()
    ]
    return sorted(summaries, key=_sort_key)


def get_account_summaries() -> list[AccountSummary]:
    """Account summaries for every stored position, grouped by the database."""
    rows = (
        Position.objects.values("account_id", "partner_id", "value_currency")
        .annotate(position_count=Count("id"), total_value=Sum("value_amount"))
        .order_by("account_id", "value_currency", "partner_id")
    )
    summaries = [
        AccountSummary(
            account_id=row["account_id"],
            partner_id=row["partner_id"],
            position_count=row["position_count"],
            total_value=row["total_value"],
            currency=row["value_currency"],
        )
        for row in rows
    ]
    return sorted(summaries, key=_sort_key)
