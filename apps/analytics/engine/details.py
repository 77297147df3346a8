"""
Account details for one account.

Builds the currency totals, asset-class breakdown, reference-currency total,
primary currency and risk metrics of an account from its positions.

Tie-breaks:
- primary currency: largest total, then currency code, a null currency last
- dominant asset class: most positions, then label
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any, Sequence

from apps.analytics.engine.aggregation import average_value
from apps.analytics.engine.risk import RiskMetrics, compute_risk_metrics
from apps.positions.models import Position


@dataclass(frozen=True)
class PositionSummary:
    id: int | None
    instrument_name_short: str | None
    isin: str | None
    value_amount: Decimal | None
    value_currency: str | None
    asset_class_description_short: str | None
    fx_rate: Decimal | None

    @classmethod
    def from_position(cls, position: Position) -> "PositionSummary":
        return cls(
            id=position.id,
            instrument_name_short=position.instrument_name_short,
            isin=position.isin,
            value_amount=position.value_amount,
            value_currency=position.value_currency,
            asset_class_description_short=position.asset_class_description_short,
            fx_rate=position.fx_rate,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class AccountDetails:
    """
    Aggregated view of one account.

    Attributes:
        account_id: The account.
        partner_id: Partner of the first position (not cross-checked).
        position_count: Number of positions, including those without a value.
        totals_by_currency: Summed value amount per value currency, null
            currency included as its own key, in order of first appearance.
        asset_class_breakdown: Position count per asset-class label, nulls
            excluded, ordered by label.
        positions: Position summaries, or None when not requested.
        total_value_reference_currency: Sum of value amount times fx rate,
            only set when strictly positive.
        primary_currency: Currency with the largest total.
        risk_metrics: Risk metrics, None for an empty account.
    """

    account_id: str
    partner_id: str | None = None
    position_count: int = 0
    totals_by_currency: dict[str | None, Decimal] = field(default_factory=dict)
    asset_class_breakdown: dict[str, int] = field(default_factory=dict)
    positions: list[PositionSummary] | None = None
    total_value_reference_currency: Decimal | None = None
    primary_currency: str | None = None
    risk_metrics: RiskMetrics | None = None

    @property
    def total_value(self) -> Decimal:
        return sum(self.totals_by_currency.values(), Decimal("0"))

    @property
    def average_position_value(self) -> Decimal:
        return average_value(self.total_value, self.position_count) or Decimal("0")

    @property
    def is_diversified(self) -> bool:
        return len(self.asset_class_breakdown) > 2

    @property
    def dominant_asset_class(self) -> str | None:
        if not self.asset_class_breakdown:
            return None
        return min(
            self.asset_class_breakdown.items(), key=lambda item: (-item[1], item[0])
        )[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "partner_id": self.partner_id,
            "position_count": self.position_count,
            "totals_by_currency": self.totals_by_currency,
            "asset_class_breakdown": self.asset_class_breakdown,
            "positions": (
                [p.to_dict() for p in self.positions]
                if self.positions is not None
                else None
            ),
            "total_value_reference_currency": self.total_value_reference_currency,
            "primary_currency": self.primary_currency,
            "risk_metrics": self.risk_metrics.to_dict() if self.risk_metrics else None,
            "total_value": self.total_value,
            "average_position_value": self.average_position_value,
            "is_diversified": self.is_diversified,
            "dominant_asset_class": self.dominant_asset_class,
        }


def totals_by_currency(positions: Sequence[Position]) -> dict[str | None, Decimal]:
    """Summed value amount per value currency; a null amount counts as zero."""
    totals: dict[str | None, Decimal] = {}
    for position in positions:
        amount = position.value_amount if position.value_amount is not None else Decimal("0")
        totals[position.value_currency] = (
            totals.get(position.value_currency, Decimal("0")) + amount
        )
    return totals


def asset_class_breakdown(positions: Sequence[Position]) -> dict[str, int]:
    counts = Counter(
        p.asset_class_description_short
        for p in positions
        if p.asset_class_description_short is not None
    )
    return dict(sorted(counts.items()))


def reference_currency_total(positions: Sequence[Position]) -> Decimal | None:
    """Sum of value amount times fx rate; None unless strictly positive."""
    total = sum(
        (
            p.value_amount * p.fx_rate
            for p in positions
            if p.value_amount is not None and p.fx_rate is not None
        ),
        Decimal("0"),
    )
    return total if total > 0 else None


def primary_currency(totals: dict[str | None, Decimal]) -> str | None:
    if not totals:
        return None
    ranked = sorted(
        totals.items(),
        key=lambda item: (-item[1], item[0] is None, item[0] or ""),
    )
    return ranked[0][0]


def build_account_details(
    account_id: str, positions: Sequence[Position], include_positions: bool = True
) -> AccountDetails:
    """
    Build the details of one account from its positions.

    Args:
        account_id: The account.
        positions: Every position of the account.
        include_positions: Attach position summaries.

    Returns:
        AccountDetails: With position_count 0 and nothing else computed when
            ``positions`` is empty.
    """
    if not positions:
        return AccountDetails(account_id=account_id)

    totals = totals_by_currency(positions)
    return AccountDetails(
        account_id=account_id,
        partner_id=positions[0].partner_id,
        position_count=len(positions),
        totals_by_currency=totals,
        asset_class_breakdown=asset_class_breakdown(positions),
        positions=(
            [PositionSummary.from_position(p) for p in positions]
            if include_positions
            else None
        ),
        total_value_reference_currency=reference_currency_total(positions),
        primary_currency=primary_currency(totals),
        risk_metrics=compute_risk_metrics(positions, totals),
    )


def get_account_details(account_id: str, include_positions: bool = True) -> AccountDetails:
    """Account details read from the stored positions of ``account_id``."""
    positions = list(Position.objects.for_account(account_id).order_by("id"))
    return build_account_details(account_id, positions, include_positions)
