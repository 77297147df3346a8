"""
Risk metrics for one account.

Pure functions over a list of positions and the account's totals by currency.

Risk tiers are evaluated in order, first match wins:
- HIGH: concentration above 50% or more than 5 currencies
- MEDIUM: concentration above 25% or more than 3 currencies
- LOW: everything else
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Sequence

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.positions.models import Position

HIGH_CONCENTRATION_PCT = Decimal("50")
MEDIUM_CONCENTRATION_PCT = Decimal("25")
HIGH_CURRENCY_COUNT = 5
MEDIUM_CURRENCY_COUNT = 3

RATIO_PRECISION = Decimal("0.0001")


class RiskLevel(models.TextChoices):
    LOW = "LOW", _("Low")
    MEDIUM = "MEDIUM", _("Medium")
    HIGH = "HIGH", _("High")


@dataclass(frozen=True)
class RiskMetrics:
    currency_count: int
    asset_class_count: int
    concentration_risk: Decimal
    has_fx_exposure: bool
    risk_level: RiskLevel

    def to_dict(self) -> dict[str, Any]:
        return {
            "currency_count": self.currency_count,
            "asset_class_count": self.asset_class_count,
            "concentration_risk": self.concentration_risk,
            "has_fx_exposure": self.has_fx_exposure,
            "risk_level": self.risk_level.value,
        }


def classify_risk_level(concentration_risk: Decimal, currency_count: int) -> RiskLevel:
    """
    Map concentration (percent) and currency count to a risk tier.

    Example:
        >>> classify_risk_level(Decimal("10"), 6)
        <RiskLevel.HIGH: 'HIGH'>
        >>> classify_risk_level(Decimal("0"), 4)
        <RiskLevel.MEDIUM: 'MEDIUM'>
    """
    if concentration_risk > HIGH_CONCENTRATION_PCT or currency_count > HIGH_CURRENCY_COUNT:
        return RiskLevel.HIGH
    if (
        concentration_risk > MEDIUM_CONCENTRATION_PCT
        or currency_count > MEDIUM_CURRENCY_COUNT
    ):
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def compute_concentration_risk(
    positions: Sequence[Position], total_value: Decimal
) -> Decimal:
    """
    Largest single value amount as a percentage of ``total_value``.

    The ratio is rounded half-up to 4 places before scaling by 100. Returns 0
    when the total is not strictly positive.
    """
    if total_value <= 0:
        return Decimal("0")
    largest = max(
        (p.value_amount for p in positions if p.value_amount is not None),
        default=Decimal("0"),
    )
    ratio = (largest / total_value).quantize(RATIO_PRECISION, rounding=ROUND_HALF_UP)
    return ratio * 100


def has_fx_exposure(positions: Sequence[Position]) -> bool:
    return any(p.has_fx_exposure for p in positions)


def compute_risk_metrics(
    positions: Sequence[Position], totals_by_currency: Mapping[str | None, Decimal]
) -> RiskMetrics:
    """
    Compute risk metrics for one account.

    Args:
        positions: All positions of the account.
        totals_by_currency: Summed value amount per value currency, as built
            for the account details.

    Returns:
        RiskMetrics: Counts, concentration, FX exposure and tier.
    """
    currency_count = len(totals_by_currency)
    asset_class_count = len(
        {
            p.asset_class_description_short
            for p in positions
            if p.asset_class_description_short is not None
        }
    )
    total_value = sum(totals_by_currency.values(), Decimal("0"))
    concentration = compute_concentration_risk(positions, total_value)

    return RiskMetrics(
        currency_count=currency_count,
        asset_class_count=asset_class_count,
        concentration_risk=concentration,
        has_fx_exposure=has_fx_exposure(positions),
        risk_level=classify_risk_level(concentration, currency_count),
    )
