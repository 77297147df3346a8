"""
Position store.

Thin ORM layer used by the importer, the API views and the analytics engine:
batch insert, counts, lookups, filters, deletes and grouped value queries.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from django.db import transaction
from django.db.models import Count, Sum

from apps.positions.models import Position

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = frozenset(
    {
        "id",
        "partner_id",
        "account_id",
        "value_amount",
        "value_currency",
        "valuation_date",
        "as_of_date",
        "position_created_date",
        "instrument_name_short",
        "isin",
        "asset_class_description_short",
        "created_at",
    }
)


def bulk_insert_positions(positions: list[Position]) -> int:
    """Insert one batch of unsaved positions in a single transaction."""
    with transaction.atomic():
        Position.objects.bulk_create(positions, batch_size=len(positions) or None)
    return len(positions)


def existing_position_count() -> int:
    return Position.objects.count()


def clear_all_positions() -> int:
    """
    Delete every position. Irreversible.

    Returns:
        int: Number of positions deleted.
    """
    logger.warning("Clearing all portfolio positions from database")
    with transaction.atomic():
        deleted, _ = Position.objects.all().delete()
    return deleted


def get_position(position_id: int) -> Position | None:
    return Position.objects.filter(pk=position_id).first()


def delete_position(position_id: int) -> bool:
    """Delete one position. Returns False if it did not exist."""
    deleted, _ = Position.objects.filter(pk=position_id).delete()
    return deleted > 0


def delete_positions(position_ids: Iterable[int]) -> int:
    """Delete the positions among ``position_ids`` that exist."""
    with transaction.atomic():
        deleted, _ = Position.objects.filter(pk__in=list(position_ids)).delete()
    return deleted


def filter_positions(
    partner_id: str | None = None,
    account_id: str | None = None,
    asset_class: str | None = None,
    currency: str | None = None,
    min_value: Decimal | None = None,
    search: str | None = None,
    isin: str | None = None,
):
    """Combine optional criteria; a None criterion does not restrict."""
    queryset = Position.objects.all()
    if partner_id:
        queryset = queryset.for_partner(partner_id)
    if account_id:
        queryset = queryset.for_account(account_id)
    if asset_class:
        queryset = queryset.for_asset_class(asset_class)
    if currency:
        queryset = queryset.for_currency(currency)
    if min_value is not None:
        queryset = queryset.filter(value_amount__gte=min_value)
    if search:
        queryset = queryset.search(search)
    if isin:
        queryset = queryset.for_isin(isin)
    return queryset


def ordered_positions(sort: str | None = None):
    """
    All positions ordered by ``sort`` (``field`` or ``field,asc|desc``).

    Raises:
        ValueError: If the field is not sortable or the direction is unknown.
    """
    if not sort:
        return Position.objects.order_by("id")

    field_name, _, direction = sort.partition(",")
    field_name = field_name.strip()
    direction = (direction or "asc").strip().lower()
    if field_name not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by '{field_name}'")
    if direction not in ("asc", "desc"):
        raise ValueError(f"Unknown sort direction '{direction}'")

    prefix = "-" if direction == "desc" else ""
    return Position.objects.order_by(f"{prefix}{field_name}", "id")


def top_positions(limit: int = 10) -> list[Position]:
    return list(Position.objects.top_by_value(limit))


def distinct_values(field_name: str) -> list[str]:
    """Sorted distinct non-null values of a text column."""
    return list(
        Position.objects.exclude(**{f"{field_name}__isnull": True})
        .order_by(field_name)
        .values_list(field_name, flat=True)
        .distinct()
    )


def distinct_account_ids() -> list[str]:
    return distinct_values("account_id")


def value_by_asset_class() -> list[dict]:
    """Summed value per asset class label, largest first."""
    rows = (
        Position.objects.values("asset_class_description_short")
        .annotate(position_count=Count("id"), total_value=Sum("value_amount"))
        .order_by("-total_value", "asset_class_description_short")
    )
    return [
        {
            "asset_class": row["asset_class_description_short"],
            "position_count": row["position_count"],
            "total_value": row["total_value"],
        }
        for row in rows
    ]


def value_by_currency() -> list[dict]:
    """Summed value per value currency, largest first."""
    rows = (
        Position.objects.values("value_currency")
        .annotate(position_count=Count("id"), total_value=Sum("value_amount"))
        .order_by("-total_value", "value_currency")
    )
    return [
        {
            "currency": row["value_currency"],
            "position_count": row["position_count"],
            "total_value": row["total_value"],
        }
        for row in rows
    ]
