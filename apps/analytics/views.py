"""
JSON views for account analytics.

This module provides account summaries, account details with risk metrics,
the portfolio and partner summaries and database statistics.
"""

from __future__ import annotations

import logging

from django.views.decorators.http import require_GET

from apps.analytics.engine import (
    get_account_details,
    get_account_summaries,
    get_database_stats,
    get_portfolio_summary,
    summarize_partner,
)
from apps.positions.services.positions import distinct_account_ids
from libs.responses import api_view, json_error, json_list, json_success

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on"}


@require_GET
@api_view
def account_summaries(request):
    """One summary per (account, partner, currency) group."""
    return json_list([summary.to_dict() for summary in get_account_summaries()])


@require_GET
@api_view
def account_ids(request):
    return json_list(distinct_account_ids())


@require_GET
@api_view
def account_details(request, account_id: str):
    """
    Details and risk metrics of one account.

    ``includePositions=false`` leaves out the position summaries.
    """
    include_positions = (
        request.GET.get("includePositions", "true").strip().lower() in TRUE_VALUES
    )
    details = get_account_details(account_id, include_positions=include_positions)
    if details.position_count == 0:
        return json_error(f"Not found: Account {account_id} has no positions", status=404)

    logger.debug(
        "Account %s: %d positions, risk %s",
        account_id,
        details.position_count,
        details.risk_metrics.risk_level,
    )
    return json_success(details.to_dict())


@require_GET
@api_view
def portfolio_summary(request):
    return json_success(get_portfolio_summary())


@require_GET
@api_view
def partner_summary(request, partner_id: str):
    return json_success(summarize_partner(partner_id))


@require_GET
@api_view
def database_stats(request):
    return json_success(get_database_stats())
