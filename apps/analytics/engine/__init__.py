"""
Analytics engine module.

Computation over positions, kept apart from views so it can be tested with
in-memory positions.

Key modules:
- aggregation: Account summaries (count, total, average per currency)
- details: Account details (currency totals, asset classes, primary currency)
- risk: Concentration, FX exposure and risk tier
- summary: Store-wide and per-partner summaries
"""

from apps.analytics.engine.aggregation import (
    AccountSummary,
    get_account_summaries,
    summarize_accounts,
)
from apps.analytics.engine.details import (
    AccountDetails,
    PositionSummary,
    build_account_details,
    get_account_details,
)
from apps.analytics.engine.risk import (
    RiskLevel,
    RiskMetrics,
    classify_risk_level,
    compute_risk_metrics,
)
from apps.analytics.engine.summary import (
    get_database_stats,
    get_portfolio_summary,
    summarize_partner,
)

__all__ = [
    "AccountSummary",
    "summarize_accounts",
    "get_account_summaries",
    "AccountDetails",
    "PositionSummary",
    "build_account_details",
    "get_account_details",
    "RiskLevel",
    "RiskMetrics",
    "classify_risk_level",
    "compute_risk_metrics",
    "summarize_partner",
    "get_portfolio_summary",
    "get_database_stats",
]
