"""
URL configuration for analytics app.
"""

from django.urls import path

from apps.analytics import views

app_name = "analytics"

urlpatterns = [
    path("accounts/", views.account_summaries, name="account_summaries"),
    path("accounts/list/", views.account_ids, name="account_ids"),
    path(
        "accounts/<str:account_id>/details/",
        views.account_details,
        name="account_details",
    ),
    path("summary/", views.portfolio_summary, name="portfolio_summary"),
    path(
        "summary/partner/<str:partner_id>/",
        views.partner_summary,
        name="partner_summary",
    ),
    path("stats/", views.database_stats, name="database_stats"),
]
