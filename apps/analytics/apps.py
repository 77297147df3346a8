"""
Django app configuration for analytics app.

Account summaries, account details and risk metrics computed from positions.
The app owns no models.
"""

from __future__ import annotations

from django.apps import AppConfig


class AnalyticsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.analytics"
