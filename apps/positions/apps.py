"""
Django app configuration for positions app.

This app handles portfolio positions, including:
- Position model and import tracking
- Spreadsheet ingestion
- Position CRUD and query endpoints
- Import and clear management commands
"""

from __future__ import annotations

from django.apps import AppConfig


class PositionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.positions"
    verbose_name = "Portfolio Positions"
