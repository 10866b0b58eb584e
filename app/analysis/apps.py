"""
Django app configuration for analysis.
"""

from django.apps import AppConfig


class AnalysisConfig(AppConfig):
    """Configuration for the analysis application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "analysis"
    verbose_name = "Analyses"
