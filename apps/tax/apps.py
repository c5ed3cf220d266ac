"""Tax app configuration."""

from django.apps import AppConfig


class TaxConfig(AppConfig):
    """Configuration for the tax regions application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.tax"
    verbose_name = "Tax"
